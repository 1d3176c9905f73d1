"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(default="sqlite:///./flood_alert.db")

    # Redis (celery broker)
    redis_url: str = Field(default="redis://localhost:6379/0")

    # Site
    environment: str = Field(default="development")
    base_url: str = Field(default="http://127.0.0.1:3000")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000)
    log_level: str = Field(default="INFO")

    # Unsubscribe links are signed with this secret
    unsubscribe_secret: str = Field(default="change-me-in-production")

    # Mail
    mail_backend: str = Field(default="console")  # console | mailgun | smtp
    mail_from: str = Field(default="Bike Path Flood Alert <no-reply@localhost>")
    mailgun_api_key: str | None = Field(default=None)
    mailgun_domain: str | None = Field(default=None)
    smtp_host: str = Field(default="localhost")
    smtp_port: int = Field(default=587)
    smtp_username: str | None = Field(default=None)
    smtp_password: str | None = Field(default=None)
    smtp_use_tls: bool = Field(default=True)

    # Tides
    noaa_station_id: str = Field(default="9414819")  # Sausalito
    noaa_timezone: str = Field(default="America/Los_Angeles")
    flood_threshold_ft: float = Field(default=6.4)
    forecast_days: int = Field(default=30)
    alert_lookahead_hours: int = Field(default=24)

    # Cloudflare tunnel, read by the deployment only
    tunnel_token: str | None = Field(default=None)

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.is_production:
            if self.unsubscribe_secret == "change-me-in-production":  # noqa: S105
                raise ValueError("UNSUBSCRIBE_SECRET must be changed in production")
            if self.mail_backend == "console":
                raise ValueError("MAIL_BACKEND must be mailgun or smtp in production")
        if self.mail_backend not in ("console", "mailgun", "smtp"):
            raise ValueError(f"Unknown MAIL_BACKEND: {self.mail_backend}")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
