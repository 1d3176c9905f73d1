"""Celery application configuration."""

from celery import Celery
from celery.schedules import crontab

from src.config import get_settings

settings = get_settings()

app = Celery(
    "flood_alert",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["src.tasks.tides"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.noaa_timezone,
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    task_soft_time_limit=240,  # 4 minutes soft limit
)

app.conf.beat_schedule = {
    "sync-tide-predictions": {
        "task": "src.tasks.tides.sync_tide_predictions",
        "schedule": crontab(hour=3, minute=0),
    },
    "send-flood-alerts": {
        "task": "src.tasks.tides.send_flood_alerts",
        "schedule": crontab(hour=6, minute=0),
    },
}
