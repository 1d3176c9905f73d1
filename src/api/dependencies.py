"""FastAPI dependencies for services."""

from src.services.mail import Mailer


def get_mailer() -> Mailer:
    """Get mailer instance."""
    return Mailer()
