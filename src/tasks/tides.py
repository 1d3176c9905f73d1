"""Celery tasks for the tide cache and flood alerts."""

import asyncio
import logging

from sqlalchemy.orm import Session

from src.celery_app import app as celery_app
from src.database import SessionLocal
from src.services.alerts import send_flood_alerts as deliver_flood_alerts
from src.services.exceptions import TideFetchError
from src.services.tide_sync import update_tide_predictions

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def sync_tide_predictions(self) -> dict:
    """Refresh the cached tide predictions from NOAA.

    Runs daily via celery-beat. NOAA outages are retried with a growing delay.

    Returns:
        dict with the number of cached predictions
    """
    db: Session = SessionLocal()
    try:
        count = asyncio.run(update_tide_predictions(db))
        logger.info(f"Tide sync cached {count} predictions")
        return {"cached": count}

    except TideFetchError as e:
        logger.warning(f"Tide sync failed, retrying: {e}")
        raise self.retry(exc=e, countdown=60 * (2**self.request.retries)) from e

    finally:
        db.close()


@celery_app.task
def send_flood_alerts() -> dict:
    """Email the mailing list about upcoming flood tides.

    Runs daily via celery-beat, after the tide sync.

    Returns:
        dict with delivery statistics
    """
    db: Session = SessionLocal()
    try:
        return asyncio.run(deliver_flood_alerts(db))

    except Exception as e:
        logger.error(f"Error sending flood alerts: {e}", exc_info=True)
        db.rollback()
        return {"error": str(e)}

    finally:
        db.close()
