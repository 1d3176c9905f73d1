"""Flood alert delivery to the mailing list."""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from src.config import get_settings
from src.services.exceptions import MailDeliveryError
from src.services.mail import Mailer
from src.services.subscribers import build_unsubscribe_link, get_user, list_mailing_list
from src.services.tides import FloodPrediction, get_flood_tides

logger = logging.getLogger(__name__)


async def send_flood_alerts(
    db: Session,
    mailer: Mailer | None = None,
    now: datetime | None = None,
    lookahead_hours: int | None = None,
) -> dict:
    """Email every mailing list member about floods in the lookahead window.

    A failed delivery is logged and the remaining recipients still get mail.

    Returns:
        dict with delivery statistics
    """
    settings = get_settings()
    mailer = mailer or Mailer()
    now = now or datetime.now(UTC)
    if lookahead_hours is None:
        lookahead_hours = settings.alert_lookahead_hours

    stats = {"floods": 0, "recipients": 0, "sent": 0, "failed": 0}

    tides = get_flood_tides(db, now, now + timedelta(hours=lookahead_hours))
    stats["floods"] = len(tides)
    if not tides:
        logger.info("No flood tides in the alert window, nothing to send")
        return stats

    floods = [FloodPrediction.from_tide(t.prediction_time, t.height_ft) for t in tides]
    recipients = list_mailing_list(db)
    stats["recipients"] = len(recipients)

    for entry in recipients:
        user = get_user(db, entry.user_id)
        link = build_unsubscribe_link(settings.base_url, user, settings.unsubscribe_secret)
        try:
            await mailer.send_flood_alert(entry.email, floods, link)
            stats["sent"] += 1
        except MailDeliveryError as e:
            logger.error(f"Flood alert to user {entry.user_id} failed: {e}")
            stats["failed"] += 1

    logger.info(f"Flood alert run complete: {stats}")
    return stats
