"""Outgoing email for verification links and flood alerts."""

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from email.utils import parseaddr

import httpx

from src.config import Settings, get_settings
from src.services.exceptions import MailDeliveryError
from src.services.tides import FloodPrediction

logger = logging.getLogger(__name__)


def render_verification_email(verification_link: str) -> tuple[str, str, str]:
    """Build (subject, text, html) for a verification email."""
    subject = "Please verify your email"
    text = (
        "Welcome! Please verify your email address to start receiving flood "
        f"predictions for the bike path: {verification_link}"
    )
    html = (
        "<p>Welcome! Please verify your email address to start receiving flood "
        "predictions for the Mill Valley&ndash;Sausalito bike path.</p>"
        f'<p><a href="{verification_link}">Verify my email</a></p>'
    )
    return subject, text, html


def render_flood_alert(
    floods: list[FloodPrediction], unsubscribe_link: str
) -> tuple[str, str, str]:
    """Build (subject, text, html) for a flood alert."""
    count = len(floods)
    subject = "Bike path flood alert" if count == 1 else f"Bike path flood alert ({count} tides)"
    lines = [f"- {flood.datetime}: {flood.height} ft" for flood in floods]
    text = (
        "High tides are predicted to flood the Mill Valley-Sausalito bike path:\n\n"
        + "\n".join(lines)
        + f"\n\nUnsubscribe: {unsubscribe_link}\n"
    )
    items = "".join(f"<li>{flood.datetime}: {flood.height} ft</li>" for flood in floods)
    html = (
        "<p>High tides are predicted to flood the Mill Valley&ndash;Sausalito bike path:</p>"
        f"<ul>{items}</ul>"
        f'<p><small><a href="{unsubscribe_link}">Unsubscribe</a></small></p>'
    )
    return subject, text, html


class Mailer:
    """Sends email through the configured backend (console, mailgun or smtp)."""

    MAILGUN_API_URL = "https://api.mailgun.net/v3"

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.backend = self.settings.mail_backend
        self._transport = transport

    async def send(self, to_email: str, subject: str, text: str, html: str | None = None) -> None:
        """Send a single message.

        Raises:
            MailDeliveryError: if the backend rejects the message or is unreachable
        """
        if self.backend == "mailgun":
            await self._send_mailgun(to_email, subject, text, html)
        elif self.backend == "smtp":
            await asyncio.to_thread(self._send_smtp, to_email, subject, text, html)
        else:
            logger.info(f"[console mail] to={to_email} subject={subject!r}\n{text}")

    async def send_verification_email(self, to_email: str, verification_link: str) -> None:
        subject, text, html = render_verification_email(verification_link)
        await self.send(to_email, subject, text, html)

    async def send_flood_alert(
        self, to_email: str, floods: list[FloodPrediction], unsubscribe_link: str
    ) -> None:
        subject, text, html = render_flood_alert(floods, unsubscribe_link)
        await self.send(to_email, subject, text, html)

    async def _send_mailgun(
        self, to_email: str, subject: str, text: str, html: str | None
    ) -> None:
        if not self.settings.mailgun_api_key or not self.settings.mailgun_domain:
            raise MailDeliveryError("Mailgun is not configured")

        url = f"{self.MAILGUN_API_URL}/{self.settings.mailgun_domain}/messages"
        data = {
            "from": self.settings.mail_from,
            "to": to_email,
            "subject": subject,
            "text": text,
        }
        if html:
            data["html"] = html

        try:
            async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
                response = await client.post(
                    url,
                    auth=("api", self.settings.mailgun_api_key),
                    data=data,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Mailgun send to {to_email} failed: {e}")
            raise MailDeliveryError(f"Mailgun send failed: {e}") from e

        logger.info(f"Sent {subject!r} to {to_email} via Mailgun")

    def _send_smtp(self, to_email: str, subject: str, text: str, html: str | None) -> None:
        message = EmailMessage()
        message["From"] = self.settings.mail_from
        message["To"] = to_email
        message["Subject"] = subject
        message.set_content(text)
        if html:
            message.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=30) as smtp:
                if self.settings.smtp_use_tls:
                    smtp.starttls()
                if self.settings.smtp_username and self.settings.smtp_password:
                    smtp.login(self.settings.smtp_username, self.settings.smtp_password)
                smtp.send_message(message, from_addr=parseaddr(self.settings.mail_from)[1])
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP send to {to_email} failed: {e}")
            raise MailDeliveryError(f"SMTP send failed: {e}") from e

        logger.info(f"Sent {subject!r} to {to_email} via SMTP")
