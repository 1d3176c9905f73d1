"""Signup, verification and unsubscribe endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from src.api.dependencies import get_mailer
from src.config import get_settings
from src.database import get_db
from src.schemas.signup import SignUpRequest
from src.services.exceptions import MailDeliveryError
from src.services.mail import Mailer
from src.services.subscribers import (
    build_verification_link,
    register_signup,
    set_subscription,
    unsubscribe,
    verify_user,
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(tags=["signup"], default_response_class=PlainTextResponse)


@router.post("/signup")
async def sign_up(
    payload: SignUpRequest,
    db: Annotated[Session, Depends(get_db)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
):
    """Register an email address and send it a verification link."""
    user = register_signup(db, payload.email)
    link = build_verification_link(settings.base_url, user)

    try:
        await mailer.send_verification_email(user.email, link)
    except MailDeliveryError as e:
        raise MailDeliveryError("Failed to send verification email.") from e

    return "Verification email sent!"


@router.get("/verify")
async def verify(
    token: Annotated[str, Query(min_length=1)],
    db: Annotated[Session, Depends(get_db)],
):
    """Redeem a verification token and subscribe the user."""
    user_id = verify_user(db, token)
    set_subscription(db, user_id, True)
    return "Email verified and subscribed!"


@router.get("/unsubscribe")
async def unsubscribe_link(
    id: Annotated[str, Query(min_length=1)],
    token: Annotated[str, Query(min_length=1)],
    db: Annotated[Session, Depends(get_db)],
):
    """One-click unsubscribe from a signed link."""
    unsubscribe(db, id, token, settings.unsubscribe_secret)
    return "You have been unsubscribed."
