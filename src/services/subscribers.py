"""User and mailing list operations."""

import logging
from typing import NamedTuple
from urllib.parse import urlencode

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.models.mixins import utcnow
from src.models.user import User, new_token
from src.services.exceptions import DuplicateEmailError, InvalidTokenError, UserNotFoundError

logger = logging.getLogger(__name__)


class MailingListEntry(NamedTuple):
    """A recipient of flood alerts."""

    user_id: str
    email: str


def normalize_email(email: str) -> str:
    """Normalize an email address for storage and lookup."""
    return email.strip().lower()


def save_user(db: Session, user: User) -> User:
    """Persist a user, stamping ``updated_at``.

    All user mutations go through here.
    """
    user.updated_at = utcnow()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user(db: Session, user_id: str) -> User | None:
    """Get a user by id."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def create_user(db: Session, email: str, token: str) -> str:
    """Create an unverified, unsubscribed user and return its id.

    Raises:
        DuplicateEmailError: if the email is already registered
    """
    email = normalize_email(email)
    if get_user_by_email(db, email):
        raise DuplicateEmailError("Email already registered")

    user = User(email=email, verification_token=token)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent signup for the same address
        db.rollback()
        raise DuplicateEmailError("Email already registered") from e
    db.refresh(user)
    logger.info(f"Created user {user.id}")
    return user.id


def register_signup(db: Session, email: str) -> User:
    """Handle a signup form submission.

    New addresses get a user row. An address that signed up but never
    verified gets a fresh token so the verification email can be re-sent.

    Raises:
        DuplicateEmailError: if the address is already verified
    """
    existing = get_user_by_email(db, email)
    if existing is None:
        user_id = create_user(db, email, new_token())
        return get_user(db, user_id)

    if existing.is_verified:
        raise DuplicateEmailError()

    existing.verification_token = new_token()
    logger.info(f"Re-issued verification token for user {existing.id}")
    return save_user(db, existing)


def verify_user(db: Session, token: str) -> str:
    """Redeem a verification token and return the user id.

    Raises:
        InvalidTokenError: if no unverified user holds the token
    """
    user = (
        db.query(User)
        .filter(User.verification_token == token, User.is_verified == False)  # noqa: E712
        .first()
    )
    if user is None:
        raise InvalidTokenError()

    user.is_verified = True
    save_user(db, user)
    logger.info(f"Verified user {user.id}")
    return user.id


def set_subscription(db: Session, user_id: str, subscribed: bool) -> User:
    """Subscribe or unsubscribe a user. Repeating a call changes nothing.

    Raises:
        UserNotFoundError: if the user does not exist
    """
    user = get_user(db, user_id)
    if user is None:
        raise UserNotFoundError()

    if user.is_subscribed == subscribed:
        return user

    user.is_subscribed = subscribed
    logger.info(f"User {user.id} subscribed={subscribed}")
    return save_user(db, user)


def list_mailing_list(db: Session) -> list[MailingListEntry]:
    """Get the users who should receive flood alerts."""
    rows = (
        db.query(User.id, User.email)
        .filter(User.is_verified == True, User.is_subscribed == True)  # noqa: E712
        .all()
    )
    return [MailingListEntry(user_id, email) for user_id, email in rows]


def unsubscribe(db: Session, user_id: str, token: str, secret: str) -> User:
    """Unsubscribe via a signed link.

    Raises:
        InvalidTokenError: if the user is unknown or the signature is wrong
    """
    user = get_user(db, user_id)
    if user is None or not user.verify_unsubscribe_token(token, secret):
        raise InvalidTokenError("Invalid unsubscribe link")
    return set_subscription(db, user.id, False)


def build_verification_link(base_url: str, user: User) -> str:
    """Link that redeems the user's verification token."""
    return f"{base_url.rstrip('/')}/verify?{urlencode({'token': user.verification_token})}"


def build_unsubscribe_link(base_url: str, user: User, secret: str) -> str:
    """Signed one-click unsubscribe link."""
    query = urlencode({"id": user.id, "token": user.generate_unsubscribe_token(secret)})
    return f"{base_url.rstrip('/')}/unsubscribe?{query}"
