"""User model."""

import hashlib
import hmac
import uuid

from sqlalchemy import Boolean, Column, String

from src.database import Base
from src.models.mixins import TimestampMixin


def new_token() -> str:
    """Generate an opaque verification token."""
    return str(uuid.uuid4())


class User(Base, TimestampMixin):
    """A mailing list signup.

    A user is on the mailing list once both ``is_verified`` and
    ``is_subscribed`` are set.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    verification_token = Column(String(64), nullable=False, default=new_token, index=True)
    is_verified = Column(Boolean, nullable=False, default=False, server_default="0")
    is_subscribed = Column(Boolean, nullable=False, default=False, server_default="0")

    def generate_unsubscribe_token(self, secret: str) -> str:
        """Sign the user id so unsubscribe links cannot be forged."""
        mac = hmac.new(secret.encode(), str(self.id).encode(), hashlib.sha256)
        return mac.hexdigest()

    def verify_unsubscribe_token(self, token: str, secret: str) -> bool:
        """Check an unsubscribe token in constant time."""
        expected = self.generate_unsubscribe_token(secret)
        return hmac.compare_digest(expected.encode(), token.encode())

    def __repr__(self) -> str:
        return f"<User {self.email}>"
