"""Signup schemas."""

from pydantic import BaseModel, EmailStr, Field


class SignUpRequest(BaseModel):
    """Mailing list signup request."""

    email: EmailStr = Field(..., max_length=255)
