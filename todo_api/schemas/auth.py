"""Authentication schemas."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


def check_email(value: str) -> str:
    """Validate email syntax but keep the address exactly as submitted.

    Emails are stored and matched case-sensitively, so the normalized form
    email-validator produces is discarded.
    """
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise PydanticCustomError("value_error", "Please provide a valid email") from None
    return value


Email = Annotated[str, Field(max_length=255), AfterValidator(check_email)]


class UserRegister(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=255)
    email: Email
    password: str = Field(..., min_length=6, max_length=128)


class UserLogin(BaseModel):
    """User login request."""

    email: Email
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(BaseModel):
    """Public user information. The password hash is never part of it."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: UUID
    name: str
    email: str


class AuthResponse(BaseModel):
    """Authentication response. The session token travels in a cookie."""

    user: UserResponse


class MeResponse(UserResponse):
    """Current user information including account creation time."""

    created_at: datetime


class MessageResponse(BaseModel):
    message: str
