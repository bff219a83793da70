"""
Structural validation for sign-in and registration input.

Pydantic models carry the field rules; `validate_*` helpers translate pydantic
errors into one `ValidationError` whose message lists every failing field in
form order, e.g. "Invalid email address, Password must be at least 6 characters".
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError


MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100


class Credentials(BaseModel):
    """Sign-in input. Password is excluded from repr to keep it out of logs."""

    model_config = ConfigDict(frozen=True)

    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, repr=False)


class RegistrationProfile(BaseModel):
    """Sign-up input; phone is optional and its format is not checked."""

    model_config = ConfigDict(frozen=True)

    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, repr=False)
    full_name: str = Field(min_length=MIN_NAME_LENGTH, max_length=MAX_NAME_LENGTH)
    phone: Optional[str] = None

    def metadata(self) -> dict[str, str]:
        """User metadata handed to the provider at sign-up."""
        return {"full_name": self.full_name, "phone": self.phone or ""}


def _message_for(field: str, error_type: str) -> str:
    if field == "email":
        return "Invalid email address"
    if field == "password":
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if field == "full_name":
        if error_type == "string_too_long":
            return f"Name must be at most {MAX_NAME_LENGTH} characters"
        return f"Name must be at least {MIN_NAME_LENGTH} characters"
    return f"Invalid {field}"


def _to_validation_error(exc: PydanticValidationError) -> ValidationError:
    messages: list[str] = []
    for err in exc.errors():
        loc = err.get("loc") or ("input",)
        msg = _message_for(str(loc[0]), str(err.get("type") or ""))
        if msg not in messages:
            messages.append(msg)
    return ValidationError(messages)


def validate_credentials(email: object, password: object) -> Credentials:
    try:
        return Credentials(email=email, password=password)
    except PydanticValidationError as exc:
        raise _to_validation_error(exc) from None


def validate_registration(
    *, email: object, password: object, full_name: object, phone: object = None
) -> RegistrationProfile:
    # Empty phone fields arrive as "" from forms; keep them optional.
    phone_value = phone if phone not in ("", None) else None
    try:
        return RegistrationProfile(email=email, password=password, full_name=full_name, phone=phone_value)
    except PydanticValidationError as exc:
        raise _to_validation_error(exc) from None


__all__ = [
    "Credentials",
    "MIN_PASSWORD_LENGTH",
    "RegistrationProfile",
    "validate_credentials",
    "validate_registration",
]
