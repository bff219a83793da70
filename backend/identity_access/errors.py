"""
Error taxonomy for the sign-in/sign-up flows.

All user-facing failures derive from `IdentityAccessError`; page controllers
catch this base class and show the message through the Notifier. Anything
else is a programming error and propagates.
"""

from __future__ import annotations

from typing import Optional


class IdentityAccessError(Exception):
    """Base class for recoverable identity errors (user stays on the page)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(IdentityAccessError, ValueError):
    """Structural input failure; never reaches the provider."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__(", ".join(messages))
        self.messages = list(messages)


class AuthError(IdentityAccessError):
    """Provider rejected credentials or registration; message is shown verbatim."""


class ChannelMismatchError(IdentityAccessError):
    """Gate rejection after a successful sign-in; the session was discarded."""

    def __init__(self, message: str, *, channel: object) -> None:
        super().__init__(message)
        self.channel = channel


class RoleLookupError(IdentityAccessError):
    """Role absent, ambiguous, unrecognized or the directory call failed."""

    def __init__(self, message: str, *, user_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.user_id = user_id


class RoleAssignmentError(IdentityAccessError):
    """Writing the role record for a new account failed."""


__all__ = [
    "AuthError",
    "ChannelMismatchError",
    "IdentityAccessError",
    "RoleAssignmentError",
    "RoleLookupError",
    "ValidationError",
]
