"""
Ports consumed by the identity use cases.

Keep these small and framework-agnostic so tests can supply simple fakes.
Provider/directory methods are coroutines: every step of a flow awaits an
external store.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from .domain import Role, RoleRecord, RouteTarget, Session
from .validation import RegistrationProfile


class AuthProvider(Protocol):
    """Credential store plus session persistence.

    Errors:
        `sign_in` and `sign_up` raise `AuthError` carrying the provider message.
        `sign_out` is best-effort; callers ignore its failures.
    """

    async def get_session(self) -> Optional[Session]: ...

    async def sign_in(self, email: str, password: str) -> str: ...

    async def sign_up(self, profile: RegistrationProfile, redirect_to: str) -> Optional[str]: ...

    async def sign_out(self) -> None: ...


class RoleDirectory(Protocol):
    """Role lookup keyed by user identity (one record per user).

    Errors:
        `get_role` raises `RoleLookupError` for ambiguous/unknown records or
        failed calls and returns None when no record exists.
        `insert_role` raises `RoleAssignmentError`.
    """

    async def get_role(self, user_id: str) -> Optional[RoleRecord]: ...

    async def insert_role(self, user_id: str, role: Role) -> None: ...


class Navigator(Protocol):
    def go_to(self, target: RouteTarget, *, replace_history: bool = False) -> None: ...


class Severity(str, Enum):
    DEFAULT = "default"
    WARNING = "warning"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    severity: Severity = Severity.DEFAULT


class Notifier(Protocol):
    def show(self, notification: Notification) -> None: ...


__all__ = ["AuthProvider", "Navigator", "Notification", "Notifier", "RoleDirectory", "Severity"]
