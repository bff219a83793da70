"""
Identity domain types: channels, roles and route targets.

Why:
- Channels and roles are closed enumerations so that an unknown value fails at
  construction time (`Channel("root")` raises ValueError) instead of slipping
  through as a free-form string.
- Wire values match the `role` column of the `user_roles` table.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Server-recorded authorization level of a user identity."""

    ADMIN = "admin"
    STAFF = "staff"
    CUSTOMER = "customer"
    DELIVERER = "deliverer"


class Channel(str, Enum):
    """Login surface (tab) the user selected on the sign-in page."""

    ADMIN = "admin"
    STAFF = "staff"
    CUSTOMER = "customer"
    DELIVERER = "deliverer"

    @property
    def required_role(self) -> Role:
        return _CHANNEL_ROLES[self]


class SignUpChannel(str, Enum):
    """Self-registration surfaces. Admin and deliverer accounts are provisioned elsewhere."""

    CUSTOMER = "customer"
    STAFF = "staff"

    @property
    def role(self) -> Role:
        return Role(self.value)


class RouteTarget(str, Enum):
    """Post-authentication application areas."""

    ADMIN_CONSOLE = "admin_console"
    DELIVERY_CONSOLE = "delivery_console"
    CUSTOMER_PORTAL = "customer_portal"


_CHANNEL_ROLES = {
    Channel.ADMIN: Role.ADMIN,
    Channel.STAFF: Role.STAFF,
    Channel.CUSTOMER: Role.CUSTOMER,
    Channel.DELIVERER: Role.DELIVERER,
}

# Admin and staff share one console but are gated independently (see gate.py).
ROLE_ROUTES = {
    Role.ADMIN: RouteTarget.ADMIN_CONSOLE,
    Role.STAFF: RouteTarget.ADMIN_CONSOLE,
    Role.CUSTOMER: RouteTarget.CUSTOMER_PORTAL,
    Role.DELIVERER: RouteTarget.DELIVERY_CONSOLE,
}

DEFAULT_ROUTE_PATHS = {
    RouteTarget.ADMIN_CONSOLE: "/dashboard",
    RouteTarget.DELIVERY_CONSOLE: "/deliverer/dashboard",
    RouteTarget.CUSTOMER_PORTAL: "/user/dashboard",
}

SIGN_IN_CHANNELS = (Channel.ADMIN, Channel.STAFF, Channel.DELIVERER, Channel.CUSTOMER)
SIGN_UP_CHANNELS = (SignUpChannel.CUSTOMER, SignUpChannel.STAFF)


def route_for_role(role: Optional[Role]) -> Optional[RouteTarget]:
    """Role -> Route table. Returns None for an absent role."""
    if role is None:
        return None
    return ROLE_ROUTES.get(role)


ALLOWED_ROLES = frozenset(r.value for r in Role)


def parse_role(raw: object) -> Optional[Role]:
    """Parse a stored role value; unknown values yield None."""
    if isinstance(raw, Role):
        return raw
    if not isinstance(raw, str):
        return None
    value = raw.strip().lower()
    if value not in ALLOWED_ROLES:
        return None
    return Role(value)


@dataclass(frozen=True)
class Session:
    user_id: str
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None


@dataclass(frozen=True)
class RoleRecord:
    user_id: str
    role: Role


__all__ = [
    "ALLOWED_ROLES",
    "Channel",
    "DEFAULT_ROUTE_PATHS",
    "ROLE_ROUTES",
    "Role",
    "RoleRecord",
    "RouteTarget",
    "SIGN_IN_CHANNELS",
    "SIGN_UP_CHANNELS",
    "Session",
    "SignUpChannel",
    "parse_role",
    "route_for_role",
]
