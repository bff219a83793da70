"""Identity use cases: session bootstrap, sign-in and sign-up.

Why:
    Keep the role-gated routing rules framework-free so the web adapter stays
    thin and every branch can be unit-tested with fakes for the ports.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional
import logging

from .domain import (
    DEFAULT_ROUTE_PATHS,
    Channel,
    Role,
    RouteTarget,
    SignUpChannel,
    route_for_role,
)
from .errors import AuthError, ChannelMismatchError, RoleAssignmentError, RoleLookupError
from .gate import Accept, gate
from .ports import AuthProvider, Navigator, Notification, Notifier, RoleDirectory, Severity
from .validation import validate_credentials, validate_registration


logger = logging.getLogger("tailorpro.identity_access")


def _short(user_id: str) -> str:
    return str(user_id)[-6:]


async def _lookup_role(roles: RoleDirectory, user_id: str) -> Optional[Role]:
    """Return the recorded role or None; lookup failures count as "no role"."""
    try:
        record = await roles.get_role(user_id)
    except RoleLookupError as exc:
        logger.warning("Role lookup failed for user=%s: %s", _short(user_id), exc.message)
        return None
    return record.role if record is not None else None


async def _discard_session(auth: AuthProvider) -> None:
    try:
        await auth.sign_out()
    except Exception as exc:
        # Sign-out is best-effort; the caller reports the original failure.
        logger.warning("Provider sign-out failed: %s", exc.__class__.__name__)


class BootstrapStatus(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    REDIRECTED = "redirected"
    UNRECOGNIZED_ROLE = "unrecognized_role"


@dataclass(frozen=True)
class BootstrapResult:
    status: BootstrapStatus
    target: Optional[RouteTarget] = None


class SessionBootstrapUseCase:
    def __init__(self, auth: AuthProvider, roles: RoleDirectory, navigator: Navigator) -> None:
        self._auth = auth
        self._roles = roles
        self._navigator = navigator

    async def execute(self) -> BootstrapResult:
        """Silently forward an already signed-in user to their area.

        Behavior:
            - No session: report "unauthenticated", no navigation.
            - Session with a recognized role: navigate with history
              replacement so "back" does not return to the login screen.
            - Session without a recognized role: stay on the login surface
              (fail-open); no error is surfaced.
        """
        session = await self._auth.get_session()
        if session is None:
            return BootstrapResult(BootstrapStatus.UNAUTHENTICATED)

        role = await _lookup_role(self._roles, session.user_id)
        target = route_for_role(role)
        if target is None:
            logger.info("Session without recognized role for user=%s; staying on login", _short(session.user_id))
            return BootstrapResult(BootstrapStatus.UNRECOGNIZED_ROLE)

        self._navigator.go_to(target, replace_history=True)
        logger.info("Restored session for user=%s -> %s", _short(session.user_id), target.value)
        return BootstrapResult(BootstrapStatus.REDIRECTED, target)


@dataclass
class SignInInput:
    email: str
    password: str
    channel: Channel


class SignInUseCase:
    def __init__(self, auth: AuthProvider, roles: RoleDirectory, navigator: Navigator) -> None:
        self._auth = auth
        self._roles = roles
        self._navigator = navigator

    async def execute(self, req: SignInInput) -> RouteTarget:
        """Authenticate and route through the channel/role gate.

        Raises:
            ValidationError: malformed email or short password (no provider call).
            AuthError: provider rejected the credentials (no role lookup).
            ChannelMismatchError: role does not match the selected channel; the
                freshly created session has been signed out.
        """
        channel = Channel(req.channel)
        creds = validate_credentials(req.email, req.password)

        user_id = await self._auth.sign_in(creds.email, creds.password)
        if not user_id:
            raise AuthError("Sign-in failed (no user returned).")

        role = await _lookup_role(self._roles, user_id)
        decision = gate(channel, role)
        if isinstance(decision, Accept):
            self._navigator.go_to(decision.target, replace_history=False)
            logger.info("Sign-in accepted for user=%s via channel=%s", _short(user_id), channel.value)
            return decision.target

        await _discard_session(self._auth)
        logger.info("Sign-in rejected for user=%s via channel=%s", _short(user_id), channel.value)
        raise ChannelMismatchError(decision.message, channel=channel)


@dataclass
class SignUpInput:
    email: str
    password: str
    full_name: str
    channel: SignUpChannel
    phone: Optional[str] = None
    redirect_base: str = ""


@dataclass(frozen=True)
class SignUpResult:
    user_id: Optional[str]
    target: RouteTarget
    role_assigned: bool


REGISTRATION_SUCCESS = Notification(
    title="Registration successful!",
    description="Please check your email to verify your account.",
)

ROLE_PENDING_WARNING = Notification(
    title="Account setup incomplete",
    description=(
        "Your account was created, but its access role could not be recorded. "
        "Please contact support before signing in."
    ),
    severity=Severity.WARNING,
)


class SignUpUseCase:
    def __init__(
        self,
        auth: AuthProvider,
        roles: RoleDirectory,
        navigator: Navigator,
        notifier: Notifier,
        route_paths: Optional[Mapping[RouteTarget, str]] = None,
    ) -> None:
        self._auth = auth
        self._roles = roles
        self._navigator = navigator
        self._notifier = notifier
        self._route_paths = dict(route_paths or DEFAULT_ROUTE_PATHS)

    async def execute(self, req: SignUpInput) -> SignUpResult:
        """Create an account whose role is the selected sign-up channel.

        Behavior:
            - The channel is the authority for a brand-new account, so the role
              record is written directly (no gate).
            - The verification link points at the channel's area.
            - Success is reported once the provider accepted the registration.
              A failed role write is logged and shown as a separate warning
              instead of being dropped silently.
            - Redirects optimistically; the account may still await email
              verification.

        Raises:
            ValidationError, AuthError.
        """
        channel = SignUpChannel(req.channel)
        profile = validate_registration(
            email=req.email, password=req.password, full_name=req.full_name, phone=req.phone
        )
        role = channel.role
        target = route_for_role(role)
        redirect_to = f"{req.redirect_base.rstrip('/')}{self._route_paths[target]}"

        user_id = await self._auth.sign_up(profile, redirect_to)

        role_assigned = False
        if user_id:
            try:
                await self._roles.insert_role(user_id, role)
                role_assigned = True
            except RoleAssignmentError as exc:
                logger.error("Role assignment failed for user=%s role=%s: %s", _short(user_id), role.value, exc.message)

        self._notifier.show(REGISTRATION_SUCCESS)
        if user_id and not role_assigned:
            self._notifier.show(ROLE_PENDING_WARNING)
        logger.info("Registered account via channel=%s (role_assigned=%s)", channel.value, role_assigned)

        self._navigator.go_to(target, replace_history=False)
        return SignUpResult(user_id=user_id, target=target, role_assigned=role_assigned)


__all__ = [
    "BootstrapResult",
    "BootstrapStatus",
    "REGISTRATION_SUCCESS",
    "ROLE_PENDING_WARNING",
    "SessionBootstrapUseCase",
    "SignInInput",
    "SignInUseCase",
    "SignUpInput",
    "SignUpResult",
    "SignUpUseCase",
]
