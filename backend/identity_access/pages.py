"""
Page controllers for the login and sign-up screens.

A controller owns the per-page state (selected channel, `loading`,
`checking_auth`) and runs the use cases. Expected failures are turned into
destructive notifications; anything outside the identity error taxonomy
propagates to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Mapping, Optional, Sequence, TypeVar

from .domain import SIGN_IN_CHANNELS, SIGN_UP_CHANNELS, Channel, RouteTarget, SignUpChannel
from .errors import IdentityAccessError
from .ports import AuthProvider, Navigator, Notification, Notifier, RoleDirectory, Severity
from .usecases import (
    BootstrapResult,
    SessionBootstrapUseCase,
    SignInInput,
    SignInUseCase,
    SignUpInput,
    SignUpUseCase,
)


C = TypeVar("C", Channel, SignUpChannel)


class ChannelSelector(Generic[C]):
    """Currently selected channel out of a fixed, ordered set."""

    def __init__(self, allowed: Sequence[C], default: C) -> None:
        if default not in allowed:
            raise ValueError(f"default channel {default!r} is not offered")
        self._kind = type(default)
        self.allowed: tuple[C, ...] = tuple(allowed)
        self._current = default

    @property
    def current(self) -> C:
        return self._current

    def select(self, value: object) -> C:
        channel = self._kind(value)
        if channel not in self.allowed:
            raise ValueError(f"channel {channel.value!r} is not offered here")
        self._current = channel
        return channel


@dataclass(frozen=True)
class SubmitOutcome:
    """Result of one submit.

    `accepted` is False when the submit was ignored because the page was busy.
    """

    accepted: bool
    target: Optional[RouteTarget] = None
    error: Optional[IdentityAccessError] = None
    role_assigned: Optional[bool] = None

    @property
    def ok(self) -> bool:
        return self.accepted and self.error is None


def _error_notification(exc: IdentityAccessError) -> Notification:
    return Notification(title="Error", description=exc.message, severity=Severity.DESTRUCTIVE)


class _AuthPage:
    def __init__(
        self,
        auth: AuthProvider,
        roles: RoleDirectory,
        navigator: Navigator,
        notifier: Notifier,
    ) -> None:
        self._auth = auth
        self._roles = roles
        self._navigator = navigator
        self._notifier = notifier
        self.loading = False
        # The form stays hidden until the session check finished.
        self.checking_auth = True

    @property
    def busy(self) -> bool:
        return self.loading or self.checking_auth

    async def load(self) -> BootstrapResult:
        try:
            return await SessionBootstrapUseCase(self._auth, self._roles, self._navigator).execute()
        finally:
            self.checking_auth = False


class LoginPage(_AuthPage):
    def __init__(
        self,
        auth: AuthProvider,
        roles: RoleDirectory,
        navigator: Navigator,
        notifier: Notifier,
        *,
        channel: Channel = Channel.ADMIN,
    ) -> None:
        super().__init__(auth, roles, navigator, notifier)
        self.channels: ChannelSelector[Channel] = ChannelSelector(SIGN_IN_CHANNELS, Channel(channel))

    async def submit(self, email: str, password: str) -> SubmitOutcome:
        if self.busy:
            return SubmitOutcome(accepted=False)
        # Snapshot: switching tabs mid-flight must not change this attempt.
        channel = self.channels.current
        self.loading = True
        try:
            target = await SignInUseCase(self._auth, self._roles, self._navigator).execute(
                SignInInput(email=email, password=password, channel=channel)
            )
            return SubmitOutcome(accepted=True, target=target)
        except IdentityAccessError as exc:
            self._notifier.show(_error_notification(exc))
            return SubmitOutcome(accepted=True, error=exc)
        finally:
            self.loading = False


class SignupPage(_AuthPage):
    def __init__(
        self,
        auth: AuthProvider,
        roles: RoleDirectory,
        navigator: Navigator,
        notifier: Notifier,
        *,
        channel: SignUpChannel = SignUpChannel.CUSTOMER,
        redirect_base: str = "",
        route_paths: Optional[Mapping[RouteTarget, str]] = None,
    ) -> None:
        super().__init__(auth, roles, navigator, notifier)
        self.channels: ChannelSelector[SignUpChannel] = ChannelSelector(SIGN_UP_CHANNELS, SignUpChannel(channel))
        self._redirect_base = redirect_base
        self._route_paths = route_paths

    async def submit(
        self,
        email: str,
        password: str,
        full_name: str,
        phone: Optional[str] = None,
    ) -> SubmitOutcome:
        if self.busy:
            return SubmitOutcome(accepted=False)
        channel = self.channels.current
        self.loading = True
        try:
            usecase = SignUpUseCase(
                self._auth, self._roles, self._navigator, self._notifier, route_paths=self._route_paths
            )
            result = await usecase.execute(
                SignUpInput(
                    email=email,
                    password=password,
                    full_name=full_name,
                    channel=channel,
                    phone=phone,
                    redirect_base=self._redirect_base,
                )
            )
            return SubmitOutcome(accepted=True, target=result.target, role_assigned=result.role_assigned)
        except IdentityAccessError as exc:
            self._notifier.show(_error_notification(exc))
            return SubmitOutcome(accepted=True, error=exc)
        finally:
            self.loading = False


__all__ = ["ChannelSelector", "LoginPage", "SignupPage", "SubmitOutcome"]
