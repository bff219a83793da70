"""
Page controllers: channel selection, busy flags and error notifications.
"""
from __future__ import annotations

import anyio
import pytest

from identity_access.domain import Channel, RouteTarget, Session, SignUpChannel
from identity_access.errors import AuthError, ChannelMismatchError, ValidationError
from identity_access.pages import ChannelSelector, LoginPage, SignupPage
from identity_access.ports import Severity
from identity_access.stores import InMemoryRoleDirectory
from identity_access.usecases import REGISTRATION_SUCCESS

from identity_fakes import FakeAuthProvider, RecordingNavigator, RecordingNotifier


pytestmark = pytest.mark.anyio("asyncio")

USERS = {"cust@tailor.pro": ("secret1", "cust-000003"), "staff@tailor.pro": ("secret1", "staff-000002")}
ROLES = {"cust-000003": ["customer"], "staff-000002": ["staff"]}


def _login_page(auth=None, **kwargs):
    auth = auth or FakeAuthProvider(USERS)
    nav = RecordingNavigator()
    notifier = RecordingNotifier()
    page = LoginPage(auth, InMemoryRoleDirectory(ROLES), nav, notifier, **kwargs)
    return page, auth, nav, notifier


def test_channel_selector_defaults_and_bounds():
    selector = ChannelSelector((SignUpChannel.CUSTOMER, SignUpChannel.STAFF), SignUpChannel.CUSTOMER)
    assert selector.current is SignUpChannel.CUSTOMER
    assert selector.select("staff") is SignUpChannel.STAFF
    with pytest.raises(ValueError):
        selector.select("admin")
    assert selector.current is SignUpChannel.STAFF


def test_channel_selector_rejects_values_outside_the_offered_set():
    selector = ChannelSelector((Channel.ADMIN, Channel.STAFF), Channel.ADMIN)
    with pytest.raises(ValueError):
        selector.select(Channel.CUSTOMER)
    with pytest.raises(ValueError):
        ChannelSelector((Channel.ADMIN,), Channel.STAFF)


def test_default_tabs():
    login, *_ = _login_page()
    assert login.channels.current is Channel.ADMIN
    assert [c.value for c in login.channels.allowed] == ["admin", "staff", "deliverer", "customer"]

    signup = SignupPage(FakeAuthProvider(), InMemoryRoleDirectory(), RecordingNavigator(), RecordingNotifier())
    assert signup.channels.current is SignUpChannel.CUSTOMER
    assert [c.value for c in signup.channels.allowed] == ["customer", "staff"]


async def test_submit_is_ignored_until_bootstrap_finished():
    page, auth, nav, notifier = _login_page()
    assert page.checking_auth is True

    outcome = await page.submit("cust@tailor.pro", "secret1")

    assert outcome.accepted is False
    assert auth.calls == []


async def test_load_clears_checking_flag_and_forwards_existing_session():
    auth = FakeAuthProvider(USERS, session=Session(user_id="staff-000002", access_token="at"))
    page, auth, nav, notifier = _login_page(auth)

    result = await page.load()

    assert page.checking_auth is False
    assert result.target is RouteTarget.ADMIN_CONSOLE
    assert nav.calls == [(RouteTarget.ADMIN_CONSOLE, True)]


async def test_successful_submit_navigates():
    page, auth, nav, notifier = _login_page()
    await page.load()
    page.channels.select("customer")

    outcome = await page.submit("cust@tailor.pro", "secret1")

    assert outcome.ok
    assert outcome.target is RouteTarget.CUSTOMER_PORTAL
    assert page.loading is False
    assert notifier.notifications == []


@pytest.mark.parametrize(
    "email,password,channel,error_type,message",
    [
        ("bad", "secret1", "customer", ValidationError, "Invalid email address"),
        ("cust@tailor.pro", "wrong-pw", "customer", AuthError, "Invalid login credentials"),
        (
            "cust@tailor.pro",
            "secret1",
            "staff",
            ChannelMismatchError,
            "This login is for staff only. Please use the appropriate tab.",
        ),
    ],
)
async def test_errors_become_destructive_notifications(email, password, channel, error_type, message):
    page, auth, nav, notifier = _login_page()
    await page.load()
    page.channels.select(channel)

    outcome = await page.submit(email, password)

    assert outcome.accepted is True
    assert isinstance(outcome.error, error_type)
    assert len(notifier.notifications) == 1
    note = notifier.notifications[0]
    assert (note.title, note.description, note.severity) == ("Error", message, Severity.DESTRUCTIVE)
    assert page.loading is False
    assert nav.calls == []


class _SlowAuth(FakeAuthProvider):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.release = anyio.Event()

    async def sign_in(self, email: str, password: str) -> str:
        await self.release.wait()
        return await super().sign_in(email, password)


async def test_second_submit_while_loading_is_ignored_and_channel_is_snapshotted():
    auth = _SlowAuth(USERS)
    page, auth, nav, notifier = _login_page(auth, channel=Channel.CUSTOMER)
    await page.load()
    outcomes = []

    async def first() -> None:
        outcomes.append(await page.submit("cust@tailor.pro", "secret1"))

    async with anyio.create_task_group() as tg:
        tg.start_soon(first)
        await anyio.wait_all_tasks_blocked()
        assert page.loading is True
        # Switching tabs mid-flight must not affect the running attempt.
        page.channels.select("staff")
        second = await page.submit("cust@tailor.pro", "secret1")
        assert second.accepted is False
        auth.release.set()

    assert outcomes[0].ok
    assert outcomes[0].target is RouteTarget.CUSTOMER_PORTAL
    assert auth.count("sign_in") == 1
    assert page.loading is False


async def test_signup_page_reports_success_and_navigates():
    auth = FakeAuthProvider()
    nav = RecordingNavigator()
    notifier = RecordingNotifier()
    directory = InMemoryRoleDirectory()
    page = SignupPage(
        auth, directory, nav, notifier, channel=SignUpChannel.STAFF, redirect_base="https://shop.tailor.pro"
    )
    await page.load()

    outcome = await page.submit("new@tailor.pro", "secret1", "Nia Stitch")

    assert outcome.ok
    assert outcome.role_assigned is True
    assert outcome.target is RouteTarget.ADMIN_CONSOLE
    assert notifier.notifications == [REGISTRATION_SUCCESS]
    assert auth.calls[-1][2] == "https://shop.tailor.pro/dashboard"


async def test_signup_page_validation_error_is_notified():
    auth = FakeAuthProvider()
    notifier = RecordingNotifier()
    page = SignupPage(auth, InMemoryRoleDirectory(), RecordingNavigator(), notifier)
    await page.load()

    outcome = await page.submit("new@tailor.pro", "123", "Nia Stitch")

    assert isinstance(outcome.error, ValidationError)
    assert notifier.notifications[0].description == "Password must be at least 6 characters"
    assert auth.count("sign_up") == 0
