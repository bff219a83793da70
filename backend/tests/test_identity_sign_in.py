"""
Sign-in flow: validation, provider authentication, role lookup and the gate.
"""
from __future__ import annotations

import logging

import pytest

from identity_access.domain import Channel, RouteTarget
from identity_access.errors import AuthError, ChannelMismatchError, ValidationError
from identity_access.stores import InMemoryRoleDirectory
from identity_access.usecases import SignInInput, SignInUseCase

from identity_fakes import FailingRoleDirectory, FakeAuthProvider, RecordingNavigator


pytestmark = pytest.mark.anyio("asyncio")

USERS = {
    "admin@tailor.pro": ("secret1", "admin-000001"),
    "staff@tailor.pro": ("secret1", "staff-000002"),
    "cust@tailor.pro": ("secret1", "cust-000003"),
    "drive@tailor.pro": ("secret1", "drive-000004"),
    "norole@tailor.pro": ("secret1", "norole-000005"),
}
ROLES = {
    "admin-000001": ["admin"],
    "staff-000002": ["staff"],
    "cust-000003": ["customer"],
    "drive-000004": ["deliverer"],
}


def _build(roles=None, **auth_kwargs):
    auth = FakeAuthProvider(USERS, **auth_kwargs)
    directory = roles if roles is not None else InMemoryRoleDirectory(ROLES)
    nav = RecordingNavigator()
    return auth, nav, SignInUseCase(auth, directory, nav)


@pytest.mark.parametrize(
    "email,channel,target",
    [
        ("admin@tailor.pro", Channel.ADMIN, RouteTarget.ADMIN_CONSOLE),
        ("staff@tailor.pro", Channel.STAFF, RouteTarget.ADMIN_CONSOLE),
        ("cust@tailor.pro", Channel.CUSTOMER, RouteTarget.CUSTOMER_PORTAL),
        ("drive@tailor.pro", Channel.DELIVERER, RouteTarget.DELIVERY_CONSOLE),
    ],
)
async def test_matching_channel_navigates_with_push(email: str, channel: Channel, target: RouteTarget):
    auth, nav, uc = _build()

    result = await uc.execute(SignInInput(email=email, password="secret1", channel=channel))

    assert result is target
    assert nav.calls == [(target, False)]
    assert auth.count("sign_out") == 0


async def test_invalid_email_makes_no_provider_call():
    auth, nav, uc = _build()

    with pytest.raises(ValidationError) as exc_info:
        await uc.execute(SignInInput(email="not-an-email", password="secret1", channel=Channel.ADMIN))

    assert exc_info.value.message == "Invalid email address"
    assert auth.calls == []
    assert nav.calls == []


async def test_short_password_makes_no_provider_call():
    auth, nav, uc = _build()

    with pytest.raises(ValidationError):
        await uc.execute(SignInInput(email="admin@tailor.pro", password="12345", channel=Channel.ADMIN))

    assert auth.calls == []


async def test_provider_rejection_skips_role_lookup():
    directory = FailingRoleDirectory(ROLES, fail_lookup=True)
    auth, nav, uc = _build(roles=directory)

    with pytest.raises(AuthError) as exc_info:
        await uc.execute(SignInInput(email="admin@tailor.pro", password="wrong-pw", channel=Channel.ADMIN))

    # A failing lookup would have been swallowed; reaching AuthError proves it never ran.
    assert exc_info.value.message == "Invalid login credentials"
    assert nav.calls == []
    assert auth.count("sign_out") == 0


async def test_customer_on_staff_tab_is_signed_out_and_rejected():
    auth, nav, uc = _build()

    with pytest.raises(ChannelMismatchError) as exc_info:
        await uc.execute(SignInInput(email="cust@tailor.pro", password="secret1", channel=Channel.STAFF))

    assert exc_info.value.message == "This login is for staff only. Please use the appropriate tab."
    assert exc_info.value.channel is Channel.STAFF
    assert auth.count("sign_out") == 1
    assert auth.session is None
    assert nav.calls == []


async def test_staff_on_admin_tab_is_rejected():
    auth, nav, uc = _build()

    with pytest.raises(ChannelMismatchError) as exc_info:
        await uc.execute(SignInInput(email="staff@tailor.pro", password="secret1", channel=Channel.ADMIN))

    assert exc_info.value.message == "This login is for administrators only."
    assert auth.count("sign_out") == 1


async def test_missing_role_is_treated_as_mismatch():
    auth, nav, uc = _build()

    with pytest.raises(ChannelMismatchError):
        await uc.execute(SignInInput(email="norole@tailor.pro", password="secret1", channel=Channel.CUSTOMER))

    assert auth.count("sign_out") == 1
    assert nav.calls == []


async def test_lookup_failure_counts_as_no_role(caplog: pytest.LogCaptureFixture):
    directory = FailingRoleDirectory(ROLES, fail_lookup=True)
    auth, nav, uc = _build(roles=directory)

    with caplog.at_level(logging.WARNING, logger="tailorpro.identity_access"):
        with pytest.raises(ChannelMismatchError):
            await uc.execute(SignInInput(email="admin@tailor.pro", password="secret1", channel=Channel.ADMIN))

    assert auth.count("sign_out") == 1
    assert any("Role lookup failed" in r.getMessage() for r in caplog.records)


async def test_duplicate_role_records_are_rejected():
    directory = InMemoryRoleDirectory({**ROLES, "admin-000001": ["admin", "staff"]})
    auth, nav, uc = _build(roles=directory)

    with pytest.raises(ChannelMismatchError):
        await uc.execute(SignInInput(email="admin@tailor.pro", password="secret1", channel=Channel.ADMIN))


async def test_failed_sign_out_still_reports_mismatch(caplog: pytest.LogCaptureFixture):
    auth, nav, uc = _build(sign_out_error=RuntimeError("network down"))

    with caplog.at_level(logging.WARNING, logger="tailorpro.identity_access"):
        with pytest.raises(ChannelMismatchError):
            await uc.execute(SignInInput(email="cust@tailor.pro", password="secret1", channel=Channel.ADMIN))

    assert auth.count("sign_out") == 1
    assert any("sign-out failed" in r.getMessage() for r in caplog.records)


async def test_retry_with_same_inputs_yields_same_outcome():
    auth, nav, uc = _build()
    req = SignInInput(email="drive@tailor.pro", password="secret1", channel=Channel.DELIVERER)

    first = await uc.execute(req)
    second = await uc.execute(req)

    assert first is second is RouteTarget.DELIVERY_CONSOLE
    assert nav.calls == [(RouteTarget.DELIVERY_CONSOLE, False)] * 2

    for _ in range(2):
        with pytest.raises(ChannelMismatchError):
            await uc.execute(SignInInput(email="drive@tailor.pro", password="secret1", channel=Channel.STAFF))
    assert auth.count("sign_out") == 2


async def test_channel_value_is_coerced_and_checked():
    auth, nav, uc = _build()

    assert await uc.execute(SignInInput(email="cust@tailor.pro", password="secret1", channel="customer")) is (
        RouteTarget.CUSTOMER_PORTAL
    )
    with pytest.raises(ValueError):
        await uc.execute(SignInInput(email="cust@tailor.pro", password="secret1", channel="root"))


async def test_logs_shorten_user_ids(caplog: pytest.LogCaptureFixture):
    auth, nav, uc = _build()

    with caplog.at_level(logging.INFO, logger="tailorpro.identity_access"):
        await uc.execute(SignInInput(email="admin@tailor.pro", password="secret1", channel=Channel.ADMIN))

    text = "\n".join(r.getMessage() for r in caplog.records)
    assert "000001" in text
    assert "admin-000001" not in text
    assert "secret1" not in text
