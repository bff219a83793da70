"""
Session bootstrap: silent forwarding of already signed-in users.
"""
from __future__ import annotations

import pytest

from identity_access.domain import RouteTarget, Session
from identity_access.stores import InMemoryRoleDirectory
from identity_access.usecases import BootstrapStatus, SessionBootstrapUseCase

from identity_fakes import FailingRoleDirectory, FakeAuthProvider, RecordingNavigator


pytestmark = pytest.mark.anyio("asyncio")


def _session(user_id: str) -> Session:
    return Session(user_id=user_id, access_token=f"at-{user_id}")


async def test_no_session_is_a_no_op():
    auth = FakeAuthProvider()
    nav = RecordingNavigator()

    result = await SessionBootstrapUseCase(auth, InMemoryRoleDirectory(), nav).execute()

    assert result.status is BootstrapStatus.UNAUTHENTICATED
    assert result.target is None
    assert nav.calls == []


@pytest.mark.parametrize(
    "role,target",
    [
        ("admin", RouteTarget.ADMIN_CONSOLE),
        ("staff", RouteTarget.ADMIN_CONSOLE),
        ("customer", RouteTarget.CUSTOMER_PORTAL),
        ("deliverer", RouteTarget.DELIVERY_CONSOLE),
    ],
)
async def test_session_with_role_replaces_history(role: str, target: RouteTarget):
    auth = FakeAuthProvider(session=_session("u-000042"))
    nav = RecordingNavigator()

    result = await SessionBootstrapUseCase(auth, InMemoryRoleDirectory({"u-000042": [role]}), nav).execute()

    assert result.status is BootstrapStatus.REDIRECTED
    assert result.target is target
    assert nav.calls == [(target, True)]


@pytest.mark.parametrize(
    "directory",
    [
        InMemoryRoleDirectory({}),
        InMemoryRoleDirectory({"u-000042": ["tailor"]}),
        InMemoryRoleDirectory({"u-000042": ["admin", "customer"]}),
        FailingRoleDirectory({"u-000042": ["admin"]}, fail_lookup=True),
    ],
    ids=["missing", "unrecognized", "duplicate", "lookup_error"],
)
async def test_session_without_usable_role_stays_on_login(directory):
    auth = FakeAuthProvider(session=_session("u-000042"))
    nav = RecordingNavigator()

    result = await SessionBootstrapUseCase(auth, directory, nav).execute()

    assert result.status is BootstrapStatus.UNRECOGNIZED_ROLE
    assert nav.calls == []
    # Fail-open: the session is kept and no sign-out happens.
    assert auth.count("sign_out") == 0
