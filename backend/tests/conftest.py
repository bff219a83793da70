"""
Pytest configuration for backend tests.

Why: Force AnyIO to use the asyncio backend, make `backend/` and
`backend/web/` importable the way the container runs them, and keep global
wiring (identity factory, session store, settings override) from leaking
between tests.
"""
import sys
from pathlib import Path

import pytest


REPO_ROOT = Path(__file__).resolve().parents[2]
BACKEND_DIR = REPO_ROOT / "backend"
WEB_DIR = BACKEND_DIR / "web"
TESTS_DIR = BACKEND_DIR / "tests"
for p in (str(REPO_ROOT), str(BACKEND_DIR), str(WEB_DIR), str(TESTS_DIR)):
    if p not in sys.path:
        sys.path.insert(0, p)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_env_toggles(monkeypatch: pytest.MonkeyPatch):
    """Start every test from a dev-like environment without Supabase wiring.

    Why:
        `main` wires Supabase adapters at import time when URL and key are
        present; tests install fakes instead. Environment leftovers from a
        developer shell must not change cookie, CSRF or startup behavior.
    """
    for var in (
        "TAILORPRO_ENV",
        "TAILORPRO_TRUST_PROXY",
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "SUPABASE_SERVICE_ROLE_KEY",
        "APP_BASE_URL",
        "USER_ROLES_TABLE",
        "AUTH_SESSION_TTL_SECONDS",
        "ROUTE_ADMIN_CONSOLE",
        "ROUTE_DELIVERY_CONSOLE",
        "ROUTE_CUSTOMER_PORTAL",
    ):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture(autouse=True)
def _reset_identity_wiring():
    """Clear the identity factory around each test so fakes never leak."""
    try:
        import identity_wiring  # type: ignore
    except ImportError:
        yield
        return
    identity_wiring.set_identity_factory(None)
    yield
    identity_wiring.set_identity_factory(None)


@pytest.fixture(autouse=True)
def _reset_settings_environment_override():
    """Reset main.SETTINGS.override_environment between tests.

    Why:
        Tests force `local` or `prod` cookie semantics through the override;
        a missed cleanup would change cookie flags in unrelated tests.
    """
    mod = sys.modules.get("main")
    if mod is not None and hasattr(mod, "SETTINGS"):
        mod.SETTINGS.override_environment(None)
    yield
    mod = sys.modules.get("main")
    if mod is not None and hasattr(mod, "SETTINGS"):
        mod.SETTINGS.override_environment(None)
