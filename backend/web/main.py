"TailorPro identity web app"
from __future__ import annotations

import os
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from identity_access.config import load_identity_config
from identity_access.stores import SessionStore
import sys as _sys

try:
    from .auth_utils import cookie_opts
except ImportError:
    from auth_utils import cookie_opts

# Ensure both import styles reference the same module instance.
if __name__ == "main":
    _sys.modules.setdefault("backend.web.main", _sys.modules[__name__])
elif __name__ == "backend.web.main":
    _sys.modules["main"] = _sys.modules[__name__]


def _should_load_dotenv() -> bool:
    """Decide if we should load a local .env file.

    - Never load under pytest to avoid contaminating test env.
    - Allow explicit opt-out via TAILORPRO_ENABLE_DOTENV (default true
      outside pytest).
    """
    if "pytest" in _sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("TAILORPRO_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


if _should_load_dotenv():
    from dotenv import load_dotenv

    load_dotenv()

# Minimal production safety checks (fail-fast on insecure config).
# Support both "flat" (container) and package (repo test) layouts.
try:
    import config as _cfg  # type: ignore
except ImportError:  # pragma: no cover
    from backend.web import config as _cfg  # type: ignore
_cfg.ensure_secure_config_on_startup()

# --- App & Settings Setup -------------------------------------------------------


class AuthSettings:
    def __init__(self) -> None:
        self._env_override: str | None = None

    @property
    def environment(self) -> str:
        if self._env_override is not None:
            return self._env_override
        return os.getenv("TAILORPRO_ENV", "dev").lower()

    def override_environment(self, env: str | None) -> None:
        """Override environment for tests (e.g., "prod"), or reset with None."""
        self._env_override = env


logger = logging.getLogger("tailorpro.web")
SETTINGS = AuthSettings()
SESSION_COOKIE_NAME = "tailorpro_session"

IDENTITY_CFG = load_identity_config()
SESSION_STORE = SessionStore(ttl_seconds=IDENTITY_CFG.session_ttl_seconds)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    # Release the connection pool shared by the per-request Supabase clients.
    await close_identity_clients()


app = FastAPI(
    title="TailorPro",
    description="Role-gated sign-in for TailorPro",
    version="0.1.0",
    lifespan=lifespan,
)

from routes.auth import auth_router
from identity_wiring import close_identity_clients, wire_supabase_identity_if_configured

# Clients are created lazily per request, so wiring never contacts Supabase here.
wire_supabase_identity_if_configured(IDENTITY_CFG, SESSION_STORE)

# --- Session Cookie Helpers -----------------------------------------------------


def set_session_cookie(response: Response, value: str, *, max_age: Optional[int] = None) -> None:
    opts = cookie_opts(SETTINGS.environment)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=value,
        httponly=True,
        secure=opts["secure"],
        samesite=opts["samesite"],
        path="/",
        max_age=max_age if max_age is not None else IDENTITY_CFG.session_ttl_seconds,
    )


def clear_session_cookie(response: Response) -> None:
    opts = cookie_opts(SETTINGS.environment)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value="",
        httponly=True,
        secure=opts["secure"],
        samesite=opts["samesite"],
        path="/",
        expires=0,
        max_age=0,
    )


# --- Security Headers Middleware ----------------------------------------------


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    # Auth pages are server-rendered without scripts; keep CSP tight.
    csp = (
        "default-src 'self'; script-src 'self'; style-src 'self' 'unsafe-inline'; "
        "img-src 'self' data:; font-src 'self' data:; connect-src 'self'; "
        "form-action 'self'; frame-ancestors 'none';"
    )
    response.headers.setdefault("Content-Security-Policy", csp)
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    if SETTINGS.environment == "prod":
        response.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
    response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
    response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
    return response


# --- Routes ---------------------------------------------------------------------

app.include_router(auth_router)


@app.get("/health")
async def health_check():
    # Minimal health endpoint used by orchestrators and tests.
    return JSONResponse({"status": "healthy"}, headers={"Cache-Control": "private, no-store"})
