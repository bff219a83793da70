"""
Startup security checks for the TailorPro web app.

Why: A login front door must not go live with placeholder keys or plain-http
endpoints. This guard aborts production startups with an explicit message and
stays out of the way during local development.

Permissions: The caller needs no special privileges. The function only reads
environment variables and raises `SystemExit` on fatal misconfiguration.
"""
from __future__ import annotations

import os


_PLACEHOLDERS = ("CHANGE_ME", "DUMMY", "YOUR_", "TEST_ONLY")


def _is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def _is_placeholder(value: str) -> bool:
    upper = value.strip().upper()
    return not upper or upper.startswith(_PLACEHOLDERS)


def _must_be_https(var_name: str) -> None:
    value = (os.getenv(var_name, "") or "").strip().lower()
    if not value:
        raise SystemExit(f"Refusing to start: {var_name} must be set in production.")
    if not value.startswith("https://"):
        raise SystemExit(f"Refusing to start: {var_name} must use https in production.")


def ensure_secure_config_on_startup() -> None:
    """Fail fast on insecure production configuration.

    Checks (prod/stage only):
    - SUPABASE_URL and APP_BASE_URL are https URLs.
    - SUPABASE_ANON_KEY is set and not a placeholder.
    - SUPABASE_SERVICE_ROLE_KEY, when set, is not a placeholder.
    """
    env = os.getenv("TAILORPRO_ENV", "dev")
    if not _is_prod_like(env):
        return

    _must_be_https("SUPABASE_URL")
    _must_be_https("APP_BASE_URL")

    if _is_placeholder(os.getenv("SUPABASE_ANON_KEY", "") or ""):
        raise SystemExit(
            "Refusing to start: SUPABASE_ANON_KEY is unset or a placeholder in production."
        )

    srole = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if srole is not None and srole.strip() and _is_placeholder(srole):
        raise SystemExit(
            "Refusing to start: SUPABASE_SERVICE_ROLE_KEY is a placeholder in production."
        )
