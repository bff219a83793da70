"""
Identity configuration parsed from environment variables.

Intent:
    Provide a single place to read the Supabase connection settings, the
    role table name, the in-app paths of the application areas and the
    server-side session lifetime.

Why:
    Centralising configuration makes defaults and validation explicit and lets
    tests exercise config behaviour without booting the web app.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional
import os
import re
from urllib.parse import urlparse

from .domain import DEFAULT_ROUTE_PATHS, RouteTarget


@dataclass(frozen=True)
class IdentityConfig:
    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]
    supabase_service_role_key: Optional[str]
    app_base_url: Optional[str]
    user_roles_table: str
    session_ttl_seconds: int
    route_paths: Dict[RouteTarget, str] = field(default_factory=lambda: dict(DEFAULT_ROUTE_PATHS))

    @property
    def supabase_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    def path_for(self, target: RouteTarget) -> str:
        return self.route_paths[target]


# Same shape as the in-app redirect check in the web layer: absolute path,
# no double slashes, no traversal.
INAPP_PATH_PATTERN = re.compile(r"^(?!.*//)(?!.*\.\.)/[A-Za-z0-9._\-/]*$")
_TABLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")

_ROUTE_ENV = {
    RouteTarget.ADMIN_CONSOLE: "ROUTE_ADMIN_CONSOLE",
    RouteTarget.DELIVERY_CONSOLE: "ROUTE_DELIVERY_CONSOLE",
    RouteTarget.CUSTOMER_PORTAL: "ROUTE_CUSTOMER_PORTAL",
}


def _str_env(name: str) -> Optional[str]:
    return (os.getenv(name, "") or "").strip() or None


def _int_env(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw!r}")
    if value < lo or value > hi:
        raise ValueError(f"{name} out of range ({lo}..{hi}), got: {value}")
    return value


def _validate_base_url(name: str, url: Optional[str]) -> Optional[str]:
    if url is None:
        return None
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(f"{name} must be an absolute http(s) URL")
    return url.rstrip("/")


def load_identity_config() -> IdentityConfig:
    """
    Parse and validate identity configuration from environment variables.

    Behavior:
        - Supabase adapters are wired only when URL and anon key are set.
        - `USER_ROLES_TABLE` must be a plain SQL identifier (default user_roles).
        - Route overrides must be in-app absolute paths like "/dashboard".
        - `AUTH_SESSION_TTL_SECONDS` is bounded to 60..86400 (default 12h).
    """
    table = (os.getenv("USER_ROLES_TABLE") or "user_roles").strip()
    if not _TABLE_RE.match(table):
        raise ValueError("USER_ROLES_TABLE must be a plain identifier")

    route_paths = dict(DEFAULT_ROUTE_PATHS)
    for target, env_name in _ROUTE_ENV.items():
        override = _str_env(env_name)
        if override is None:
            continue
        if len(override) > 256 or not INAPP_PATH_PATTERN.match(override):
            raise ValueError(f"{env_name} must be an in-app absolute path")
        route_paths[target] = override

    return IdentityConfig(
        supabase_url=_validate_base_url("SUPABASE_URL", _str_env("SUPABASE_URL")),
        supabase_anon_key=_str_env("SUPABASE_ANON_KEY"),
        supabase_service_role_key=_str_env("SUPABASE_SERVICE_ROLE_KEY"),
        app_base_url=_validate_base_url("APP_BASE_URL", _str_env("APP_BASE_URL")),
        user_roles_table=table,
        session_ttl_seconds=_int_env("AUTH_SESSION_TTL_SECONDS", 43200, lo=60, hi=86400),
        route_paths=route_paths,
    )


__all__ = ["IdentityConfig", "INAPP_PATH_PATTERN", "load_identity_config"]
