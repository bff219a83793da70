"""
Wiring of the identity ports (auth provider + role directory) per request.

Why:
    Routes must not know which backend stores credentials and roles. They ask
    for a ports bundle bound to the browser's session id; tests inject fakes
    through `set_identity_factory`.

Security:
    Requests run with the Supabase anon key bound to the user's session, so
    role reads go through RLS. The service-role key, when configured, is only
    used for inserting the role record of a freshly registered account.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional
import logging

import httpx

from identity_access.config import IdentityConfig
from identity_access.ports import RoleDirectory
from identity_access.stores import SessionStore


logger = logging.getLogger("tailorpro.web")


@dataclass
class IdentityPorts:
    """Ports for one request.

    `auth` must expose `session_id` next to the AuthProvider methods so the
    route can mirror session changes into the cookie.
    """

    auth: Any
    roles: RoleDirectory


IdentityFactory = Callable[[Optional[str]], Awaitable[IdentityPorts]]

_FACTORY: Optional[IdentityFactory] = None
_HTTP_CLIENT: Optional[httpx.AsyncClient] = None


def set_identity_factory(factory: Optional[IdentityFactory]) -> None:
    """Install (or clear with None) the factory used by the auth routes."""
    global _FACTORY
    _FACTORY = factory


def get_identity_factory() -> Optional[IdentityFactory]:
    return _FACTORY


def _shared_http_client() -> httpx.AsyncClient:
    """Connection pool borrowed by every Supabase client this module creates."""
    global _HTTP_CLIENT
    if _HTTP_CLIENT is None or _HTTP_CLIENT.is_closed:
        _HTTP_CLIENT = httpx.AsyncClient(timeout=httpx.Timeout(10.0), follow_redirects=True)
    return _HTTP_CLIENT


async def close_identity_clients() -> None:
    """Close the shared connection pool (app shutdown)."""
    global _HTTP_CLIENT
    client, _HTTP_CLIENT = _HTTP_CLIENT, None
    if client is not None and not client.is_closed:
        await client.aclose()


def wire_supabase_identity_if_configured(cfg: IdentityConfig, sessions: SessionStore) -> bool:
    """Install a Supabase-backed factory when URL and anon key are configured.

    Behavior:
        - Returns False (and leaves the factory untouched) when not configured.
        - Clients are created lazily on the first request; nothing is contacted
          at startup.
        - Each request gets its own Supabase client (it carries the user's
          session), but all of them share one httpx connection pool, which
          `close_identity_clients` releases at shutdown.
        - Idempotent; a second call replaces the factory with an equivalent one.
    """
    if not cfg.supabase_enabled:
        logger.info("Identity adapters not wired: SUPABASE_URL/SUPABASE_ANON_KEY unset")
        return False

    from identity_access.supabase_adapters import (
        SupabaseAuthProvider,
        SupabaseRoleDirectory,
        create_supabase_client,
    )

    service_client: list[Any] = []

    async def _writer() -> Any:
        if not cfg.supabase_service_role_key:
            return None
        # A service-role client carries no user session, so one instance is
        # shared for as long as its connection pool is open.
        http = _shared_http_client()
        if not service_client or service_client[0] is not http:
            writer = await create_supabase_client(cfg.supabase_url, cfg.supabase_service_role_key, http_client=http)
            service_client[:] = [http, writer]
        return service_client[1]

    async def _factory(session_id: Optional[str]) -> IdentityPorts:
        client = await create_supabase_client(cfg.supabase_url, cfg.supabase_anon_key, http_client=_shared_http_client())
        return IdentityPorts(
            auth=SupabaseAuthProvider(client, sessions, session_id),
            roles=SupabaseRoleDirectory(client, table=cfg.user_roles_table, writer=await _writer()),
        )

    set_identity_factory(_factory)
    logger.info("Identity adapters wired: Supabase (table=%s)", cfg.user_roles_table)
    return True


__all__ = [
    "IdentityFactory",
    "IdentityPorts",
    "close_identity_clients",
    "get_identity_factory",
    "set_identity_factory",
    "wire_supabase_identity_if_configured",
]
