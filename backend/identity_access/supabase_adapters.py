"""
Supabase-backed adapters for the identity ports.

The adapters are duck-typed against the async supabase client
(`supabase.acreate_client(...)`) to avoid a hard dependency during testing.
They expect:

- client.auth.sign_in_with_password({email, password}) -> { user, session }
- client.auth.sign_up({email, password, options}) -> { user, session? }
- client.auth.set_session(access_token, refresh_token)
- client.auth.admin.sign_out(jwt, scope)
- client.table(name).select(...).eq(...).limit(n).execute() -> { data: [...] }
- client.table(name).insert(row).execute()

Security:
- Provider tokens live in the server-side `SessionStore`; only the opaque
  session id is handed to the browser.
- Never log credentials or tokens.
"""
from __future__ import annotations

from typing import Any, Optional
import logging

from .domain import Role, RoleRecord, Session, parse_role
from .errors import AuthError, RoleAssignmentError, RoleLookupError
from .stores import SessionRecord, SessionStore
from .validation import RegistrationProfile


logger = logging.getLogger("tailorpro.identity_access")


def _provider_message(exc: Exception, fallback: str) -> str:
    msg = getattr(exc, "message", None)
    if isinstance(msg, str) and msg.strip():
        return msg.strip()
    text = str(exc).strip()
    return text or fallback


async def create_supabase_client(url: str, key: str, *, http_client: Any = None) -> Any:
    """Create an async client that keeps no session of its own.

    Pass a shared `httpx.AsyncClient` as `http_client` when creating one client
    per request: the auth and PostgREST sub-clients then borrow its connection
    pool instead of opening their own, and nothing per request needs closing.
    """
    from supabase import acreate_client
    from supabase.lib.client_options import AsyncClientOptions

    options = AsyncClientOptions(persist_session=False, auto_refresh_token=False, httpx_client=http_client)
    return await acreate_client(url, key, options=options)


class SupabaseAuthProvider:
    """AuthProvider over Supabase Auth (GoTrue) plus the server-side session store.

    `session_id` is the opaque cookie value; it changes on sign-in and becomes
    None after sign-out so the web adapter knows which cookie to send.
    """

    def __init__(self, client: Any, sessions: SessionStore, session_id: Optional[str] = None) -> None:
        self._client = client
        self._sessions = sessions
        self.session_id = session_id

    async def get_session(self) -> Optional[Session]:
        rec = self._sessions.get(self.session_id)
        if rec is None:
            # Unknown or expired id: let the caller drop the stale cookie.
            self.session_id = None
            return None
        try:
            # Binds the user token to the client so role queries run under RLS.
            res = await self._client.auth.set_session(rec.access_token, rec.refresh_token or "")
        except Exception as exc:
            logger.warning("Stored session rejected by provider: %s", exc.__class__.__name__)
            self._sessions.delete(rec.session_id)
            self.session_id = None
            return None
        rec = self._keep_refreshed_tokens(rec, getattr(res, "session", None))
        return Session(
            user_id=rec.user_id,
            access_token=rec.access_token,
            refresh_token=rec.refresh_token,
            expires_at=rec.expires_at,
        )

    def _keep_refreshed_tokens(self, rec: SessionRecord, session: Any) -> SessionRecord:
        # An expired access token is refreshed by set_session and the refresh
        # token rotates with it; the old pair stops working after that.
        access_token = str(getattr(session, "access_token", "") or "")
        if not access_token or access_token == rec.access_token:
            return rec
        refresh_token = getattr(session, "refresh_token", None) or rec.refresh_token
        updated = self._sessions.update_tokens(rec.session_id, access_token=access_token, refresh_token=refresh_token)
        return updated or rec

    def _store(self, user_id: str, session: Any) -> None:
        # Last writer wins: a new sign-in replaces whatever this browser held.
        self._sessions.delete(self.session_id)
        rec = self._sessions.create(
            user_id=user_id,
            access_token=str(getattr(session, "access_token", "") or ""),
            refresh_token=getattr(session, "refresh_token", None),
        )
        self.session_id = rec.session_id

    async def sign_in(self, email: str, password: str) -> str:
        try:
            res = await self._client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as exc:
            raise AuthError(_provider_message(exc, "Sign-in failed.")) from exc
        user = getattr(res, "user", None)
        session = getattr(res, "session", None)
        if user is None or session is None:
            raise AuthError("Sign-in failed (unexpected provider response).")
        user_id = str(user.id)
        self._store(user_id, session)
        return user_id

    async def sign_up(self, profile: RegistrationProfile, redirect_to: str) -> Optional[str]:
        payload = {
            "email": profile.email,
            "password": profile.password,
            "options": {"data": profile.metadata(), "email_redirect_to": redirect_to},
        }
        try:
            res = await self._client.auth.sign_up(payload)
        except Exception as exc:
            raise AuthError(_provider_message(exc, "Registration failed.")) from exc
        user = getattr(res, "user", None)
        if user is None:
            return None
        user_id = str(user.id)
        # Projects without email confirmation return a session right away.
        session = getattr(res, "session", None)
        if session is not None:
            self._store(user_id, session)
        return user_id

    async def sign_out(self) -> None:
        rec = self._sessions.get(self.session_id)
        self._sessions.delete(self.session_id)
        self.session_id = None
        if rec is None:
            return
        # Revoke only this session at the provider; raises on network errors.
        await self._client.auth.admin.sign_out(rec.access_token, "local")


class SupabaseRoleDirectory:
    """RoleDirectory over the `user_roles` table.

    Parameters
    ----------
    client:
        Client bound to the user's session (reads run under RLS).
    table:
        Role table name, validated by config.
    writer:
        Optional service-role client for inserts; new accounts usually have no
        verified session yet, so a user-bound insert may be rejected by RLS.
    """

    def __init__(self, client: Any, *, table: str = "user_roles", writer: Any = None) -> None:
        self._client = client
        self._writer = writer if writer is not None else client
        self._table = table

    async def get_role(self, user_id: str) -> Optional[RoleRecord]:
        try:
            res = await (
                self._client.table(self._table).select("role").eq("user_id", user_id).limit(2).execute()
            )
        except Exception as exc:
            raise RoleLookupError(f"role_lookup_failed: {exc.__class__.__name__}", user_id=user_id) from exc
        rows = getattr(res, "data", None) or []
        if not rows:
            return None
        if len(rows) > 1:
            raise RoleLookupError("multiple_role_records", user_id=user_id)
        role = parse_role((rows[0] or {}).get("role"))
        if role is None:
            raise RoleLookupError("unrecognized_role", user_id=user_id)
        return RoleRecord(user_id=user_id, role=role)

    async def insert_role(self, user_id: str, role: Role) -> None:
        row = {"user_id": user_id, "role": Role(role).value}
        try:
            await self._writer.table(self._table).insert(row).execute()
        except Exception as exc:
            raise RoleAssignmentError(f"role_insert_failed: {exc.__class__.__name__}") from exc


__all__ = ["SupabaseAuthProvider", "SupabaseRoleDirectory", "create_supabase_client"]
