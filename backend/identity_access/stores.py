"""
In-memory stores: provider session records and a development role directory.

Why: Keep provider tokens server-side. The browser only carries an opaque
session id; the Supabase access/refresh tokens never leave the server.
For multi-instance deployments, replace with a Redis/DB-backed store.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
import secrets
import time

from .domain import Role, RoleRecord, parse_role
from .errors import RoleAssignmentError, RoleLookupError


def _now() -> int:
    return int(time.time())


@dataclass
class SessionRecord:
    session_id: str
    user_id: str
    access_token: str
    refresh_token: Optional[str]
    expires_at: int


class SessionStore:
    def __init__(self, ttl_seconds: int = 3600):
        self._data: Dict[str, SessionRecord] = {}
        self._ttl = ttl_seconds

    def create(self, *, user_id: str, access_token: str, refresh_token: Optional[str] = None) -> SessionRecord:
        sid = secrets.token_urlsafe(24)
        rec = SessionRecord(
            session_id=sid,
            user_id=user_id,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=_now() + self._ttl,
        )
        self._data[sid] = rec
        return rec

    def get(self, session_id: Optional[str]) -> Optional[SessionRecord]:
        if not session_id:
            return None
        rec = self._data.get(session_id)
        if not rec:
            return None
        if rec.expires_at < _now():
            self._data.pop(session_id, None)
            return None
        return rec

    def update_tokens(self, session_id: str, *, access_token: str, refresh_token: Optional[str]) -> Optional[SessionRecord]:
        """Replace the provider tokens of a live record; id and expiry stay unchanged."""
        rec = self.get(session_id)
        if rec is None:
            return None
        rec.access_token = access_token
        rec.refresh_token = refresh_token
        return rec

    def delete(self, session_id: Optional[str]) -> None:
        if session_id:
            self._data.pop(session_id, None)


class InMemoryRoleDirectory:
    """Role directory backed by a dict of raw rows (user_id -> list of role values).

    Mirrors the table semantics: several rows for one user are an error, and
    stored values outside the Role enum are reported as unrecognized.
    """

    def __init__(self, rows: Optional[Dict[str, list[str]]] = None) -> None:
        self._rows: Dict[str, list[str]] = {k: list(v) for k, v in (rows or {}).items()}

    async def get_role(self, user_id: str) -> Optional[RoleRecord]:
        values = self._rows.get(user_id) or []
        if not values:
            return None
        if len(values) > 1:
            raise RoleLookupError("multiple_role_records", user_id=user_id)
        role = parse_role(values[0])
        if role is None:
            raise RoleLookupError("unrecognized_role", user_id=user_id)
        return RoleRecord(user_id=user_id, role=role)

    async def insert_role(self, user_id: str, role: Role) -> None:
        if self._rows.get(user_id):
            raise RoleAssignmentError("role_record_exists")
        self._rows[user_id] = [Role(role).value]


__all__ = ["InMemoryRoleDirectory", "SessionRecord", "SessionStore"]
