"""
Web security helpers shared by the auth routes.

Contains the same-origin check for state-changing form posts (CSRF) and the
derivation of the browser-facing origin behind an optional trusted proxy.
"""
from __future__ import annotations

from urllib.parse import urlparse
import os

from fastapi import Request


def _trust_proxy() -> bool:
    return (os.getenv("TAILORPRO_TRUST_PROXY", "false") or "").lower() == "true"


def _default_port(scheme: str) -> int:
    return 443 if scheme == "https" else 80


def _parse_origin(url: str) -> tuple[str, str, int]:
    p = urlparse(url)
    if not p.scheme or not p.hostname:
        raise ValueError("invalid_origin")
    scheme = p.scheme.lower()
    return scheme, p.hostname.lower(), int(p.port if p.port is not None else _default_port(scheme))


def _server_origin(request: Request) -> tuple[str, str, int]:
    """Return (scheme, host, port) the browser sees for this app.

    X-Forwarded-* headers are honored only when TAILORPRO_TRUST_PROXY=true.
    """
    scheme = (request.url.scheme or "http").lower()
    host = (request.url.hostname or "").lower()
    port = int(request.url.port) if request.url.port else _default_port(scheme)
    if not _trust_proxy():
        return scheme, host, port

    xf_proto = (request.headers.get("x-forwarded-proto") or "").split(",")[0].strip().lower()
    xf_host = (request.headers.get("x-forwarded-host") or "").split(",")[0].strip().lower()
    if xf_proto:
        scheme = xf_proto
        port = _default_port(scheme)
    if xf_host:
        if ":" in xf_host:
            host, port_str = xf_host.rsplit(":", 1)
            port = int(port_str) if port_str.isdigit() else _default_port(scheme)
        else:
            host = xf_host
    xf_port = (request.headers.get("x-forwarded-port") or "").split(",")[0].strip()
    if xf_port.isdigit():
        port = int(xf_port)
    return scheme, host, port


def request_app_base(request: Request) -> str:
    """Browser-facing base URL (scheme://host[:port]) without trailing slash."""
    scheme, host, port = _server_origin(request)
    if port == _default_port(scheme):
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def _is_same_origin(request: Request) -> bool:
    """Verify same-origin using Origin or Referer headers.

    Behavior:
    - If Origin is present, require exact scheme/host/port match with server.
    - Else if Referer is present, validate its origin similarly.
    - Else (no headers): allow to not break non-browser clients.
    """
    server = _server_origin(request)
    claimed = request.headers.get("origin") or request.headers.get("referer")
    if not claimed:
        return True
    try:
        return _parse_origin(claimed) == server
    except ValueError:
        return False
