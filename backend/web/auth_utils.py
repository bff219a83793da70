"""
Shared authentication utilities.

Why:
    The auth router and the app module both set and clear the session cookie;
    one helper keeps the flags identical.

Design:
    Pure function of the environment string; callers decide where the
    environment comes from (e.g., settings object).
"""

from __future__ import annotations


def cookie_opts(environment: str) -> dict:
    """Return hardened cookie flags.

    Returns a mapping with keys:
      - secure: False only for explicit local plain-http development ("local")
      - samesite: "lax"  # cookie survives top-level navigation from email links
    """
    return {"secure": (environment or "").lower() != "local", "samesite": "lax"}
