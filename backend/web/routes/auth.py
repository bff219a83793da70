"""
Authentication routes: role-gated login, sign-up and logout (router-only module).

Why:
    The identity flows live in `identity_access`; this router only translates
    HTTP into page-controller calls and their navigation/notification side
    effects back into responses.

Notes:
    - Shared state (settings, session store, identity config) is read from the
      active `main` module at request time so tests can swap it.
    - Every auth response carries `Cache-Control: private, no-store` and
      `Vary: HX-Request`.
    - The rendered pages are plain HTML forms and load no scripts. The HTMX
      branches (fragment bodies, `HX-Redirect`, `HX-Trigger`) serve shells that
      embed the auth cards and bring htmx themselves.
"""

from __future__ import annotations

from typing import Mapping, Optional
import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from components import AuthLayout, ContinueCard, LoginForm, SignupForm, ToastRegion
from identity_access.domain import Channel, RouteTarget, SignUpChannel
from identity_access.errors import AuthError, ChannelMismatchError
from identity_access.pages import LoginPage, SignupPage, SubmitOutcome
from identity_access.ports import Notification, Severity
from identity_wiring import IdentityPorts, get_identity_factory
from routes.security import _is_same_origin, request_app_base


auth_router = APIRouter(tags=["Auth"])  # explicit paths, no prefix
logger = logging.getLogger("tailorpro.web")

NO_STORE_HEADERS = {"Cache-Control": "private, no-store", "Vary": "HX-Request"}


class ResponseNavigator:
    """Navigator that records the decision; the route turns it into a redirect."""

    def __init__(self, route_paths: Mapping[RouteTarget, str]) -> None:
        self._paths = route_paths
        self.path: Optional[str] = None
        self.replace_history = False

    def go_to(self, target: RouteTarget, *, replace_history: bool = False) -> None:
        self.path = self._paths[target]
        self.replace_history = replace_history


class PageNotifier:
    """Collects notifications for the toast region of the rendered page."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def show(self, notification: Notification) -> None:
        self.notifications.append(notification)


def _resolve_active_main(request: Request):
    """Return the `main` module whose app serves this request."""
    import sys as _sys

    candidates = [m for m in (_sys.modules.get("main"), _sys.modules.get("backend.web.main")) if m]
    for m in candidates:
        if getattr(m, "app", None) is request.app:
            return m
    if candidates:
        return candidates[0]
    import main  # type: ignore

    return main


def _is_htmx(request: Request) -> bool:
    return bool(request.headers.get("HX-Request"))


def _navigate(request: Request, path: str, *, replace: bool, notifier: Optional[PageNotifier] = None) -> Response:
    """Turn a navigation decision into a response.

    Full-page requests get 302 (new history entry) or 303 (replace); HTMX
    requests get 204 + HX-Redirect. Pending notifications ride along as an
    `HX-Trigger` event for HTMX clients.
    """
    headers = dict(NO_STORE_HEADERS)
    if _is_htmx(request):
        headers["HX-Redirect"] = path
        if notifier is not None and notifier.notifications:
            headers["HX-Trigger"] = json.dumps({
                "showMessages": [
                    {"title": n.title, "message": n.description, "type": Severity(n.severity).value}
                    for n in notifier.notifications
                ]
            })
        return Response(status_code=204, headers=headers)
    return RedirectResponse(url=path, status_code=303 if replace else 302, headers=headers)


def _render(request: Request, title: str, card_html: str, notifier: PageNotifier, *, status_code: int = 200) -> HTMLResponse:
    toasts = ToastRegion(notifier.notifications).render()
    if _is_htmx(request):
        body = f"{toasts}{card_html}"
    else:
        body = AuthLayout(title, card_html, toasts=toasts).render()
    return HTMLResponse(content=body, status_code=status_code, headers=dict(NO_STORE_HEADERS))


def _session_id(request: Request, mod) -> Optional[str]:
    return request.cookies.get(mod.SESSION_COOKIE_NAME) or None


def _sync_session_cookie(response: Response, mod, before: Optional[str], after: Optional[str]) -> None:
    """Mirror provider session changes into the opaque session cookie."""
    if after == before:
        return
    if after:
        mod.set_session_cookie(response, after)
    else:
        mod.clear_session_cookie(response)


def _status_for(outcome: SubmitOutcome) -> int:
    if isinstance(outcome.error, ChannelMismatchError):
        return 403
    if isinstance(outcome.error, AuthError):
        return 401
    # ValidationError and anything else the page reported
    return 400


def _service_unavailable() -> JSONResponse:
    return JSONResponse({"error": "identity_unavailable"}, status_code=503, headers=dict(NO_STORE_HEADERS))


def _csrf_rejected() -> JSONResponse:
    return JSONResponse({"error": "csrf_violation"}, status_code=403, headers=dict(NO_STORE_HEADERS))


async def _open_ports(request: Request, mod) -> Optional[IdentityPorts]:
    factory = get_identity_factory()
    if factory is None:
        logger.warning("Identity ports requested but not wired")
        return None
    return await factory(_session_id(request, mod))


def _bad_channel(notifier: PageNotifier, kind: str) -> None:
    notifier.show(Notification("Error", f"Unknown {kind} channel.", Severity.DESTRUCTIVE))


def _login_card(page: LoginPage, email: str = "") -> str:
    return LoginForm(
        page.channels.current.value,
        [c.value for c in page.channels.allowed],
        email=email,
        loading=page.loading,
    ).render()


def _signup_card(page: SignupPage, values: Optional[dict] = None) -> str:
    return SignupForm(
        page.channels.current.value,
        [c.value for c in page.channels.allowed],
        values=values,
        loading=page.loading,
    ).render()


def _form_str(form, key: str) -> str:
    value = form.get(key)
    return value if isinstance(value, str) else ""


@auth_router.get("/auth/login", response_class=HTMLResponse)
async def auth_login_page(request: Request, channel: str | None = None):
    """
    Render the login card, or forward a signed-in user to their area.

    Behavior:
        - Runs the session bootstrap; a session with a recognized role is
          redirected with 303 (history replacement).
        - Unknown `channel` values fall back to the admin tab.
    Permissions:
        Public.
    """
    mod = _resolve_active_main(request)
    ports = await _open_ports(request, mod)
    if ports is None:
        return _service_unavailable()
    before = ports.auth.session_id
    navigator = ResponseNavigator(mod.IDENTITY_CFG.route_paths)
    notifier = PageNotifier()
    page = LoginPage(ports.auth, ports.roles, navigator, notifier)
    if channel:
        try:
            page.channels.select(channel)
        except ValueError:
            pass

    await page.load()
    if navigator.path:
        resp = _navigate(request, navigator.path, replace=navigator.replace_history)
    else:
        resp = _render(request, "Login", _login_card(page), notifier)
    _sync_session_cookie(resp, mod, before, ports.auth.session_id)
    return resp


@auth_router.post("/auth/login", response_class=HTMLResponse)
async def auth_login_submit(request: Request):
    """
    Sign in through the selected channel.

    Behavior:
        - Cross-origin posts are rejected (403 csrf_violation).
        - Accepted sign-ins redirect (302) to the area of the stored role and
          set the session cookie.
        - Failures re-render the card with an error toast: 400 invalid input or
          channel, 401 rejected credentials, 403 channel/role mismatch (the new
          session is signed out again).
    """
    if not _is_same_origin(request):
        return _csrf_rejected()
    mod = _resolve_active_main(request)
    form = await request.form()
    email = _form_str(form, "email")
    ports = await _open_ports(request, mod)
    if ports is None:
        return _service_unavailable()
    before = ports.auth.session_id
    navigator = ResponseNavigator(mod.IDENTITY_CFG.route_paths)
    notifier = PageNotifier()
    page = LoginPage(ports.auth, ports.roles, navigator, notifier)
    try:
        page.channels.select(_form_str(form, "channel") or Channel.ADMIN.value)
    except ValueError:
        page.checking_auth = False
        _bad_channel(notifier, "login")
        return _render(request, "Login", _login_card(page, email), notifier, status_code=400)

    await page.load()
    if navigator.path:
        resp = _navigate(request, navigator.path, replace=navigator.replace_history)
        _sync_session_cookie(resp, mod, before, ports.auth.session_id)
        return resp

    outcome = await page.submit(email, _form_str(form, "password"))
    if outcome.ok and navigator.path:
        resp = _navigate(request, navigator.path, replace=navigator.replace_history)
    else:
        resp = _render(request, "Login", _login_card(page, email), notifier, status_code=_status_for(outcome))
    _sync_session_cookie(resp, mod, before, ports.auth.session_id)
    return resp


@auth_router.get("/auth/signup", response_class=HTMLResponse)
async def auth_signup_page(request: Request, channel: str | None = None):
    """Render the sign-up card (customer tab by default) or forward a signed-in user."""
    mod = _resolve_active_main(request)
    ports = await _open_ports(request, mod)
    if ports is None:
        return _service_unavailable()
    before = ports.auth.session_id
    navigator = ResponseNavigator(mod.IDENTITY_CFG.route_paths)
    notifier = PageNotifier()
    page = SignupPage(ports.auth, ports.roles, navigator, notifier)
    if channel:
        try:
            page.channels.select(channel)
        except ValueError:
            pass

    await page.load()
    if navigator.path:
        resp = _navigate(request, navigator.path, replace=navigator.replace_history)
    else:
        resp = _render(request, "Sign Up", _signup_card(page), notifier)
    _sync_session_cookie(resp, mod, before, ports.auth.session_id)
    return resp


@auth_router.post("/auth/signup", response_class=HTMLResponse)
async def auth_signup_submit(request: Request):
    """
    Register an account whose role is the selected sign-up channel.

    Behavior:
        - Verification links point at `APP_BASE_URL` (or the request origin)
          plus the channel's area path.
        - Success on a full-page post renders the success (and, if the role
          write failed, warning) toasts with a link on to the channel's area;
          a bare redirect would drop them. HTMX clients are redirected with
          `HX-Redirect` and receive the same notifications via `HX-Trigger`.
        - Failures re-render the card: 400 invalid input or channel, 401
          provider rejection.
    """
    if not _is_same_origin(request):
        return _csrf_rejected()
    mod = _resolve_active_main(request)
    form = await request.form()
    values = {key: _form_str(form, key) for key in ("full_name", "phone", "email")}
    ports = await _open_ports(request, mod)
    if ports is None:
        return _service_unavailable()
    before = ports.auth.session_id
    cfg = mod.IDENTITY_CFG
    navigator = ResponseNavigator(cfg.route_paths)
    notifier = PageNotifier()
    page = SignupPage(
        ports.auth,
        ports.roles,
        navigator,
        notifier,
        redirect_base=cfg.app_base_url or request_app_base(request),
        route_paths=cfg.route_paths,
    )
    try:
        page.channels.select(_form_str(form, "channel") or SignUpChannel.CUSTOMER.value)
    except ValueError:
        page.checking_auth = False
        _bad_channel(notifier, "sign-up")
        return _render(request, "Sign Up", _signup_card(page, values), notifier, status_code=400)

    await page.load()
    if navigator.path:
        resp = _navigate(request, navigator.path, replace=navigator.replace_history)
        _sync_session_cookie(resp, mod, before, ports.auth.session_id)
        return resp

    outcome = await page.submit(
        values["email"],
        _form_str(form, "password"),
        values["full_name"],
        values["phone"] or None,
    )
    if outcome.ok and navigator.path and _is_htmx(request):
        resp = _navigate(request, navigator.path, replace=navigator.replace_history, notifier=notifier)
    elif outcome.ok and navigator.path:
        card = ContinueCard("Account created", navigator.path, lead="Continue to your TailorPro account.")
        resp = _render(request, "Account created", card.render(), notifier)
    else:
        resp = _render(request, "Sign Up", _signup_card(page, values), notifier, status_code=_status_for(outcome))
    _sync_session_cookie(resp, mod, before, ports.auth.session_id)
    return resp


@auth_router.post("/auth/logout")
async def auth_logout(request: Request):
    """
    Sign out and return to the login page.

    Behavior:
        - Provider sign-out is best-effort; failures are logged and the logout
          still completes.
        - The server-side session record is removed and the cookie expired.
    Security:
        Same-origin posts only; `Cache-Control: private, no-store`.
    """
    if not _is_same_origin(request):
        return _csrf_rejected()
    mod = _resolve_active_main(request)
    sid = _session_id(request, mod)
    factory = get_identity_factory()
    if factory is not None:
        try:
            ports = await factory(sid)
            await ports.auth.sign_out()
        except Exception as exc:
            logger.warning("Provider sign-out failed during logout: %s", exc.__class__.__name__)
    mod.SESSION_STORE.delete(sid)

    resp = _navigate(request, "/auth/login", replace=False)
    mod.clear_session_cookie(resp)
    return resp


__all__ = ["PageNotifier", "ResponseNavigator", "auth_router"]
