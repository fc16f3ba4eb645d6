"""Session login endpoints and access guards."""

from __future__ import annotations

import hmac
import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Header, HTTPException, Request, Response, status

from memory_calendar.api.models import AdminLoginRequest, ViewerLoginRequest
from memory_calendar.domain.sessions import Role, SessionPayload
from memory_calendar.services.sessions import (
    ADMIN_COOKIE,
    VIEWER_COOKIE,
    cleared_cookie,
    parse_cookies,
    resolve_admin_session,
    resolve_session,
    session_cookie,
)
from memory_calendar.services.tokens import (
    ADMIN_MAX_AGE,
    VIEWER_MAX_AGE,
    TokenConfigurationError,
)

if TYPE_CHECKING:
    from memory_calendar.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

NO_STORE = {"Cache-Control": "no-store"}


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _unauthorized(message: str = "Unauthorized") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED, detail=message, headers=NO_STORE
    )


def _misconfigured() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Server misconfigured",
    )


def _matches(submitted: str, expected: str) -> bool:
    return bool(submitted) and hmac.compare_digest(
        submitted.encode("utf-8"), expected.encode("utf-8")
    )


async def require_viewer(request: Request) -> SessionPayload:
    """Allow any viewer or admin session."""
    container = _container(request)
    cookies = parse_cookies(request.headers.get("cookie"))
    session = resolve_session(cookies, container.token_codec)
    if session is None:
        raise _unauthorized()
    return session


async def require_admin(
    request: Request, admin_pin: str | None = Header(default=None, alias="admin-pin")
) -> None:
    """Allow an admin session cookie or the admin PIN header."""
    container = _container(request)
    cookies = parse_cookies(request.headers.get("cookie"))
    if resolve_admin_session(cookies, container.token_codec) is not None:
        return
    configured_pin = container.settings.admin_pin.strip()
    if configured_pin and admin_pin and _matches(admin_pin, configured_pin):
        return
    raise _unauthorized()


@router.post("/auth/viewer")
async def viewer_login(
    request: Request, response: Response, payload: ViewerLoginRequest | None = None
) -> dict[str, bool]:
    """Exchange the viewer password for a viewer session cookie."""
    container = _container(request)
    expected = container.settings.viewer_password.strip()
    if not expected:
        logger.error("VIEWER_PASSWORD env var is not set")
        raise _misconfigured()
    submitted = (payload.password or "").strip() if payload else ""
    if not _matches(submitted, expected):
        raise _unauthorized("Invalid password")
    try:
        token = container.token_codec.create(Role.VIEWER, VIEWER_MAX_AGE)
    except TokenConfigurationError as exc:
        logger.exception("Viewer login error")
        raise _misconfigured() from exc
    response.headers.append(
        "set-cookie", session_cookie(VIEWER_COOKIE, token, VIEWER_MAX_AGE)
    )
    return {"ok": True}


@router.post("/admin/auth")
async def admin_login(
    request: Request, response: Response, payload: AdminLoginRequest | None = None
) -> dict[str, bool]:
    """Exchange the admin PIN for an admin session cookie."""
    container = _container(request)
    expected = container.settings.admin_pin.strip()
    if not expected:
        logger.error("ADMIN_PIN env var is not set")
        raise _misconfigured()
    submitted = (payload.pin or "").strip() if payload else ""
    if not _matches(submitted, expected):
        raise _unauthorized("Invalid PIN")
    try:
        token = container.token_codec.create(Role.ADMIN, ADMIN_MAX_AGE)
    except TokenConfigurationError as exc:
        logger.exception("Admin auth error")
        raise _misconfigured() from exc
    response.headers.append(
        "set-cookie", session_cookie(ADMIN_COOKIE, token, ADMIN_MAX_AGE)
    )
    return {"ok": True}


@router.post("/auth/logout")
async def logout(response: Response) -> dict[str, bool]:
    """Clear both session cookies."""
    response.headers.append("set-cookie", cleared_cookie(VIEWER_COOKIE))
    response.headers.append("set-cookie", cleared_cookie(ADMIN_COOKIE))
    return {"ok": True}


@router.get("/auth/me")
async def me(request: Request, response: Response) -> dict[str, str]:
    """Report the role of the current session."""
    container = _container(request)
    cookies = parse_cookies(request.headers.get("cookie"))
    session = resolve_session(cookies, container.token_codec)
    if session is None:
        raise _unauthorized("Not authenticated")
    response.headers.update(NO_STORE)
    return {"role": session.role.value}

