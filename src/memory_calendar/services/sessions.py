"""Cookie-based session resolution."""

from memory_calendar.domain.sessions import Role, SessionPayload
from memory_calendar.services.tokens import TokenCodec

VIEWER_COOKIE = "viewer_session"
ADMIN_COOKIE = "admin_session"

_COOKIE_ATTRIBUTES = "HttpOnly; Secure; SameSite=Lax; Path=/"


def parse_cookies(header: str | None) -> dict[str, str]:
    """Parse a Cookie header into a name to value map."""
    cookies: dict[str, str] = {}
    for pair in (header or "").split(";"):
        name, _, value = pair.strip().partition("=")
        name = name.strip()
        if name:
            cookies[name] = value.strip()
    return cookies


def resolve_session(
    cookies: dict[str, str], codec: TokenCodec
) -> SessionPayload | None:
    """Return the admin session if present, else the viewer session."""
    admin = resolve_admin_session(cookies, codec)
    if admin is not None:
        return admin
    return _verify_cookie(cookies, VIEWER_COOKIE, Role.VIEWER, codec)


def resolve_admin_session(
    cookies: dict[str, str], codec: TokenCodec
) -> SessionPayload | None:
    """Return the session from the admin cookie only."""
    return _verify_cookie(cookies, ADMIN_COOKIE, Role.ADMIN, codec)


def session_cookie(name: str, token: str, max_age: int) -> str:
    """Render a Set-Cookie value for a session token."""
    return f"{name}={token}; {_COOKIE_ATTRIBUTES}; Max-Age={max_age}"


def cleared_cookie(name: str) -> str:
    """Render a Set-Cookie value that expires the named cookie."""
    return f"{name}=; {_COOKIE_ATTRIBUTES}; Max-Age=0"


def _verify_cookie(
    cookies: dict[str, str], name: str, role: Role, codec: TokenCodec
) -> SessionPayload | None:
    token = cookies.get(name)
    if not token:
        return None
    session = codec.verify(token)
    if session is None or session.role is not role:
        return None
    return session
