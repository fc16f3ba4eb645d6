"""HMAC-signed, expiring session tokens."""

import hashlib
import hmac
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from memory_calendar.domain.sessions import Role, SessionPayload

VIEWER_MAX_AGE = 365 * 24 * 60 * 60
ADMIN_MAX_AGE = 7 * 24 * 60 * 60

_SEPARATOR = "|"


class TokenConfigurationError(RuntimeError):
    """Raised when a token is requested but no signing secret is set."""


@dataclass
class TokenCodec:
    """Creates and verifies `role|expiry|signature` session tokens."""

    secret: str | None
    now: Callable[[], float] = field(default=time.time)

    def sign(self, payload: str) -> str | None:
        """Return the hex HMAC-SHA256 of the payload, or None without a secret."""
        if not self.secret:
            return None
        return hmac.new(
            self.secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    def create(self, role: Role, max_age_seconds: int) -> str:
        """Create a token for the role that expires after max_age_seconds."""
        expires_at = int(self.now()) + max_age_seconds
        payload = f"{role.value}{_SEPARATOR}{expires_at}"
        signature = self.sign(payload)
        if signature is None:
            raise TokenConfigurationError("AUTH_SECRET env var is not set")
        return f"{payload}{_SEPARATOR}{signature}"

    def verify(self, token: str) -> SessionPayload | None:
        """Return the session carried by a token, or None if it is invalid."""
        parts = token.split(_SEPARATOR)
        if len(parts) != 3:
            return None
        role_value, expiry_text, signature = parts
        try:
            role = Role(role_value)
        except ValueError:
            return None
        try:
            expires_at = int(expiry_text)
        except ValueError:
            return None
        expected = self.sign(f"{role_value}{_SEPARATOR}{expiry_text}")
        if expected is None or not _safe_equal(signature, expected):
            return None
        if int(self.now()) > expires_at:
            return None
        return SessionPayload(role=role, expires_at=expires_at)


def _safe_equal(left: str, right: str) -> bool:
    # The length check leaks only the length, which is fixed for hex digests.
    if len(left) != len(right):
        return False
    return hmac.compare_digest(left.encode("utf-8"), right.encode("utf-8"))
