"""Domain models for signed sessions."""

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Roles a session token can carry."""

    VIEWER = "viewer"
    ADMIN = "admin"


@dataclass(frozen=True)
class SessionPayload:
    """Verified contents of a session token."""

    role: Role
    expires_at: int
