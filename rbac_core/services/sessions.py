"""Resolve the authenticated session attached to a request and gate admin access."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import FrozenSet, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from rbac_core.models.user import User, UserSession
from rbac_core.services.errors import ForbiddenError, UnauthorizedError

logger = logging.getLogger("rbac_core.services.sessions")


def parse_role_tags(value: Optional[str]) -> FrozenSet[str]:
    """Split a comma-separated role tag string into a set of trimmed tags."""

    if not value:
        return frozenset()
    return frozenset(tag.strip() for tag in value.split(",") if tag.strip())


@dataclass(frozen=True)
class AuthenticatedUser:
    id: UUID
    email: str
    roles: FrozenSet[str]

    @classmethod
    def from_user(cls, user: User) -> "AuthenticatedUser":
        return cls(id=user.id, email=user.email, roles=parse_role_tags(user.role))


@dataclass(frozen=True)
class AuthSession:
    session_id: UUID
    user: AuthenticatedUser


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SessionResolver:
    """Looks up bearer tokens in the auth framework's session table."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def resolve(self, token: Optional[str], *, now: Optional[datetime] = None) -> Optional[AuthSession]:
        if not token:
            return None

        user_session = self._session.scalar(select(UserSession).where(UserSession.token == token))
        if user_session is None:
            return None

        now = now or datetime.now(timezone.utc)
        if _as_utc(user_session.expires_at) <= now:
            logger.info("session_expired", extra={"session_id": str(user_session.id)})
            return None

        user = self._session.get(User, user_session.user_id)
        if user is None:
            return None

        return AuthSession(session_id=user_session.id, user=AuthenticatedUser.from_user(user))

    def require(self, token: Optional[str]) -> AuthSession:
        auth_session = self.resolve(token)
        if auth_session is None:
            raise UnauthorizedError()
        return auth_session


def ensure_user_is_admin(auth_session: AuthSession, admin_role: str = "admin") -> None:
    """Raise :class:`ForbiddenError` unless the session user carries ``admin_role``."""

    if admin_role not in auth_session.user.roles:
        raise ForbiddenError()
