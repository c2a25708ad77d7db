"""Identity tables owned by the surrounding auth framework.

The RBAC core only reads these: users are referenced by ``user_roles`` and
sessions back request authentication.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, UniqueConstraint, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rbac_core.models.base import Base, TimestampMixin
from rbac_core.models.types import GUID


class User(TimestampMixin, Base):
    """Application user; ``role`` holds comma-separated role tags.

    Only users with a verified email count as active in the user picker.
    """

    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(length=320), nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(length=255), nullable=True)
    role: Mapped[Optional[str]] = mapped_column(String(length=255), nullable=True)
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())


class UserSession(TimestampMixin, Base):
    """Bearer-token session issued by the auth framework."""

    __tablename__ = "sessions"
    __table_args__ = (
        UniqueConstraint("token", name="uq_sessions_token"),
        Index("ix_sessions_user", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    token: Mapped[str] = mapped_column(String(length=255), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship("User")
