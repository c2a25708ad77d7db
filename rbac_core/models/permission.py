"""Permission model representing atomic capabilities."""

from __future__ import annotations

import uuid

from sqlalchemy import Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from rbac_core.models.base import Base, KeyedEntityMixin
from rbac_core.models.types import GUID


class Permission(KeyedEntityMixin, Base):
    """Atomic permission identified by a ``feature:action`` key."""

    __tablename__ = "permissions"
    __table_args__ = (
        UniqueConstraint("key", name="uq_permissions_key"),
        Index("ix_permissions_name", "name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
