"""Role model bundling permissions."""

from __future__ import annotations

import uuid

from sqlalchemy import Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from rbac_core.models.base import Base, KeyedEntityMixin
from rbac_core.models.types import GUID


class Role(KeyedEntityMixin, Base):
    """Named, reusable bundle of permissions."""

    __tablename__ = "roles"
    __table_args__ = (
        UniqueConstraint("key", name="uq_roles_key"),
        Index("ix_roles_name", "name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
