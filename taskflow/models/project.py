"""Project ORM — container for tasks, owned by one user and shared through memberships.

Invariants:
    - owner_id always references an existing user
    - status defaults to Active
    - Deleting a project removes its tasks, their comments and its memberships
      (FK ON DELETE CASCADE + explicit deletes in the repository)

Design Decisions:
    - No ORM relationship() collections: handlers load related rows through
      repositories, keeping every query explicit under AsyncSession
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from taskflow.core.domain_types import ProjectStatus
from taskflow.db.base import Base, IdentityMixin, TimestampMixin, enum_column


class Project(IdentityMixin, TimestampMixin, Base):
    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ProjectStatus] = mapped_column(
        enum_column(ProjectStatus), nullable=False, default=ProjectStatus.ACTIVE,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    start_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
