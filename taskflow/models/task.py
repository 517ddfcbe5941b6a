"""Task ORM — a unit of work inside a project.

Invariants:
    - project_id always references an existing project
    - status defaults to Todo, priority to Medium; any status may follow any other
    - assignee_id is nulled when the assigned user is deleted
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from taskflow.core.domain_types import TaskPriority, TaskStatus
from taskflow.db.base import Base, IdentityMixin, TimestampMixin, enum_column


class Task(IdentityMixin, TimestampMixin, Base):
    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[TaskStatus] = mapped_column(
        enum_column(TaskStatus), nullable=False, default=TaskStatus.TODO, index=True,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        enum_column(TaskPriority), nullable=False, default=TaskPriority.MEDIUM,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    assignee_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
