"""ProjectMember ORM — explicit project/user relationship with a role.

Invariants:
    - (project_id, user_id) is unique
    - Creating a project inserts an Owner row for its owner
"""

import uuid

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from taskflow.core.domain_types import MemberRole
from taskflow.db.base import Base, IdentityMixin, TimestampMixin, enum_column


class ProjectMember(IdentityMixin, TimestampMixin, Base):
    __tablename__ = "project_members"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_members_project_user"),
    )

    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    role: Mapped[MemberRole] = mapped_column(
        enum_column(MemberRole), nullable=False, default=MemberRole.MEMBER,
    )
