"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every entity has a UUID id plus created_at/updated_at

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
      or Alembic autogenerate runs
"""

from taskflow.models.user import User  # noqa: F401
from taskflow.models.project import Project  # noqa: F401
from taskflow.models.project_member import ProjectMember  # noqa: F401
from taskflow.models.task import Task  # noqa: F401
from taskflow.models.comment import Comment  # noqa: F401
