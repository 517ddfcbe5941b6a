"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ProjectId, TaskId, CommentId wrap UUIDs; never use bare UUID in domain logic
    - All valid states encoded as Enums; no raw string matching
    - Enum values are the wire/storage spelling ("InProgress", not "in_progress")
    - TaskStatus has no transition graph: any status may move to any other

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from datetime import datetime, timezone
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ProjectId = NewType("ProjectId", UUID)
TaskId = NewType("TaskId", UUID)
CommentId = NewType("CommentId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class ProjectStatus(str, Enum):
    """Project lifecycle states."""
    ACTIVE = "Active"
    ON_HOLD = "OnHold"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"


class TaskStatus(str, Enum):
    """Task workflow states, in display order."""
    TODO = "Todo"
    IN_PROGRESS = "InProgress"
    IN_REVIEW = "InReview"
    DONE = "Done"
    CANCELLED = "Cancelled"


class TaskPriority(str, Enum):
    """Task priority, lowest first."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class MemberRole(str, Enum):
    """Role of a user inside a project membership."""
    OWNER = "Owner"
    ADMIN = "Admin"
    MEMBER = "Member"


class TaskSortKey(str, Enum):
    """Sort keys accepted by the paged task listing."""
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    TITLE = "title"
    PRIORITY = "priority"
    STATUS = "status"
    DUE_DATE = "dueDate"


# ─── Ordering & Grouping ─────────────────────────────────────────

PENDING_STATUSES = frozenset({TaskStatus.TODO, TaskStatus.IN_PROGRESS})
CLOSED_STATUSES = frozenset({TaskStatus.DONE, TaskStatus.CANCELLED})

STATUS_RANK = {s: i for i, s in enumerate(TaskStatus)}
PRIORITY_RANK = {p: i for i, p in enumerate(TaskPriority)}

MAX_PAGE_SIZE = 50


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize to an aware UTC datetime. Naive values are taken as UTC.

    SQLite hands back naive datetimes even for timezone=True columns.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
