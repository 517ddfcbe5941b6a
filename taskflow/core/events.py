"""Domain Events — immutable records of completed mutations.

Invariants:
    - Events are created only AFTER the mutation they describe has committed
    - Payloads are denormalized (names, titles, emails) so subscribers never query the store
    - recipient_ids is fixed at build time; the fan-out subtracts the actor
    - to_dict() is JSON-safe (UUID -> str, datetime -> ISO 8601, Enum -> value)

Design Decisions:
    - One frozen dataclass per event type; event_type is the class name
    - kw_only dataclasses so the shared header can carry defaults ahead of per-type fields
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from taskflow.core.domain_types import (
    MemberRole, ProjectStatus, TaskPriority, TaskStatus, utcnow,
)


def _jsonable(value: object) -> object:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, frozenset):
        return sorted(str(v) for v in value)
    if isinstance(value, tuple):
        return [_jsonable(v) for v in value]
    return value


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    actor_id: UUID
    actor_name: str
    project_id: UUID
    project_name: str
    recipient_ids: frozenset[UUID] = frozenset()
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        payload = {"event_type": self.event_type}
        for f in fields(self):
            payload[f.name] = _jsonable(getattr(self, f.name))
        return payload


# ─── Project events ──────────────────────────────────────────────

@dataclass(frozen=True, kw_only=True)
class ProjectCreated(DomainEvent):
    status: ProjectStatus


@dataclass(frozen=True, kw_only=True)
class ProjectUpdated(DomainEvent):
    changed_fields: tuple[str, ...]


@dataclass(frozen=True, kw_only=True)
class ProjectStatusChanged(DomainEvent):
    old_status: ProjectStatus
    new_status: ProjectStatus


@dataclass(frozen=True, kw_only=True)
class ProjectDeleted(DomainEvent):
    pass


@dataclass(frozen=True, kw_only=True)
class ProjectMemberAdded(DomainEvent):
    member_id: UUID
    member_name: str
    member_email: str
    role: MemberRole


# ─── Task events ─────────────────────────────────────────────────

@dataclass(frozen=True, kw_only=True)
class TaskCreated(DomainEvent):
    task_id: UUID
    task_title: str
    priority: TaskPriority
    due_date: datetime | None = None
    assignee_id: UUID | None = None
    assignee_name: str | None = None
    assignee_email: str | None = None


@dataclass(frozen=True, kw_only=True)
class TaskUpdated(DomainEvent):
    task_id: UUID
    task_title: str
    changed_fields: tuple[str, ...]


@dataclass(frozen=True, kw_only=True)
class TaskStatusChanged(DomainEvent):
    task_id: UUID
    task_title: str
    old_status: TaskStatus
    new_status: TaskStatus
    assignee_id: UUID | None = None
    assignee_name: str | None = None
    assignee_email: str | None = None


@dataclass(frozen=True, kw_only=True)
class TaskAssigned(DomainEvent):
    task_id: UUID
    task_title: str
    priority: TaskPriority
    assignee_id: UUID
    assignee_name: str
    assignee_email: str
    previous_assignee_id: UUID | None = None
    due_date: datetime | None = None


@dataclass(frozen=True, kw_only=True)
class TaskDeleted(DomainEvent):
    task_id: UUID
    task_title: str


# ─── Comment events ──────────────────────────────────────────────

@dataclass(frozen=True, kw_only=True)
class CommentCreated(DomainEvent):
    comment_id: UUID
    task_id: UUID
    task_title: str
    content_preview: str


@dataclass(frozen=True, kw_only=True)
class CommentUpdated(DomainEvent):
    comment_id: UUID
    task_id: UUID
    task_title: str
    content_preview: str


@dataclass(frozen=True, kw_only=True)
class CommentDeleted(DomainEvent):
    comment_id: UUID
    task_id: UUID
    task_title: str
