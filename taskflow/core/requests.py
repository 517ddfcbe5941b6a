"""Request Types — one immutable command or query per use case.

Invariants:
    - Requests carry only caller-supplied fields; the caller identity is resolved separately
    - Optional fields on Update* requests mean "leave unchanged" when None or blank
    - The class name is the request type reported by the pipeline logs

Design Decisions:
    - Frozen dataclasses rather than Pydantic: HTTP schemas coerce types at the boundary,
      structural rules live in core/validate_requests.py and run inside the pipeline
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from taskflow.core.domain_types import (
    MemberRole, ProjectStatus, TaskPriority, TaskSortKey, TaskStatus,
)


# ─── Auth ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RegisterUser:
    email: str
    password: str
    confirm_password: str
    first_name: str
    last_name: str

    def __repr__(self) -> str:
        return f"RegisterUser(email={self.email!r})"


@dataclass(frozen=True)
class Login:
    email: str
    password: str

    def __repr__(self) -> str:
        return f"Login(email={self.email!r})"


@dataclass(frozen=True)
class RefreshSession:
    access_token: str
    refresh_token: str

    def __repr__(self) -> str:
        return "RefreshSession()"


@dataclass(frozen=True)
class Logout:
    pass


# ─── Users ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class GetCurrentUser:
    pass


@dataclass(frozen=True)
class UpdateProfile:
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None


# ─── Projects ────────────────────────────────────────────────────

@dataclass(frozen=True)
class CreateProject:
    name: str
    description: str | None = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    start_date: datetime | None = None
    due_date: datetime | None = None


@dataclass(frozen=True)
class UpdateProject:
    project_id: UUID
    name: str | None = None
    description: str | None = None
    status: ProjectStatus | None = None
    start_date: datetime | None = None
    due_date: datetime | None = None


@dataclass(frozen=True)
class DeleteProject:
    project_id: UUID


@dataclass(frozen=True)
class GetProject:
    project_id: UUID


@dataclass(frozen=True)
class ListProjects:
    owned_only: bool = False
    status: ProjectStatus | None = None
    search: str | None = None


@dataclass(frozen=True)
class AddProjectMember:
    project_id: UUID
    user_id: UUID
    role: MemberRole = MemberRole.MEMBER


@dataclass(frozen=True)
class RemoveProjectMember:
    project_id: UUID
    user_id: UUID


# ─── Tasks ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class CreateTask:
    project_id: UUID
    title: str
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: UUID | None = None
    due_date: datetime | None = None


@dataclass(frozen=True)
class UpdateTask:
    task_id: UUID
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: UUID | None = None
    unassign: bool = False
    due_date: datetime | None = None
    clear_due_date: bool = False


@dataclass(frozen=True)
class DeleteTask:
    task_id: UUID


@dataclass(frozen=True)
class GetTask:
    task_id: UUID


@dataclass(frozen=True)
class ListTasks:
    project_id: UUID | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: UUID | None = None
    search: str | None = None
    sort_by: TaskSortKey = TaskSortKey.CREATED_AT
    sort_descending: bool = True
    page_number: int = 1
    page_size: int = 10


@dataclass(frozen=True)
class ListProjectTasks:
    project_id: UUID


# ─── Comments ────────────────────────────────────────────────────

@dataclass(frozen=True)
class CreateComment:
    task_id: UUID
    content: str


@dataclass(frozen=True)
class UpdateComment:
    comment_id: UUID
    content: str


@dataclass(frozen=True)
class DeleteComment:
    comment_id: UUID


@dataclass(frozen=True)
class ListComments:
    task_id: UUID


# ─── Dashboard ───────────────────────────────────────────────────

@dataclass(frozen=True)
class GetDashboardStats:
    pass
