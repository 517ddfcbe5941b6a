"""Project Schemas — list/detail responses and request bodies.

Invariants:
    - ProjectResponse.owner_name and counts are denormalized by the handler
    - ProjectDetailResponse embeds task summaries and members; no second round-trip needed
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from taskflow.core.domain_types import MemberRole, ProjectStatus, TaskPriority, TaskStatus


class ProjectResponse(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    status: ProjectStatus
    owner_id: UUID
    owner_name: str
    start_date: datetime | None = None
    due_date: datetime | None = None
    created_at: datetime
    updated_at: datetime
    task_count: int = 0
    member_count: int = 0


class ProjectMemberResponse(BaseModel):
    project_id: UUID
    user_id: UUID
    email: str
    full_name: str
    role: MemberRole
    joined_at: datetime


class TaskSummary(BaseModel):
    id: UUID
    title: str
    status: TaskStatus
    priority: TaskPriority
    assignee_id: UUID | None = None
    assignee_name: str | None = None
    due_date: datetime | None = None


class ProjectDetailResponse(ProjectResponse):
    tasks: list[TaskSummary] = []
    members: list[ProjectMemberResponse] = []


class ProjectCreateBody(BaseModel):
    name: str
    description: str | None = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    start_date: datetime | None = None
    due_date: datetime | None = None


class ProjectUpdateBody(BaseModel):
    name: str | None = None
    description: str | None = None
    status: ProjectStatus | None = None
    start_date: datetime | None = None
    due_date: datetime | None = None


class MemberAddBody(BaseModel):
    user_id: UUID
    role: MemberRole = MemberRole.MEMBER
