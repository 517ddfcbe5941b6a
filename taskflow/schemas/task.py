"""Task Schemas — task responses, paging envelope and request bodies."""

from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel

from taskflow.core.domain_types import TaskPriority, TaskStatus

T = TypeVar("T")


class TaskResponse(BaseModel):
    id: UUID
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    project_id: UUID
    project_name: str
    assignee_id: UUID | None = None
    assignee_name: str | None = None
    assignee_email: str | None = None
    due_date: datetime | None = None
    created_at: datetime
    updated_at: datetime
    comment_count: int = 0
    is_overdue: bool = False


class PagedResponse(BaseModel, Generic[T]):
    items: list[T]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int
    has_previous: bool
    has_next: bool

    @classmethod
    def build(
        cls, items: list, total_count: int, page_number: int, page_size: int,
    ) -> "PagedResponse":
        total_pages = (total_count + page_size - 1) // page_size if page_size else 0
        return cls(
            items=items,
            total_count=total_count,
            page_number=page_number,
            page_size=page_size,
            total_pages=total_pages,
            has_previous=page_number > 1,
            has_next=page_number < total_pages,
        )


class TaskCreateBody(BaseModel):
    project_id: UUID
    title: str
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: UUID | None = None
    due_date: datetime | None = None


class TaskUpdateBody(BaseModel):
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: UUID | None = None
    unassign: bool = False
    due_date: datetime | None = None
    clear_due_date: bool = False
