"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions never await them; handlers orchestrate the calls
    - Criteria are opaque to core (SQLAlchemy expressions in the shipped store)
"""

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar
from uuid import UUID

from taskflow.core.domain_types import (
    ProjectStatus, TaskPriority, TaskSortKey, TaskStatus,
)
from taskflow.core.events import DomainEvent
from taskflow.core.notifications import EmailMessage

T = TypeVar("T")


@dataclass(frozen=True)
class TaskFilter:
    """Filter + paging arguments for the paged task listing."""
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
class Page(Generic[T]):
    items: list[T]
    total_count: int
    page_number: int
    page_size: int


class Repository(Protocol[T]):
    """Generic entity repository — implemented by shell."""
    async def get(self, entity_id: UUID) -> T | None: ...
    async def add(self, entity: T) -> T: ...
    async def update(self, entity: T) -> T: ...
    async def delete(self, entity: T) -> None: ...
    async def find(self, *criteria: Any) -> list[T]: ...
    async def any(self, *criteria: Any) -> bool: ...
    async def find_by_ids(self, ids: Iterable[UUID]) -> dict[UUID, T]: ...


class ProjectRepository(Repository[Any], Protocol):
    async def list_visible(
        self, user_id: UUID, *, owned_only: bool = False,
        status: ProjectStatus | None = None, search: str | None = None,
    ) -> list[Any]: ...
    async def member_ids(self, project_id: UUID) -> set[UUID]: ...


class TaskRepository(Repository[Any], Protocol):
    async def list_paged(self, task_filter: TaskFilter, user_id: UUID) -> Page[Any]: ...
    async def list_for_projects(self, project_ids: Iterable[UUID]) -> list[Any]: ...
    async def list_by_project(self, project_id: UUID) -> list[Any]: ...
    async def count_comments(self, task_ids: Iterable[UUID]) -> dict[UUID, int]: ...


class EntityStore(Protocol):
    """One unit of work: repositories sharing a transaction."""
    users: Repository[Any]
    projects: ProjectRepository
    members: Repository[Any]
    tasks: TaskRepository
    comments: Repository[Any]

    async def commit(self) -> None: ...


class TokenService(Protocol):
    def issue_access_token(self, user_id: UUID, email: str) -> tuple[str, int]: ...
    def read_user_id(self, token: str, *, verify_expiry: bool = True) -> UUID | None: ...
    def new_refresh_token(self) -> str: ...
    def hash_password(self, password: str) -> str: ...
    def verify_password(self, password: str, password_hash: str) -> bool: ...


EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventTransport(Protocol):
    async def publish(self, event: DomainEvent) -> None: ...
    def subscribe(self, handler: EventHandler) -> None: ...


class PushChannel(Protocol):
    async def push(self, user_id: UUID, notification: dict) -> int: ...


class EmailSender(Protocol):
    async def send(self, message: EmailMessage) -> None: ...
