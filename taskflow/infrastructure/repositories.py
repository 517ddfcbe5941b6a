"""SQLAlchemy Entity Store — repositories over one AsyncSession (one unit of work).

Invariants:
    - All repositories in a store share the same AsyncSession; nothing is visible to
      other requests until commit()
    - add/update/delete flush immediately so generated values and FK errors surface
      inside the handler, not at commit
    - Project and task deletes cascade explicitly (comments -> tasks -> memberships)
      so SQLite without FK enforcement behaves like PostgreSQL
    - find_by_ids issues exactly one SELECT regardless of how many ids are passed

Design Decisions:
    - One generic SqlRepository + two subclasses for the extra task/project queries
    - Enum ordering (priority, status) done in SQL with CASE over the rank tables
      because the stored values are strings
"""

import logging
from collections.abc import Iterable
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import case, delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.domain_types import (
    PRIORITY_RANK, STATUS_RANK, ProjectStatus, TaskSortKey, utcnow,
)
from taskflow.core.repository_protocols import Page, TaskFilter
from taskflow.infrastructure.database import to_database_error
from taskflow.models import Comment, Project, ProjectMember, Task, User

logger = logging.getLogger(__name__)

M = TypeVar("M")


class SqlRepository(Generic[M]):
    """CRUD + criteria queries for one mapped class."""

    def __init__(self, session: AsyncSession, model: type[M]):
        self._session = session
        self._model = model

    async def get(self, entity_id: UUID) -> M | None:
        return await self._session.get(self._model, entity_id)

    async def add(self, entity: M) -> M:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def update(self, entity: M) -> M:
        entity.updated_at = utcnow()
        await self._session.flush()
        return entity

    async def delete(self, entity: M) -> None:
        await self._session.delete(entity)
        await self._session.flush()

    async def find(self, *criteria: Any) -> list[M]:
        result = await self._session.execute(select(self._model).where(*criteria))
        return list(result.scalars().all())

    async def any(self, *criteria: Any) -> bool:
        stmt = select(self._model.id).where(*criteria).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    async def find_by_ids(self, ids: Iterable[UUID]) -> dict[UUID, M]:
        wanted = {i for i in ids if i is not None}
        if not wanted:
            return {}
        rows = await self.find(self._model.id.in_(wanted))
        return {row.id: row for row in rows}


def _visible_project_ids(user_id: UUID):
    """Subquery: ids of projects the user owns or is a member of."""
    member_of = select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
    return select(Project.id).where(
        or_(Project.owner_id == user_id, Project.id.in_(member_of)),
    )


def _contains(column, needle: str):
    return func.lower(func.coalesce(column, "")).contains(needle.lower())


_PRIORITY_ORDER = case({p.value: r for p, r in PRIORITY_RANK.items()}, value=Task.priority)
_STATUS_ORDER = case({s.value: r for s, r in STATUS_RANK.items()}, value=Task.status)

_SORT_COLUMNS = {
    TaskSortKey.CREATED_AT: Task.created_at,
    TaskSortKey.UPDATED_AT: Task.updated_at,
    TaskSortKey.TITLE: func.lower(Task.title),
    TaskSortKey.PRIORITY: _PRIORITY_ORDER,
    TaskSortKey.STATUS: _STATUS_ORDER,
    TaskSortKey.DUE_DATE: Task.due_date,
}


class ProjectRepository(SqlRepository[Project]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Project)

    async def delete(self, entity: Project) -> None:
        task_ids = select(Task.id).where(Task.project_id == entity.id)
        await self._session.execute(
            delete(Comment).where(Comment.task_id.in_(task_ids)),
        )
        await self._session.execute(delete(Task).where(Task.project_id == entity.id))
        await self._session.execute(
            delete(ProjectMember).where(ProjectMember.project_id == entity.id),
        )
        await super().delete(entity)

    async def list_visible(
        self, user_id: UUID, *, owned_only: bool = False,
        status: ProjectStatus | None = None, search: str | None = None,
    ) -> list[Project]:
        stmt = select(Project)
        if owned_only:
            stmt = stmt.where(Project.owner_id == user_id)
        else:
            stmt = stmt.where(Project.id.in_(_visible_project_ids(user_id)))
        if status is not None:
            stmt = stmt.where(Project.status == status)
        if search and search.strip():
            needle = search.strip()
            stmt = stmt.where(or_(
                _contains(Project.name, needle), _contains(Project.description, needle),
            ))
        stmt = stmt.order_by(Project.created_at.desc())
        return list((await self._session.execute(stmt)).scalars().all())

    async def member_ids(self, project_id: UUID) -> set[UUID]:
        stmt = select(ProjectMember.user_id).where(ProjectMember.project_id == project_id)
        return set((await self._session.execute(stmt)).scalars().all())


class TaskRepository(SqlRepository[Task]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Task)

    async def delete(self, entity: Task) -> None:
        await self._session.execute(delete(Comment).where(Comment.task_id == entity.id))
        await super().delete(entity)

    async def list_paged(self, task_filter: TaskFilter, user_id: UUID) -> Page[Task]:
        f = task_filter
        stmt = select(Task).where(Task.project_id.in_(_visible_project_ids(user_id)))
        if f.project_id is not None:
            stmt = stmt.where(Task.project_id == f.project_id)
        if f.status is not None:
            stmt = stmt.where(Task.status == f.status)
        if f.priority is not None:
            stmt = stmt.where(Task.priority == f.priority)
        if f.assignee_id is not None:
            stmt = stmt.where(Task.assignee_id == f.assignee_id)
        if f.search and f.search.strip():
            needle = f.search.strip()
            stmt = stmt.where(or_(
                _contains(Task.title, needle), _contains(Task.description, needle),
            ))

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self._session.execute(count_stmt)).scalar_one()

        column = _SORT_COLUMNS[TaskSortKey(f.sort_by)]
        ordering = column.desc() if f.sort_descending else column.asc()
        if TaskSortKey(f.sort_by) == TaskSortKey.DUE_DATE:
            ordering = ordering.nulls_last()
        stmt = (
            stmt.order_by(ordering, Task.id)
            .offset((f.page_number - 1) * f.page_size)
            .limit(f.page_size)
        )
        items = list((await self._session.execute(stmt)).scalars().all())
        return Page(
            items=items, total_count=total,
            page_number=f.page_number, page_size=f.page_size,
        )

    async def list_for_projects(self, project_ids: Iterable[UUID]) -> list[Task]:
        wanted = set(project_ids)
        if not wanted:
            return []
        return await self.find(Task.project_id.in_(wanted))

    async def list_by_project(self, project_id: UUID) -> list[Task]:
        stmt = (
            select(Task)
            .where(Task.project_id == project_id)
            .order_by(
                _STATUS_ORDER.asc(), _PRIORITY_ORDER.desc(),
                Task.due_date.asc().nulls_last(), Task.created_at.asc(),
            )
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def count_comments(self, task_ids: Iterable[UUID]) -> dict[UUID, int]:
        wanted = set(task_ids)
        if not wanted:
            return {}
        stmt = (
            select(Comment.task_id, func.count(Comment.id))
            .where(Comment.task_id.in_(wanted))
            .group_by(Comment.task_id)
        )
        counts = {task_id: 0 for task_id in wanted}
        for task_id, count in (await self._session.execute(stmt)).all():
            counts[task_id] = count
        return counts


class SqlEntityStore:
    """Store scope for one request: every repository over a single AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users: SqlRepository[User] = SqlRepository(session, User)
        self.projects = ProjectRepository(session)
        self.members: SqlRepository[ProjectMember] = SqlRepository(session, ProjectMember)
        self.tasks = TaskRepository(session)
        self.comments: SqlRepository[Comment] = SqlRepository(session, Comment)

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"DB error on commit ({type(e).__name__}): {e}")
            raise to_database_error(e, "commit") from e
