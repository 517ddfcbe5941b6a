"""Handler Base — shared context, entity loading and the commit-then-publish step.

Invariants:
    - Entity loads raise NotFound BEFORE any authorization check runs, so a missing id
      always yields NotFound and an existing-but-forbidden id always yields AccessDenied
    - Events are published only after commit() succeeded
    - commit + publish run under asyncio.shield, and a cancelled caller waits for them
      to finish before the cancellation propagates: the session is never rolled back
      or closed underneath a commit whose events are already on their way
    - Handlers never commit on validation or authorization failure

Design Decisions:
    - HandlerContext dataclass: explicit dependencies, no globals
    - The store scope is per request; handlers never cache entities across requests
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from taskflow.core.domain_types import utcnow
from taskflow.core.errors import NotFound, Unauthenticated
from taskflow.core.events import DomainEvent
from taskflow.core.identity import CallerIdentity
from taskflow.core.repository_protocols import EntityStore, TokenService
from taskflow.models import Comment, Project, Task, User
from taskflow.services.event_publisher import DomainEventPublisher

logger = logging.getLogger(__name__)


@dataclass
class HandlerContext:
    store: EntityStore
    caller: CallerIdentity
    publisher: DomainEventPublisher
    tokens: TokenService | None = None
    refresh_token_days: int = 7
    clock: Callable[[], datetime] = field(default=utcnow)


class BaseHandlers:
    def __init__(self, ctx: HandlerContext):
        self.ctx = ctx
        self.store = ctx.store

    async def _current_user(self) -> User:
        user_id = self.ctx.caller.require_user()
        user = await self.store.users.get(user_id)
        if user is None:
            raise Unauthenticated("User account no longer exists")
        return user

    async def _load_project(self, project_id: UUID) -> Project:
        project = await self.store.projects.get(project_id)
        if project is None:
            raise NotFound("Project", project_id)
        return project

    async def _load_task(self, task_id: UUID) -> Task:
        task = await self.store.tasks.get(task_id)
        if task is None:
            raise NotFound("Task", task_id)
        return task

    async def _load_comment(self, comment_id: UUID) -> Comment:
        comment = await self.store.comments.get(comment_id)
        if comment is None:
            raise NotFound("Comment", comment_id)
        return comment

    async def _commit_and_publish(self, events: Iterable[DomainEvent] = ()) -> None:
        task = asyncio.ensure_future(self._commit_then_publish(list(events)))
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            # session owner must not roll back or close until commit + publish finished
            await task
            raise

    async def _commit_then_publish(self, events: list[DomainEvent]) -> None:
        await self.store.commit()
        await self.ctx.publisher.publish_all(events)
