"""Task Handlers — create, update, delete, get and list tasks.

Invariants:
    - Create requires project owner or member; the assignee must be owner or member too
    - Read/update/delete require project owner or the task assignee
    - New tasks always start in Todo; priority defaults to Medium
    - Partial update: present, non-blank values only; unassign and clear_due_date
      are the only ways to null the assignee or due date
    - Events: TaskUpdated(changed fields), TaskStatusChanged when status moved,
      TaskAssigned when the assignee changed to a user
    - Paged listing is limited to projects visible to the caller; page size <= 50
"""

import logging
from uuid import UUID

from taskflow.core import event_builders as eb
from taskflow.core import requests as rq
from taskflow.core.authorization import AccessFacts, Action, require
from taskflow.core.domain_types import (
    MAX_PAGE_SIZE, TaskPriority, TaskStatus, as_utc,
)
from taskflow.core.errors import ValidationFailed
from taskflow.core.repository_protocols import TaskFilter
from taskflow.models import Project, Task, User
from taskflow.schemas.task import PagedResponse, TaskResponse
from taskflow.services.handler_base import BaseHandlers
from taskflow.services.response_builders import task_response

logger = logging.getLogger(__name__)


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _task_facts(caller_id: UUID, project: Project, task: Task) -> AccessFacts:
    return AccessFacts(
        caller_id=caller_id, owner_id=project.owner_id, assignee_id=task.assignee_id,
    )


class TaskHandlers(BaseHandlers):
    async def _load_task_with_project(self, task_id: UUID) -> tuple[Task, Project]:
        task = await self._load_task(task_id)
        project = await self._load_project(task.project_id)
        return task, project

    async def _eligible_assignee(
        self, project: Project, member_ids: set[UUID], assignee_id: UUID,
    ) -> User:
        if assignee_id != project.owner_id and assignee_id not in member_ids:
            raise ValidationFailed.single(
                "assignee_id", "Assignee must be the owner or a member of the project",
            )
        assignee = await self.store.users.get(assignee_id)
        if assignee is None:
            raise ValidationFailed.single("assignee_id", "Assignee does not exist")
        return assignee

    async def create_task(self, req: rq.CreateTask) -> TaskResponse:
        caller = await self._current_user()
        project = await self._load_project(req.project_id)
        member_ids = await self.store.projects.member_ids(project.id)
        require(Action.TASK_CREATE, AccessFacts(
            caller_id=caller.id, owner_id=project.owner_id,
            member_ids=frozenset(member_ids),
        ))

        assignee = None
        if req.assignee_id is not None:
            assignee = await self._eligible_assignee(project, member_ids, req.assignee_id)

        task = Task(
            title=req.title.strip(),
            description=req.description,
            status=TaskStatus.TODO,
            priority=TaskPriority(req.priority),
            project_id=project.id,
            assignee_id=assignee.id if assignee else None,
            due_date=req.due_date,
        )
        await self.store.tasks.add(task)

        events = [eb.build_task_created(caller, project, member_ids, task, assignee)]
        if assignee is not None:
            events.append(eb.build_task_assigned(caller, project, task, assignee))
        await self._commit_and_publish(events)
        logger.info(f"Task created: {task.id}", extra={"user_id": str(caller.id)})
        return task_response(task, project, assignee, 0, self.ctx.clock())

    async def update_task(self, req: rq.UpdateTask) -> TaskResponse:
        caller = await self._current_user()
        task, project = await self._load_task_with_project(req.task_id)
        require(Action.TASK_UPDATE, _task_facts(caller.id, project, task))
        member_ids = await self.store.projects.member_ids(project.id)

        changed: list[str] = []
        old_status = TaskStatus(task.status)
        previous_assignee_id = task.assignee_id
        new_assignee: User | None = None

        if not _blank(req.title) and req.title.strip() != task.title:
            task.title = req.title.strip()
            changed.append("title")
        if not _blank(req.description) and req.description != task.description:
            task.description = req.description
            changed.append("description")
        if req.status is not None and TaskStatus(req.status) != old_status:
            task.status = TaskStatus(req.status)
            changed.append("status")
        if req.priority is not None and TaskPriority(req.priority) != TaskPriority(task.priority):
            task.priority = TaskPriority(req.priority)
            changed.append("priority")
        if req.assignee_id is not None and req.assignee_id != task.assignee_id:
            new_assignee = await self._eligible_assignee(project, member_ids, req.assignee_id)
            task.assignee_id = new_assignee.id
            changed.append("assignee")
        elif req.unassign and task.assignee_id is not None:
            task.assignee_id = None
            changed.append("assignee")
        if req.due_date is not None and as_utc(req.due_date) != as_utc(task.due_date):
            task.due_date = req.due_date
            changed.append("due_date")
        elif req.clear_due_date and task.due_date is not None:
            task.due_date = None
            changed.append("due_date")

        assignee = new_assignee
        if assignee is None and task.assignee_id is not None:
            assignee = await self.store.users.get(task.assignee_id)

        if changed:
            await self.store.tasks.update(task)
            events = [eb.build_task_updated(caller, project, member_ids, task, changed)]
            if "status" in changed:
                events.append(eb.build_task_status_changed(
                    caller, project, member_ids, task, old_status, assignee,
                ))
            if new_assignee is not None:
                events.append(eb.build_task_assigned(
                    caller, project, task, new_assignee, previous_assignee_id,
                ))
            await self._commit_and_publish(events)

        counts = await self.store.tasks.count_comments([task.id])
        return task_response(task, project, assignee, counts.get(task.id, 0), self.ctx.clock())

    async def delete_task(self, req: rq.DeleteTask) -> None:
        caller = await self._current_user()
        task, project = await self._load_task_with_project(req.task_id)
        require(Action.TASK_DELETE, _task_facts(caller.id, project, task))
        member_ids = await self.store.projects.member_ids(project.id)

        event = eb.build_task_deleted(caller, project, member_ids, task)
        await self.store.tasks.delete(task)
        await self._commit_and_publish([event])

    async def get_task(self, req: rq.GetTask) -> TaskResponse:
        caller_id = self.ctx.caller.require_user()
        task, project = await self._load_task_with_project(req.task_id)
        require(Action.TASK_READ, _task_facts(caller_id, project, task))

        assignee = await self.store.users.get(task.assignee_id) if task.assignee_id else None
        counts = await self.store.tasks.count_comments([task.id])
        return task_response(task, project, assignee, counts.get(task.id, 0), self.ctx.clock())

    async def list_tasks(self, req: rq.ListTasks) -> PagedResponse[TaskResponse]:
        caller_id = self.ctx.caller.require_user()
        page_size = min(req.page_size, MAX_PAGE_SIZE)
        task_filter = TaskFilter(
            project_id=req.project_id,
            status=req.status,
            priority=req.priority,
            assignee_id=req.assignee_id,
            search=req.search,
            sort_by=req.sort_by,
            sort_descending=req.sort_descending,
            page_number=req.page_number,
            page_size=page_size,
        )
        page = await self.store.tasks.list_paged(task_filter, caller_id)
        items = await self._task_responses(page.items)
        return PagedResponse[TaskResponse].build(
            items, page.total_count, page.page_number, page.page_size,
        )

    async def list_project_tasks(self, req: rq.ListProjectTasks) -> list[TaskResponse]:
        caller_id = self.ctx.caller.require_user()
        project = await self._load_project(req.project_id)
        member_ids = await self.store.projects.member_ids(project.id)
        require(Action.PROJECT_READ, AccessFacts(
            caller_id=caller_id, owner_id=project.owner_id,
            member_ids=frozenset(member_ids),
        ))
        tasks = await self.store.tasks.list_by_project(project.id)
        return await self._task_responses(tasks, {project.id: project})

    async def _task_responses(
        self, tasks: list[Task], projects: dict | None = None,
    ) -> list[TaskResponse]:
        if not tasks:
            return []
        if projects is None:
            projects = await self.store.projects.find_by_ids({t.project_id for t in tasks})
        assignees = await self.store.users.find_by_ids(
            {t.assignee_id for t in tasks if t.assignee_id},
        )
        counts = await self.store.tasks.count_comments([t.id for t in tasks])
        now = self.ctx.clock()
        return [
            task_response(
                t, projects.get(t.project_id), assignees.get(t.assignee_id),
                counts.get(t.id, 0), now,
            )
            for t in tasks
        ]
