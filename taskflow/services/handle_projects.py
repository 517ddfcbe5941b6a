"""Project Handlers — create, update, delete, read and membership management.

Invariants:
    - Creating a project inserts an Owner membership for the caller in the same commit
    - Read requires owner or member; update/delete/membership changes require owner
    - Partial update: only present, non-blank values are applied; an unchanged request
      commits nothing and emits nothing
    - DeleteProject captures recipients BEFORE the cascade removes the memberships
    - The owner cannot be removed and cannot be added twice

Design Decisions:
    - Handler class with explicit context (store, caller, publisher), no globals
"""

import logging
from uuid import UUID

from taskflow.core import event_builders as eb
from taskflow.core import requests as rq
from taskflow.core.authorization import AccessFacts, Action, require
from taskflow.core.domain_types import MemberRole, ProjectStatus, as_utc
from taskflow.core.errors import Conflict, NotFound, ValidationFailed
from taskflow.models import Project, ProjectMember
from taskflow.schemas.project import (
    ProjectDetailResponse, ProjectMemberResponse, ProjectResponse,
)
from taskflow.services.handler_base import BaseHandlers
from taskflow.services.response_builders import (
    member_response, project_detail_response, project_response,
)

logger = logging.getLogger(__name__)


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class ProjectHandlers(BaseHandlers):
    async def _facts(self, project: Project, caller_id: UUID) -> tuple[AccessFacts, set[UUID]]:
        member_ids = await self.store.projects.member_ids(project.id)
        facts = AccessFacts(
            caller_id=caller_id, owner_id=project.owner_id,
            member_ids=frozenset(member_ids),
        )
        return facts, member_ids

    async def create_project(self, req: rq.CreateProject) -> ProjectResponse:
        caller = await self._current_user()
        project = Project(
            name=req.name.strip(),
            description=req.description,
            status=ProjectStatus(req.status),
            owner_id=caller.id,
            start_date=req.start_date,
            due_date=req.due_date,
        )
        await self.store.projects.add(project)
        await self.store.members.add(ProjectMember(
            project_id=project.id, user_id=caller.id, role=MemberRole.OWNER,
        ))
        event = eb.build_project_created(caller, project, [caller.id])
        await self._commit_and_publish([event])
        logger.info(f"Project created: {project.id}", extra={"user_id": str(caller.id)})
        return project_response(project, caller, task_count=0, member_count=1)

    async def update_project(self, req: rq.UpdateProject) -> ProjectResponse:
        caller = await self._current_user()
        project = await self._load_project(req.project_id)
        facts, member_ids = await self._facts(project, caller.id)
        require(Action.PROJECT_UPDATE, facts)

        changed: list[str] = []
        old_status = ProjectStatus(project.status)
        if not _blank(req.name) and req.name.strip() != project.name:
            project.name = req.name.strip()
            changed.append("name")
        if not _blank(req.description) and req.description != project.description:
            project.description = req.description
            changed.append("description")
        if req.status is not None and ProjectStatus(req.status) != old_status:
            project.status = ProjectStatus(req.status)
            changed.append("status")
        if req.start_date is not None and as_utc(req.start_date) != as_utc(project.start_date):
            project.start_date = req.start_date
            changed.append("start_date")
        if req.due_date is not None and as_utc(req.due_date) != as_utc(project.due_date):
            project.due_date = req.due_date
            changed.append("due_date")

        if (
            project.start_date is not None and project.due_date is not None
            and as_utc(project.due_date) <= as_utc(project.start_date)
        ):
            raise ValidationFailed.single("due_date", "Due date must be after start date")

        tasks = await self.store.tasks.list_for_projects([project.id])
        if changed:
            await self.store.projects.update(project)
            events = [eb.build_project_updated(caller, project, member_ids, changed)]
            if "status" in changed:
                events.append(eb.build_project_status_changed(
                    caller, project, member_ids, old_status, project.status,
                ))
            await self._commit_and_publish(events)
        return project_response(project, caller, len(tasks), len(member_ids))

    async def delete_project(self, req: rq.DeleteProject) -> None:
        caller = await self._current_user()
        project = await self._load_project(req.project_id)
        facts, member_ids = await self._facts(project, caller.id)
        require(Action.PROJECT_DELETE, facts)

        event = eb.build_project_deleted(caller, project, member_ids)
        await self.store.projects.delete(project)
        await self._commit_and_publish([event])
        logger.info(f"Project deleted: {req.project_id}", extra={"user_id": str(caller.id)})

    async def get_project(self, req: rq.GetProject) -> ProjectDetailResponse:
        caller_id = self.ctx.caller.require_user()
        project = await self._load_project(req.project_id)
        facts, _ = await self._facts(project, caller_id)
        require(Action.PROJECT_READ, facts)

        tasks = await self.store.tasks.list_by_project(project.id)
        members = await self.store.members.find(ProjectMember.project_id == project.id)
        user_ids = {project.owner_id}
        user_ids.update(m.user_id for m in members)
        user_ids.update(t.assignee_id for t in tasks if t.assignee_id)
        users = await self.store.users.find_by_ids(user_ids)
        return project_detail_response(project, users, tasks, members)

    async def list_projects(self, req: rq.ListProjects) -> list[ProjectResponse]:
        caller_id = self.ctx.caller.require_user()
        projects = await self.store.projects.list_visible(
            caller_id, owned_only=req.owned_only,
            status=req.status, search=req.search,
        )
        if not projects:
            return []
        project_ids = [p.id for p in projects]
        owners = await self.store.users.find_by_ids({p.owner_id for p in projects})
        tasks = await self.store.tasks.list_for_projects(project_ids)
        members = await self.store.members.find(ProjectMember.project_id.in_(project_ids))

        task_counts: dict[UUID, int] = {}
        for t in tasks:
            task_counts[t.project_id] = task_counts.get(t.project_id, 0) + 1
        member_counts: dict[UUID, int] = {}
        for m in members:
            member_counts[m.project_id] = member_counts.get(m.project_id, 0) + 1
        return [
            project_response(
                p, owners.get(p.owner_id),
                task_counts.get(p.id, 0), member_counts.get(p.id, 0),
            )
            for p in projects
        ]

    async def add_project_member(self, req: rq.AddProjectMember) -> ProjectMemberResponse:
        caller = await self._current_user()
        project = await self._load_project(req.project_id)
        facts, member_ids = await self._facts(project, caller.id)
        require(Action.PROJECT_MANAGE_MEMBERS, facts)

        user = await self.store.users.get(req.user_id)
        if user is None:
            raise NotFound("User", req.user_id)
        if user.id == project.owner_id or user.id in member_ids:
            raise Conflict("User is already a member of this project")

        member = ProjectMember(
            project_id=project.id, user_id=user.id, role=MemberRole(req.role),
        )
        await self.store.members.add(member)
        event = eb.build_project_member_added(caller, project, user, member.role)
        await self._commit_and_publish([event])
        return member_response(member, user)

    async def remove_project_member(self, req: rq.RemoveProjectMember) -> None:
        caller = await self._current_user()
        project = await self._load_project(req.project_id)
        facts, _ = await self._facts(project, caller.id)
        require(Action.PROJECT_MANAGE_MEMBERS, facts)

        if req.user_id == project.owner_id:
            raise Conflict("The project owner cannot be removed")
        rows = await self.store.members.find(
            ProjectMember.project_id == project.id,
            ProjectMember.user_id == req.user_id,
        )
        if not rows:
            raise NotFound("ProjectMember", req.user_id)
        for row in rows:
            await self.store.members.delete(row)
        await self._commit_and_publish()
