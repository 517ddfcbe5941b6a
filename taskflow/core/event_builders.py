"""Event Builders — explicit constructors for every domain event.

Invariants:
    - PURE: inputs are already-loaded rows (duck-typed), no store access
    - Recipient sets per family:
        project events -> owner + members
        member added   -> the new member
        task events    -> owner + members + assignee
        TaskAssigned   -> the new assignee
        comment events -> owner + task assignee + comment author
    - The actor is NOT removed here; the fan-out does that
    - Comment previews are truncated to PREVIEW_LENGTH characters

Design Decisions:
    - One function per event type instead of reflection/auto-mapping so each payload
      is visible at the call site
"""

from collections.abc import Iterable
from uuid import UUID

from taskflow.core import events as ev
from taskflow.core.domain_types import MemberRole, ProjectStatus, TaskPriority, TaskStatus

PREVIEW_LENGTH = 100


def _header(actor, project, recipients: Iterable[UUID | None]) -> dict:
    return {
        "actor_id": actor.id,
        "actor_name": actor.full_name,
        "project_id": project.id,
        "project_name": project.name,
        "recipient_ids": frozenset(r for r in recipients if r is not None),
    }


def project_audience(project, member_ids: Iterable[UUID]) -> set[UUID]:
    return {project.owner_id, *member_ids}


def task_audience(project, member_ids: Iterable[UUID], task) -> set[UUID | None]:
    return project_audience(project, member_ids) | {task.assignee_id}


def comment_audience(project, task, author_id: UUID) -> set[UUID | None]:
    return {project.owner_id, task.assignee_id, author_id}


def preview(content: str) -> str:
    if len(content) <= PREVIEW_LENGTH:
        return content
    return content[:PREVIEW_LENGTH].rstrip() + "..."


# ─── Projects ────────────────────────────────────────────────────

def build_project_created(actor, project, member_ids: Iterable[UUID]) -> ev.ProjectCreated:
    return ev.ProjectCreated(
        **_header(actor, project, project_audience(project, member_ids)),
        status=ProjectStatus(project.status),
    )


def build_project_updated(
    actor, project, member_ids: Iterable[UUID], changed_fields: Iterable[str],
) -> ev.ProjectUpdated:
    return ev.ProjectUpdated(
        **_header(actor, project, project_audience(project, member_ids)),
        changed_fields=tuple(changed_fields),
    )


def build_project_status_changed(
    actor, project, member_ids: Iterable[UUID],
    old_status: ProjectStatus, new_status: ProjectStatus,
) -> ev.ProjectStatusChanged:
    return ev.ProjectStatusChanged(
        **_header(actor, project, project_audience(project, member_ids)),
        old_status=ProjectStatus(old_status),
        new_status=ProjectStatus(new_status),
    )


def build_project_deleted(actor, project, member_ids: Iterable[UUID]) -> ev.ProjectDeleted:
    return ev.ProjectDeleted(
        **_header(actor, project, project_audience(project, member_ids)),
    )


def build_project_member_added(
    actor, project, member, role: MemberRole,
) -> ev.ProjectMemberAdded:
    return ev.ProjectMemberAdded(
        **_header(actor, project, [member.id]),
        member_id=member.id,
        member_name=member.full_name,
        member_email=member.email,
        role=MemberRole(role),
    )


# ─── Tasks ───────────────────────────────────────────────────────

def build_task_created(
    actor, project, member_ids: Iterable[UUID], task, assignee=None,
) -> ev.TaskCreated:
    return ev.TaskCreated(
        **_header(actor, project, task_audience(project, member_ids, task)),
        task_id=task.id,
        task_title=task.title,
        priority=TaskPriority(task.priority),
        due_date=task.due_date,
        assignee_id=assignee.id if assignee else None,
        assignee_name=assignee.full_name if assignee else None,
        assignee_email=assignee.email if assignee else None,
    )


def build_task_updated(
    actor, project, member_ids: Iterable[UUID], task, changed_fields: Iterable[str],
) -> ev.TaskUpdated:
    return ev.TaskUpdated(
        **_header(actor, project, task_audience(project, member_ids, task)),
        task_id=task.id,
        task_title=task.title,
        changed_fields=tuple(changed_fields),
    )


def build_task_status_changed(
    actor, project, member_ids: Iterable[UUID], task,
    old_status: TaskStatus, assignee=None,
) -> ev.TaskStatusChanged:
    return ev.TaskStatusChanged(
        **_header(actor, project, task_audience(project, member_ids, task)),
        task_id=task.id,
        task_title=task.title,
        old_status=TaskStatus(old_status),
        new_status=TaskStatus(task.status),
        assignee_id=assignee.id if assignee else None,
        assignee_name=assignee.full_name if assignee else None,
        assignee_email=assignee.email if assignee else None,
    )


def build_task_assigned(
    actor, project, task, assignee, previous_assignee_id: UUID | None = None,
) -> ev.TaskAssigned:
    return ev.TaskAssigned(
        **_header(actor, project, [assignee.id]),
        task_id=task.id,
        task_title=task.title,
        priority=TaskPriority(task.priority),
        assignee_id=assignee.id,
        assignee_name=assignee.full_name,
        assignee_email=assignee.email,
        previous_assignee_id=previous_assignee_id,
        due_date=task.due_date,
    )


def build_task_deleted(
    actor, project, member_ids: Iterable[UUID], task,
) -> ev.TaskDeleted:
    return ev.TaskDeleted(
        **_header(actor, project, task_audience(project, member_ids, task)),
        task_id=task.id,
        task_title=task.title,
    )


# ─── Comments ────────────────────────────────────────────────────

def build_comment_created(actor, project, task, comment) -> ev.CommentCreated:
    return ev.CommentCreated(
        **_header(actor, project, comment_audience(project, task, comment.author_id)),
        comment_id=comment.id,
        task_id=task.id,
        task_title=task.title,
        content_preview=preview(comment.content),
    )


def build_comment_updated(actor, project, task, comment) -> ev.CommentUpdated:
    return ev.CommentUpdated(
        **_header(actor, project, comment_audience(project, task, comment.author_id)),
        comment_id=comment.id,
        task_id=task.id,
        task_title=task.title,
        content_preview=preview(comment.content),
    )


def build_comment_deleted(actor, project, task, comment) -> ev.CommentDeleted:
    return ev.CommentDeleted(
        **_header(actor, project, comment_audience(project, task, comment.author_id)),
        comment_id=comment.id,
        task_id=task.id,
        task_title=task.title,
    )
