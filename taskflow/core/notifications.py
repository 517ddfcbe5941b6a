"""Notification Rules — pure mapping from domain events to user-facing payloads.

Invariants:
    - PURE: no IO; the fan-out service performs push and email delivery
    - The actor never receives a notification or email about their own action
    - Every event type in FORMATTERS yields the same notification keys:
      type, title, message, project_id, entity_id, action_url, timestamp
    - An email is produced only for TaskAssigned, TaskCreated with an assignee, and
      TaskStatusChanged when is_important_status_change() holds

Design Decisions:
    - FORMATTERS dict keyed by event class (explicit, one line per event type)
"""

from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from taskflow.core import events as ev
from taskflow.core.domain_types import TaskStatus


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    body: str


def notification_recipients(event: ev.DomainEvent) -> frozenset[UUID]:
    return frozenset(r for r in event.recipient_ids if r != event.actor_id)


def is_important_status_change(old: TaskStatus, new: TaskStatus) -> bool:
    """To/from Done, into InReview, or leaving InProgress for anything but InReview."""
    old, new = TaskStatus(old), TaskStatus(new)
    if old == new:
        return False
    if TaskStatus.DONE in (old, new):
        return True
    if new == TaskStatus.IN_REVIEW:
        return True
    return old == TaskStatus.IN_PROGRESS


# ─── Notification payloads ───────────────────────────────────────

def _task_url(task_id: UUID) -> str:
    return f"/tasks/{task_id}"


def _project_url(project_id: UUID) -> str:
    return f"/projects/{project_id}"


def _fmt_project_created(e: ev.ProjectCreated) -> tuple[str, str, UUID, str]:
    return ("Project created", f"{e.actor_name} created project '{e.project_name}'",
            e.project_id, _project_url(e.project_id))


def _fmt_project_updated(e: ev.ProjectUpdated) -> tuple[str, str, UUID, str]:
    changed = ", ".join(e.changed_fields) or "details"
    return ("Project updated", f"{e.actor_name} updated {changed} of '{e.project_name}'",
            e.project_id, _project_url(e.project_id))


def _fmt_project_status(e: ev.ProjectStatusChanged) -> tuple[str, str, UUID, str]:
    return ("Project status changed",
            f"'{e.project_name}' moved from {e.old_status.value} to {e.new_status.value}",
            e.project_id, _project_url(e.project_id))


def _fmt_project_deleted(e: ev.ProjectDeleted) -> tuple[str, str, UUID, str]:
    return ("Project deleted", f"{e.actor_name} deleted project '{e.project_name}'",
            e.project_id, "/projects")


def _fmt_member_added(e: ev.ProjectMemberAdded) -> tuple[str, str, UUID, str]:
    return ("Added to project",
            f"{e.actor_name} added you to '{e.project_name}' as {e.role.value}",
            e.project_id, _project_url(e.project_id))


def _fmt_task_created(e: ev.TaskCreated) -> tuple[str, str, UUID, str]:
    return ("New task", f"{e.actor_name} created '{e.task_title}' in '{e.project_name}'",
            e.task_id, _task_url(e.task_id))


def _fmt_task_updated(e: ev.TaskUpdated) -> tuple[str, str, UUID, str]:
    changed = ", ".join(e.changed_fields) or "details"
    return ("Task updated", f"{e.actor_name} updated {changed} of '{e.task_title}'",
            e.task_id, _task_url(e.task_id))


def _fmt_task_status(e: ev.TaskStatusChanged) -> tuple[str, str, UUID, str]:
    return ("Task status changed",
            f"'{e.task_title}' moved from {e.old_status.value} to {e.new_status.value}",
            e.task_id, _task_url(e.task_id))


def _fmt_task_assigned(e: ev.TaskAssigned) -> tuple[str, str, UUID, str]:
    return ("Task assigned", f"{e.actor_name} assigned you '{e.task_title}'",
            e.task_id, _task_url(e.task_id))


def _fmt_task_deleted(e: ev.TaskDeleted) -> tuple[str, str, UUID, str]:
    return ("Task deleted", f"{e.actor_name} deleted '{e.task_title}'",
            e.task_id, _project_url(e.project_id))


def _fmt_comment_created(e: ev.CommentCreated) -> tuple[str, str, UUID, str]:
    return ("New comment", f"{e.actor_name} commented on '{e.task_title}': {e.content_preview}",
            e.comment_id, _task_url(e.task_id))


def _fmt_comment_updated(e: ev.CommentUpdated) -> tuple[str, str, UUID, str]:
    return ("Comment edited", f"{e.actor_name} edited a comment on '{e.task_title}'",
            e.comment_id, _task_url(e.task_id))


def _fmt_comment_deleted(e: ev.CommentDeleted) -> tuple[str, str, UUID, str]:
    return ("Comment deleted", f"{e.actor_name} deleted a comment on '{e.task_title}'",
            e.comment_id, _task_url(e.task_id))


FORMATTERS: dict[type, Callable[[ev.DomainEvent], tuple[str, str, UUID, str]]] = {
    ev.ProjectCreated: _fmt_project_created,
    ev.ProjectUpdated: _fmt_project_updated,
    ev.ProjectStatusChanged: _fmt_project_status,
    ev.ProjectDeleted: _fmt_project_deleted,
    ev.ProjectMemberAdded: _fmt_member_added,
    ev.TaskCreated: _fmt_task_created,
    ev.TaskUpdated: _fmt_task_updated,
    ev.TaskStatusChanged: _fmt_task_status,
    ev.TaskAssigned: _fmt_task_assigned,
    ev.TaskDeleted: _fmt_task_deleted,
    ev.CommentCreated: _fmt_comment_created,
    ev.CommentUpdated: _fmt_comment_updated,
    ev.CommentDeleted: _fmt_comment_deleted,
}


def build_notification(event: ev.DomainEvent) -> dict | None:
    """Notification payload for event, or None for unknown event types."""
    formatter = FORMATTERS.get(type(event))
    if formatter is None:
        return None
    title, message, entity_id, action_url = formatter(event)
    return {
        "type": event.event_type,
        "title": title,
        "message": message,
        "project_id": str(event.project_id),
        "entity_id": str(entity_id),
        "action_url": action_url,
        "timestamp": event.occurred_at.isoformat(),
    }


# ─── Email ───────────────────────────────────────────────────────

def build_email(event: ev.DomainEvent) -> EmailMessage | None:
    if isinstance(event, ev.TaskAssigned):
        if event.assignee_id == event.actor_id:
            return None
        due = f" (due {event.due_date:%Y-%m-%d})" if event.due_date else ""
        return EmailMessage(
            to=event.assignee_email,
            subject=f"Task assigned: {event.task_title}",
            body=(
                f"Hi {event.assignee_name},\n\n{event.actor_name} assigned you "
                f"'{event.task_title}' in project '{event.project_name}'"
                f" [{event.priority.value} priority]{due}."
            ),
        )
    if isinstance(event, ev.TaskCreated):
        if not event.assignee_email or event.assignee_id == event.actor_id:
            return None
        return EmailMessage(
            to=event.assignee_email,
            subject=f"New task: {event.task_title}",
            body=(
                f"Hi {event.assignee_name},\n\n{event.actor_name} created "
                f"'{event.task_title}' in project '{event.project_name}' and assigned it to you."
            ),
        )
    if isinstance(event, ev.TaskStatusChanged):
        if (
            not event.assignee_email
            or event.assignee_id == event.actor_id
            or not is_important_status_change(event.old_status, event.new_status)
        ):
            return None
        return EmailMessage(
            to=event.assignee_email,
            subject=f"Task status changed: {event.task_title}",
            body=(
                f"Hi {event.assignee_name},\n\n{event.actor_name} moved "
                f"'{event.task_title}' from {event.old_status.value} to {event.new_status.value}."
            ),
        )
    return None
