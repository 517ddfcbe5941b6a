"""Authorization Rules — pure allow/deny predicates over pre-fetched facts.

Invariants:
    - All functions are PURE: no IO, no async, no store lookups
    - Handlers fetch the facts (owner, assignee, author, members) and pass them in
    - A project owner is authorized regardless of membership rows
    - require() raises AccessDenied with a fixed message; the reason is never disclosed

Design Decisions:
    - Free functions + Action -> rule lookup table instead of methods on entities
    - AccessFacts carries only ids so rules are testable without ORM objects
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from taskflow.core.errors import AccessDenied


class Action(str, Enum):
    """Protected actions checked by handlers."""
    PROJECT_READ = "project.read"
    PROJECT_UPDATE = "project.update"
    PROJECT_DELETE = "project.delete"
    PROJECT_MANAGE_MEMBERS = "project.manage_members"
    TASK_CREATE = "task.create"
    TASK_READ = "task.read"
    TASK_UPDATE = "task.update"
    TASK_DELETE = "task.delete"
    COMMENT_CREATE = "comment.create"
    COMMENT_READ = "comment.read"
    COMMENT_UPDATE = "comment.update"
    COMMENT_DELETE = "comment.delete"


@dataclass(frozen=True)
class AccessFacts:
    """Minimal fact set a rule needs. Unused fields stay None/empty."""
    caller_id: UUID
    owner_id: UUID | None = None
    assignee_id: UUID | None = None
    author_id: UUID | None = None
    member_ids: frozenset[UUID] = frozenset()


# ─── Predicates ──────────────────────────────────────────────────

def is_project_owner(facts: AccessFacts) -> bool:
    return facts.owner_id is not None and facts.caller_id == facts.owner_id


def is_project_member(facts: AccessFacts) -> bool:
    return facts.caller_id in facts.member_ids


def is_task_assignee(facts: AccessFacts) -> bool:
    return facts.assignee_id is not None and facts.caller_id == facts.assignee_id


def is_comment_author(facts: AccessFacts) -> bool:
    return facts.author_id is not None and facts.caller_id == facts.author_id


# ─── Rules ───────────────────────────────────────────────────────

def can_read_project(facts: AccessFacts) -> bool:
    return is_project_owner(facts) or is_project_member(facts)


def can_modify_project(facts: AccessFacts) -> bool:
    return is_project_owner(facts)


def can_access_task(facts: AccessFacts) -> bool:
    """Task read/update/delete and comment create/read."""
    return is_project_owner(facts) or is_task_assignee(facts)


def can_update_comment(facts: AccessFacts) -> bool:
    return is_comment_author(facts)


def can_delete_comment(facts: AccessFacts) -> bool:
    return is_comment_author(facts) or is_project_owner(facts)


RULES: dict[Action, Callable[[AccessFacts], bool]] = {
    Action.PROJECT_READ: can_read_project,
    Action.PROJECT_UPDATE: can_modify_project,
    Action.PROJECT_DELETE: can_modify_project,
    Action.PROJECT_MANAGE_MEMBERS: can_modify_project,
    Action.TASK_CREATE: can_read_project,
    Action.TASK_READ: can_access_task,
    Action.TASK_UPDATE: can_access_task,
    Action.TASK_DELETE: can_access_task,
    Action.COMMENT_CREATE: can_access_task,
    Action.COMMENT_READ: can_access_task,
    Action.COMMENT_UPDATE: can_update_comment,
    Action.COMMENT_DELETE: can_delete_comment,
}


def is_allowed(action: Action, facts: AccessFacts) -> bool:
    return RULES[action](facts)


def require(action: Action, facts: AccessFacts) -> None:
    """Raise AccessDenied unless the rule for action allows the caller."""
    if not is_allowed(action, facts):
        raise AccessDenied()
