"""Request Validation — pure structural checks per request type.

Invariants:
    - All functions are PURE: no IO, no async, no store access
    - A validator returns a list of FieldError; empty list means valid
    - Checks cover required fields, length bounds, enum membership and date ordering only;
      anything needing the store (existence, uniqueness, membership) belongs to handlers
    - Optional fields on Update* requests are checked only when present and non-blank
    - `now` is injected so date rules are deterministic under test

Design Decisions:
    - Explicit VALIDATORS dict keyed by request type (no auto-discovery)
    - Request types without an entry validate trivially
"""

import re
from collections.abc import Callable
from datetime import datetime, timedelta
from enum import Enum
from uuid import UUID

from taskflow.core.domain_types import (
    MemberRole, ProjectStatus, TaskPriority, TaskSortKey, TaskStatus,
    as_utc, utcnow,
)
from taskflow.core.errors import FieldError
from taskflow.core import requests as rq

NAME_MAX = 200
DESCRIPTION_MAX = 2000
COMMENT_MAX = 5000
PERSON_NAME_MAX = 100
REGISTER_NAME_MAX = 50
EMAIL_MAX = 256
REGISTER_EMAIL_MAX = 100
PASSWORD_MIN = 8
PASSWORD_MAX = 100

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PERSON_NAME_RE = re.compile(r"^[A-Za-z\s\-]+$")
_SPECIAL_CHAR_RE = re.compile(r"[!@#$%^&*()_+\-=\[\]{};:'\",.<>?/\\|`~]")
_UNSAFE_TITLE_PATTERNS = ("<script", "</script", "javascript:", "onerror=")


# ─── Field helpers ───────────────────────────────────────────────

def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _check_required_text(
    errors: list[FieldError], field: str, value: str | None,
    label: str, max_len: int,
) -> None:
    if _blank(value):
        errors.append(FieldError(field, f"{label} is required"))
    elif len(value) > max_len:
        errors.append(FieldError(field, f"{label} must not exceed {max_len} characters"))


def _check_optional_text(
    errors: list[FieldError], field: str, value: str | None,
    label: str, max_len: int,
) -> None:
    if value is not None and len(value) > max_len:
        errors.append(FieldError(field, f"{label} must not exceed {max_len} characters"))


def _check_id(errors: list[FieldError], field: str, value: object) -> None:
    if not isinstance(value, UUID) or value.int == 0:
        errors.append(FieldError(field, f"{field} must be a valid id"))


def _check_enum(
    errors: list[FieldError], field: str, value: object, enum_cls: type[Enum],
) -> None:
    if isinstance(value, enum_cls):
        return
    try:
        enum_cls(value)
    except ValueError:
        errors.append(FieldError(field, f"Invalid {field} value"))


def _check_email(
    errors: list[FieldError], field: str, value: str, max_len: int,
) -> None:
    if not _EMAIL_RE.match(value):
        errors.append(FieldError(field, "Email must be a valid email address"))
    elif len(value) > max_len:
        errors.append(FieldError(field, f"Email must not exceed {max_len} characters"))


def _check_title_safe(errors: list[FieldError], field: str, value: str) -> None:
    lowered = value.lower()
    if any(p in lowered for p in _UNSAFE_TITLE_PATTERNS):
        errors.append(FieldError(field, "Title contains invalid characters"))


def _check_date_order(
    errors: list[FieldError], start: datetime | None, due: datetime | None,
) -> None:
    if start is not None and due is not None and as_utc(due) <= as_utc(start):
        errors.append(FieldError("due_date", "Due date must be after start date"))


# ─── Auth & users ────────────────────────────────────────────────

def validate_register_user(req: rq.RegisterUser, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    if _blank(req.email):
        errors.append(FieldError("email", "Email is required"))
    else:
        _check_email(errors, "email", req.email.strip(), REGISTER_EMAIL_MAX)

    if not req.password:
        errors.append(FieldError("password", "Password is required"))
    else:
        if not PASSWORD_MIN <= len(req.password) <= PASSWORD_MAX:
            errors.append(FieldError(
                "password",
                f"Password must be between {PASSWORD_MIN} and {PASSWORD_MAX} characters",
            ))
        if not re.search(r"[A-Z]", req.password):
            errors.append(FieldError("password", "Password must contain at least one uppercase letter"))
        if not re.search(r"[a-z]", req.password):
            errors.append(FieldError("password", "Password must contain at least one lowercase letter"))
        if not re.search(r"[0-9]", req.password):
            errors.append(FieldError("password", "Password must contain at least one number"))
        if not _SPECIAL_CHAR_RE.search(req.password):
            errors.append(FieldError("password", "Password must contain at least one special character"))

    if req.confirm_password != req.password:
        errors.append(FieldError("confirm_password", "Passwords do not match"))

    for field, value, label in (
        ("first_name", req.first_name, "First name"),
        ("last_name", req.last_name, "Last name"),
    ):
        _check_required_text(errors, field, value, label, REGISTER_NAME_MAX)
        if not _blank(value) and not _PERSON_NAME_RE.match(value):
            errors.append(FieldError(
                field, f"{label} can only contain letters, spaces, and hyphens",
            ))
    return errors


def validate_login(req: rq.Login, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    if _blank(req.email):
        errors.append(FieldError("email", "Email is required"))
    if not req.password:
        errors.append(FieldError("password", "Password is required"))
    return errors


def validate_refresh_session(req: rq.RefreshSession, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    if _blank(req.access_token):
        errors.append(FieldError("access_token", "Access token is required"))
    if _blank(req.refresh_token):
        errors.append(FieldError("refresh_token", "Refresh token is required"))
    return errors


def validate_update_profile(req: rq.UpdateProfile, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    if not _blank(req.first_name):
        _check_optional_text(errors, "first_name", req.first_name, "First name", PERSON_NAME_MAX)
    if not _blank(req.last_name):
        _check_optional_text(errors, "last_name", req.last_name, "Last name", PERSON_NAME_MAX)
    if not _blank(req.email):
        _check_email(errors, "email", req.email.strip(), EMAIL_MAX)
    return errors


# ─── Projects ────────────────────────────────────────────────────

def validate_create_project(req: rq.CreateProject, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_required_text(errors, "name", req.name, "Project name", NAME_MAX)
    _check_optional_text(errors, "description", req.description, "Project description", DESCRIPTION_MAX)
    _check_enum(errors, "status", req.status, ProjectStatus)
    if req.start_date is not None and as_utc(req.start_date) > now + timedelta(days=365):
        errors.append(FieldError(
            "start_date", "Start date cannot be more than 1 year in the future",
        ))
    if req.due_date is not None and as_utc(req.due_date) <= now:
        errors.append(FieldError("due_date", "Due date must be in the future"))
    _check_date_order(errors, req.start_date, req.due_date)
    return errors


def validate_update_project(req: rq.UpdateProject, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_id(errors, "project_id", req.project_id)
    if not _blank(req.name):
        _check_optional_text(errors, "name", req.name, "Project name", NAME_MAX)
    _check_optional_text(errors, "description", req.description, "Project description", DESCRIPTION_MAX)
    if req.status is not None:
        _check_enum(errors, "status", req.status, ProjectStatus)
    _check_date_order(errors, req.start_date, req.due_date)
    return errors


def validate_project_id(req, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_id(errors, "project_id", req.project_id)
    return errors


def validate_list_projects(req: rq.ListProjects, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    if req.status is not None:
        _check_enum(errors, "status", req.status, ProjectStatus)
    return errors


def validate_add_project_member(req: rq.AddProjectMember, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_id(errors, "project_id", req.project_id)
    _check_id(errors, "user_id", req.user_id)
    _check_enum(errors, "role", req.role, MemberRole)
    if req.role == MemberRole.OWNER:
        errors.append(FieldError("role", "Owner role cannot be assigned"))
    return errors


def validate_remove_project_member(req: rq.RemoveProjectMember, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_id(errors, "project_id", req.project_id)
    _check_id(errors, "user_id", req.user_id)
    return errors


# ─── Tasks ───────────────────────────────────────────────────────

def validate_create_task(req: rq.CreateTask, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_id(errors, "project_id", req.project_id)
    _check_required_text(errors, "title", req.title, "Task title", NAME_MAX)
    if not _blank(req.title):
        _check_title_safe(errors, "title", req.title)
    _check_optional_text(errors, "description", req.description, "Task description", DESCRIPTION_MAX)
    _check_enum(errors, "priority", req.priority, TaskPriority)
    if req.assignee_id is not None:
        _check_id(errors, "assignee_id", req.assignee_id)
    start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if req.due_date is not None and as_utc(req.due_date) < start_of_today:
        errors.append(FieldError("due_date", "Due date cannot be in the past"))
    return errors


def validate_update_task(req: rq.UpdateTask, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_id(errors, "task_id", req.task_id)
    if not _blank(req.title):
        _check_optional_text(errors, "title", req.title, "Title", NAME_MAX)
        _check_title_safe(errors, "title", req.title)
    _check_optional_text(errors, "description", req.description, "Description", DESCRIPTION_MAX)
    if req.status is not None:
        _check_enum(errors, "status", req.status, TaskStatus)
    if req.priority is not None:
        _check_enum(errors, "priority", req.priority, TaskPriority)
    if req.assignee_id is not None:
        _check_id(errors, "assignee_id", req.assignee_id)
        if req.unassign:
            errors.append(FieldError("unassign", "Cannot assign and unassign in the same request"))
    if req.due_date is not None:
        if req.clear_due_date:
            errors.append(FieldError("clear_due_date", "Cannot set and clear the due date together"))
        elif as_utc(req.due_date) <= now:
            errors.append(FieldError("due_date", "Due date must be in the future"))
    return errors


def validate_task_id(req, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_id(errors, "task_id", req.task_id)
    return errors


def validate_list_tasks(req: rq.ListTasks, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    if req.page_number < 1:
        errors.append(FieldError("page_number", "Page number must be at least 1"))
    if req.page_size < 1:
        errors.append(FieldError("page_size", "Page size must be at least 1"))
    _check_enum(errors, "sort_by", req.sort_by, TaskSortKey)
    if req.status is not None:
        _check_enum(errors, "status", req.status, TaskStatus)
    if req.priority is not None:
        _check_enum(errors, "priority", req.priority, TaskPriority)
    return errors


# ─── Comments ────────────────────────────────────────────────────

def validate_create_comment(req: rq.CreateComment, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_id(errors, "task_id", req.task_id)
    _check_required_text(errors, "content", req.content, "Comment content", COMMENT_MAX)
    return errors


def validate_update_comment(req: rq.UpdateComment, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_id(errors, "comment_id", req.comment_id)
    _check_required_text(errors, "content", req.content, "Comment content", COMMENT_MAX)
    return errors


def validate_comment_id(req, now: datetime) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_id(errors, "comment_id", req.comment_id)
    return errors


# ADR: every mapping explicit; a new request type adds one line here
VALIDATORS: dict[type, Callable[[object, datetime], list[FieldError]]] = {
    rq.RegisterUser: validate_register_user,
    rq.Login: validate_login,
    rq.RefreshSession: validate_refresh_session,
    rq.UpdateProfile: validate_update_profile,
    rq.CreateProject: validate_create_project,
    rq.UpdateProject: validate_update_project,
    rq.DeleteProject: validate_project_id,
    rq.GetProject: validate_project_id,
    rq.ListProjects: validate_list_projects,
    rq.AddProjectMember: validate_add_project_member,
    rq.RemoveProjectMember: validate_remove_project_member,
    rq.CreateTask: validate_create_task,
    rq.UpdateTask: validate_update_task,
    rq.DeleteTask: validate_task_id,
    rq.GetTask: validate_task_id,
    rq.ListTasks: validate_list_tasks,
    rq.ListProjectTasks: validate_project_id,
    rq.CreateComment: validate_create_comment,
    rq.UpdateComment: validate_update_comment,
    rq.DeleteComment: validate_comment_id,
    rq.ListComments: validate_task_id,
}


def validate_request(request: object, now: datetime | None = None) -> list[FieldError]:
    """Run the validator registered for type(request). Unregistered types pass."""
    validator = VALIDATORS.get(type(request))
    if validator is None:
        return []
    return validator(request, now or utcnow())
