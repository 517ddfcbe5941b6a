"""Request Validation — verifies structural rules per request type.

Invariants:
    - Valid requests produce no errors
    - Each rule reports the offending field name
    - Date rules are evaluated against the injected `now`
    - Unregistered request types pass
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

from taskflow.core import requests as rq
from taskflow.core.domain_types import MemberRole
from taskflow.core.validate_requests import VALIDATORS, validate_request

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _fields(request) -> set[str]:
    return {e.field for e in validate_request(request, NOW)}


def _register(**kw):
    base = dict(
        email="ada@example.com", password="Secret#123", confirm_password="Secret#123",
        first_name="Ada", last_name="Lovelace",
    )
    base.update(kw)
    return rq.RegisterUser(**base)


# ─── Auth ────────────────────────────────────────────────────────

def test_register_valid():
    assert validate_request(_register(), NOW) == []


def test_register_password_rules():
    messages = [e.message for e in validate_request(
        _register(password="short", confirm_password="short"), NOW,
    )]
    assert any("between 8 and 100" in m for m in messages)
    assert any("uppercase" in m for m in messages)
    assert any("number" in m for m in messages)
    assert any("special" in m for m in messages)


def test_register_confirm_mismatch():
    assert _fields(_register(confirm_password="Other#123")) == {"confirm_password"}


def test_register_name_characters():
    assert _fields(_register(first_name="Ada1")) == {"first_name"}
    assert _fields(_register(last_name="Smith-Jones")) == set()


def test_register_bad_email():
    assert _fields(_register(email="not-an-email")) == {"email"}


def test_login_requires_both():
    assert _fields(rq.Login(email="", password="")) == {"email", "password"}


def test_refresh_requires_tokens():
    assert _fields(rq.RefreshSession(access_token=" ", refresh_token="")) == {
        "access_token", "refresh_token",
    }


def test_profile_blank_fields_ignored():
    assert _fields(rq.UpdateProfile(first_name="  ", email="")) == set()


def test_profile_email_format_and_length():
    assert _fields(rq.UpdateProfile(email="bad")) == {"email"}
    assert _fields(rq.UpdateProfile(first_name="x" * 101)) == {"first_name"}


# ─── Projects ────────────────────────────────────────────────────

def test_create_project_name_required():
    assert _fields(rq.CreateProject(name="   ")) == {"name"}


def test_create_project_name_too_long():
    assert _fields(rq.CreateProject(name="x" * 201)) == {"name"}


def test_create_project_description_limit():
    assert _fields(rq.CreateProject(name="P", description="d" * 2001)) == {"description"}


def test_create_project_due_must_be_future():
    assert _fields(rq.CreateProject(name="P", due_date=NOW - timedelta(days=1))) == {"due_date"}


def test_create_project_start_within_a_year():
    far = NOW + timedelta(days=400)
    assert _fields(rq.CreateProject(name="P", start_date=far)) == {"start_date"}


def test_create_project_due_after_start():
    start = NOW + timedelta(days=10)
    errors = validate_request(
        rq.CreateProject(name="P", start_date=start, due_date=start - timedelta(days=1)), NOW,
    )
    assert [e.field for e in errors] == ["due_date"]


def test_update_project_partial_is_valid():
    assert _fields(rq.UpdateProject(project_id=uuid4())) == set()


def test_update_project_nil_id_rejected():
    assert _fields(rq.UpdateProject(project_id=UUID(int=0))) == {"project_id"}


def test_add_member_owner_role_rejected():
    req = rq.AddProjectMember(project_id=uuid4(), user_id=uuid4(), role=MemberRole.OWNER)
    assert _fields(req) == {"role"}


# ─── Tasks ───────────────────────────────────────────────────────

def test_create_task_valid():
    req = rq.CreateTask(project_id=uuid4(), title="Write docs", due_date=NOW)
    assert validate_request(req, NOW) == []


def test_create_task_due_today_allowed_yesterday_rejected():
    earlier_today = NOW.replace(hour=1)
    assert _fields(rq.CreateTask(project_id=uuid4(), title="T", due_date=earlier_today)) == set()
    assert _fields(rq.CreateTask(
        project_id=uuid4(), title="T", due_date=NOW - timedelta(days=1),
    )) == {"due_date"}


def test_create_task_rejects_script_title():
    assert _fields(rq.CreateTask(project_id=uuid4(), title="<script>x</script>")) == {"title"}
    assert _fields(rq.CreateTask(project_id=uuid4(), title="javascript:alert(1)")) == {"title"}


def test_update_task_due_must_be_future():
    req = rq.UpdateTask(task_id=uuid4(), due_date=NOW - timedelta(minutes=1))
    assert _fields(req) == {"due_date"}


def test_update_task_assign_and_unassign_conflict():
    req = rq.UpdateTask(task_id=uuid4(), assignee_id=uuid4(), unassign=True)
    assert _fields(req) == {"unassign"}


def test_update_task_set_and_clear_due_conflict():
    req = rq.UpdateTask(task_id=uuid4(), due_date=NOW + timedelta(days=1), clear_due_date=True)
    assert _fields(req) == {"clear_due_date"}


def test_list_tasks_paging_bounds():
    assert _fields(rq.ListTasks(page_number=0, page_size=0)) == {"page_number", "page_size"}
    assert _fields(rq.ListTasks(page_size=500)) == set()


def test_list_tasks_unknown_sort_key():
    assert _fields(rq.ListTasks(sort_by="bogus")) == {"sort_by"}


# ─── Comments ────────────────────────────────────────────────────

def test_comment_content_bounds():
    assert _fields(rq.CreateComment(task_id=uuid4(), content="")) == {"content"}
    assert _fields(rq.CreateComment(task_id=uuid4(), content="x" * 5001)) == {"content"}
    assert _fields(rq.UpdateComment(comment_id=uuid4(), content="x" * 5000)) == set()


# ─── Registry ────────────────────────────────────────────────────

def test_requests_without_fields_pass():
    assert validate_request(rq.GetDashboardStats(), NOW) == []
    assert rq.GetDashboardStats not in VALIDATORS


def test_unknown_type_passes():
    assert validate_request(object(), NOW) == []
