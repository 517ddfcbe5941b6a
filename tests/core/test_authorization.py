"""Authorization Rules — verifies every action against owner/member/assignee/author facts.

Invariants:
    - Owner passes project rules regardless of membership rows
    - Members read projects and create tasks but cannot modify the project
    - Task access is owner or assignee; membership alone is not enough
    - require() raises AccessDenied with the fixed message
"""

from uuid import uuid4

import pytest

from taskflow.core.authorization import RULES, AccessFacts, Action, is_allowed, require
from taskflow.core.errors import AccessDenied

OWNER = uuid4()
MEMBER = uuid4()
ASSIGNEE = uuid4()
AUTHOR = uuid4()
STRANGER = uuid4()


def _facts(caller, **kw):
    base = dict(owner_id=OWNER, assignee_id=ASSIGNEE, author_id=AUTHOR,
                member_ids=frozenset({MEMBER}))
    base.update(kw)
    return AccessFacts(caller_id=caller, **base)


def test_every_action_has_a_rule():
    assert set(RULES) == set(Action)


@pytest.mark.parametrize("action", [Action.PROJECT_READ, Action.TASK_CREATE])
def test_owner_and_member_can_read_and_create(action):
    assert is_allowed(action, _facts(OWNER))
    assert is_allowed(action, _facts(MEMBER))
    assert not is_allowed(action, _facts(STRANGER))


def test_owner_without_membership_row_still_reads():
    assert is_allowed(Action.PROJECT_READ, _facts(OWNER, member_ids=frozenset()))


@pytest.mark.parametrize("action", [
    Action.PROJECT_UPDATE, Action.PROJECT_DELETE, Action.PROJECT_MANAGE_MEMBERS,
])
def test_only_owner_modifies_project(action):
    assert is_allowed(action, _facts(OWNER))
    assert not is_allowed(action, _facts(MEMBER))


@pytest.mark.parametrize("action", [
    Action.TASK_READ, Action.TASK_UPDATE, Action.TASK_DELETE,
    Action.COMMENT_CREATE, Action.COMMENT_READ,
])
def test_task_access_is_owner_or_assignee(action):
    assert is_allowed(action, _facts(OWNER))
    assert is_allowed(action, _facts(ASSIGNEE))
    assert not is_allowed(action, _facts(MEMBER))
    assert not is_allowed(action, _facts(STRANGER))


def test_unassigned_task_only_owner():
    assert not is_allowed(Action.TASK_READ, _facts(STRANGER, assignee_id=None))
    assert is_allowed(Action.TASK_READ, _facts(OWNER, assignee_id=None))


def test_comment_update_author_only():
    assert is_allowed(Action.COMMENT_UPDATE, _facts(AUTHOR))
    assert not is_allowed(Action.COMMENT_UPDATE, _facts(OWNER))


def test_comment_delete_author_or_owner():
    assert is_allowed(Action.COMMENT_DELETE, _facts(AUTHOR))
    assert is_allowed(Action.COMMENT_DELETE, _facts(OWNER))
    assert not is_allowed(Action.COMMENT_DELETE, _facts(ASSIGNEE))


def test_require_raises_fixed_message():
    with pytest.raises(AccessDenied) as exc:
        require(Action.PROJECT_DELETE, _facts(STRANGER))
    assert exc.value.message == "Permission denied"
    assert exc.value.http_status == 403


def test_require_passes_silently():
    assert require(Action.PROJECT_DELETE, _facts(OWNER)) is None
