"""Domain Types — verifies enum spellings, grouping sets and datetime normalization.

Tests:
    - Enum values are the wire/storage spelling
    - Pending/closed status groups match the dashboard definitions
    - as_utc treats naive datetimes as UTC
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from taskflow.core.domain_types import (
    CLOSED_STATUSES, PENDING_STATUSES, PRIORITY_RANK, STATUS_RANK,
    MemberRole, ProjectStatus, TaskPriority, TaskSortKey, TaskStatus,
    UserId, as_utc,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert UserId(uid) == uid


def test_task_status_wire_values():
    assert [s.value for s in TaskStatus] == [
        "Todo", "InProgress", "InReview", "Done", "Cancelled",
    ]


def test_project_status_and_roles():
    assert ProjectStatus("OnHold") is ProjectStatus.ON_HOLD
    assert {r.value for r in MemberRole} == {"Owner", "Admin", "Member"}


def test_sort_keys_accept_camel_case():
    assert TaskSortKey("dueDate") is TaskSortKey.DUE_DATE
    assert TaskSortKey("createdAt") is TaskSortKey.CREATED_AT


def test_status_groups():
    assert PENDING_STATUSES == {TaskStatus.TODO, TaskStatus.IN_PROGRESS}
    assert CLOSED_STATUSES == {TaskStatus.DONE, TaskStatus.CANCELLED}


def test_priority_rank_increases_with_urgency():
    assert PRIORITY_RANK[TaskPriority.LOW] < PRIORITY_RANK[TaskPriority.CRITICAL]
    assert STATUS_RANK[TaskStatus.TODO] == 0


def test_as_utc_naive_is_taken_as_utc():
    naive = datetime(2026, 1, 1, 12, 0)
    assert as_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_as_utc_converts_other_offsets():
    plus_two = datetime(2026, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert as_utc(plus_two) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert as_utc(None) is None
