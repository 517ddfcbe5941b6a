"""Dashboard Aggregation — verifies counts, overdue rule and fixed key sets."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from taskflow.core.dashboard import compute_dashboard_stats, is_overdue
from taskflow.core.domain_types import ProjectStatus, TaskPriority, TaskStatus

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


@dataclass
class _Project:
    status: ProjectStatus


@dataclass
class _Task:
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None = None


def test_reference_scenario():
    projects = [_Project(ProjectStatus.ACTIVE), _Project(ProjectStatus.ARCHIVED)]
    tasks = [
        _Task(TaskStatus.TODO, TaskPriority.LOW),
        _Task(TaskStatus.DONE, TaskPriority.HIGH),
        _Task(TaskStatus.IN_PROGRESS, TaskPriority.CRITICAL, NOW - timedelta(days=1)),
    ]

    stats = compute_dashboard_stats(projects, tasks, NOW)

    assert stats.total_projects == 2
    assert stats.active_projects == 1
    assert stats.total_tasks == 3
    assert stats.pending_tasks == 2
    assert stats.completed_tasks == 1
    assert stats.overdue_tasks == 1
    assert stats.tasks_by_status == {
        "Todo": 1, "InProgress": 1, "InReview": 0, "Done": 1, "Cancelled": 0,
    }
    assert stats.tasks_by_priority == {"Low": 1, "Medium": 0, "High": 1, "Critical": 1}


def test_empty_input_has_all_keys_zeroed():
    stats = compute_dashboard_stats([], [], NOW)
    assert stats.total_tasks == 0
    assert set(stats.tasks_by_status) == {s.value for s in TaskStatus}
    assert set(stats.tasks_by_priority) == {p.value for p in TaskPriority}
    assert all(v == 0 for v in stats.tasks_by_status.values())


def test_closed_tasks_are_never_overdue():
    past = NOW - timedelta(days=3)
    assert not is_overdue(_Task(TaskStatus.DONE, TaskPriority.LOW, past), NOW)
    assert not is_overdue(_Task(TaskStatus.CANCELLED, TaskPriority.LOW, past), NOW)
    assert is_overdue(_Task(TaskStatus.IN_REVIEW, TaskPriority.LOW, past), NOW)


def test_naive_due_date_treated_as_utc():
    naive_past = (NOW - timedelta(hours=1)).replace(tzinfo=None)
    assert is_overdue(_Task(TaskStatus.TODO, TaskPriority.LOW, naive_past), NOW)


def test_accepts_raw_string_values():
    stats = compute_dashboard_stats(
        [_Project("Active")], [_Task("InReview", "Medium")], NOW,
    )
    assert stats.active_projects == 1
    assert stats.tasks_by_status["InReview"] == 1
    assert stats.pending_tasks == 0
