"""Dashboard Aggregation — single-pass statistics over visible projects and tasks.

Invariants:
    - PURE: takes already-loaded rows, returns a value object
    - tasks_by_status always carries all 5 status keys, tasks_by_priority all 4 keys
    - Overdue = due_date < now AND status not in {Done, Cancelled}
    - Pending = Todo + InProgress; Completed = Done

Design Decisions:
    - Inputs are duck-typed (status / priority / due_date attributes) so ORM rows
      and plain test objects are interchangeable
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from taskflow.core.domain_types import (
    CLOSED_STATUSES, PENDING_STATUSES, ProjectStatus, TaskPriority, TaskStatus,
    as_utc,
)


@dataclass(frozen=True)
class DashboardStats:
    total_projects: int = 0
    active_projects: int = 0
    total_tasks: int = 0
    pending_tasks: int = 0
    completed_tasks: int = 0
    overdue_tasks: int = 0
    tasks_by_status: dict[str, int] = field(default_factory=dict)
    tasks_by_priority: dict[str, int] = field(default_factory=dict)


def is_overdue(task, now: datetime) -> bool:
    return (
        task.due_date is not None
        and as_utc(task.due_date) < now
        and TaskStatus(task.status) not in CLOSED_STATUSES
    )


def compute_dashboard_stats(
    projects: Iterable, tasks: Iterable, now: datetime,
) -> DashboardStats:
    total_projects = 0
    active_projects = 0
    for project in projects:
        total_projects += 1
        if ProjectStatus(project.status) == ProjectStatus.ACTIVE:
            active_projects += 1

    by_status = {s.value: 0 for s in TaskStatus}
    by_priority = {p.value: 0 for p in TaskPriority}
    total = pending = completed = overdue = 0
    for task in tasks:
        status = TaskStatus(task.status)
        total += 1
        by_status[status.value] += 1
        by_priority[TaskPriority(task.priority).value] += 1
        if status in PENDING_STATUSES:
            pending += 1
        elif status == TaskStatus.DONE:
            completed += 1
        if is_overdue(task, now):
            overdue += 1

    return DashboardStats(
        total_projects=total_projects,
        active_projects=active_projects,
        total_tasks=total,
        pending_tasks=pending,
        completed_tasks=completed,
        overdue_tasks=overdue,
        tasks_by_status=by_status,
        tasks_by_priority=by_priority,
    )
