"""Dashboard Schemas."""

from pydantic import BaseModel


class DashboardStatsResponse(BaseModel):
    total_projects: int
    active_projects: int
    total_tasks: int
    pending_tasks: int
    completed_tasks: int
    overdue_tasks: int
    tasks_by_status: dict[str, int]
    tasks_by_priority: dict[str, int]
