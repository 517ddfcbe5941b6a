"""Dashboard Handler — read-only aggregate over the caller's visible projects."""

from dataclasses import asdict

from taskflow.core import requests as rq
from taskflow.core.dashboard import compute_dashboard_stats
from taskflow.schemas.dashboard import DashboardStatsResponse
from taskflow.services.handler_base import BaseHandlers


class DashboardHandlers(BaseHandlers):
    async def get_dashboard_stats(self, req: rq.GetDashboardStats) -> DashboardStatsResponse:
        caller_id = self.ctx.caller.require_user()
        projects = await self.store.projects.list_visible(caller_id)
        tasks = await self.store.tasks.list_for_projects([p.id for p in projects])
        stats = compute_dashboard_stats(projects, tasks, self.ctx.clock())
        return DashboardStatsResponse(**asdict(stats))
