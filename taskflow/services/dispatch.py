"""Request Dispatch — explicit routing from request type to handler method.

Invariants:
    - Every request->handler mapping is visible in build_handlers(); no getattr magic,
      no auto-discovery
    - Unknown request types raise HandlerNotRegisteredError (from the pipeline)
    - Handlers are instantiated per dispatch with one shared HandlerContext
    - Every request passes Logging -> Performance -> Validation before its handler

Design Decisions:
    - Explicit dict over reflection: every mapping visible in one place
    - Handlers split by resource: one class per handle_*.py module
"""

from typing import Any

from taskflow.core import requests as rq
from taskflow.services.handle_auth import AuthHandlers
from taskflow.services.handle_comments import CommentHandlers
from taskflow.services.handle_dashboard import DashboardHandlers
from taskflow.services.handle_projects import ProjectHandlers
from taskflow.services.handle_tasks import TaskHandlers
from taskflow.services.handle_users import UserHandlers
from taskflow.services.handler_base import HandlerContext
from taskflow.services.pipeline import Handler, RequestPipeline, default_behaviors


def build_handlers(ctx: HandlerContext) -> dict[type, Handler]:
    auth = AuthHandlers(ctx)
    users = UserHandlers(ctx)
    projects = ProjectHandlers(ctx)
    tasks = TaskHandlers(ctx)
    comments = CommentHandlers(ctx)
    dashboard = DashboardHandlers(ctx)

    # ADR: every mapping explicit; adding a request type requires editing this dict
    return {
        # Auth
        rq.RegisterUser: auth.register_user,
        rq.Login: auth.login,
        rq.RefreshSession: auth.refresh_session,
        rq.Logout: auth.logout,
        # Users
        rq.GetCurrentUser: users.get_current_user,
        rq.UpdateProfile: users.update_profile,
        # Projects
        rq.CreateProject: projects.create_project,
        rq.UpdateProject: projects.update_project,
        rq.DeleteProject: projects.delete_project,
        rq.GetProject: projects.get_project,
        rq.ListProjects: projects.list_projects,
        rq.AddProjectMember: projects.add_project_member,
        rq.RemoveProjectMember: projects.remove_project_member,
        # Tasks
        rq.CreateTask: tasks.create_task,
        rq.UpdateTask: tasks.update_task,
        rq.DeleteTask: tasks.delete_task,
        rq.GetTask: tasks.get_task,
        rq.ListTasks: tasks.list_tasks,
        rq.ListProjectTasks: tasks.list_project_tasks,
        # Comments
        rq.CreateComment: comments.create_comment,
        rq.UpdateComment: comments.update_comment,
        rq.DeleteComment: comments.delete_comment,
        rq.ListComments: comments.list_comments,
        # Dashboard
        rq.GetDashboardStats: dashboard.get_dashboard_stats,
    }


class RequestDispatch:
    """Per-request entry point: one pipeline over one handler context."""

    def __init__(self, ctx: HandlerContext, slow_request_threshold_ms: int = 500):
        self.ctx = ctx
        self._pipeline = RequestPipeline(
            build_handlers(ctx),
            default_behaviors(ctx.caller.user_id, slow_request_threshold_ms),
        )

    async def send(self, request: Any) -> Any:
        return await self._pipeline.send(request)
