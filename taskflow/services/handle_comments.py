"""Comment Handlers — create, edit, delete and list comments on a task.

Invariants:
    - Create/list require the project owner or the task assignee
    - Edit requires the author; delete requires the author or the project owner
    - ListComments resolves every author with ONE find_by_ids call
    - Comments are returned oldest first
"""

from taskflow.core import event_builders as eb
from taskflow.core import requests as rq
from taskflow.core.authorization import AccessFacts, Action, require
from taskflow.core.domain_types import as_utc
from taskflow.models import Comment
from taskflow.schemas.comment import CommentResponse
from taskflow.services.handler_base import BaseHandlers
from taskflow.services.response_builders import comment_response


class CommentHandlers(BaseHandlers):
    async def create_comment(self, req: rq.CreateComment) -> CommentResponse:
        caller = await self._current_user()
        task = await self._load_task(req.task_id)
        project = await self._load_project(task.project_id)
        require(Action.COMMENT_CREATE, AccessFacts(
            caller_id=caller.id, owner_id=project.owner_id, assignee_id=task.assignee_id,
        ))

        comment = Comment(content=req.content.strip(), task_id=task.id, author_id=caller.id)
        await self.store.comments.add(comment)
        await self._commit_and_publish([
            eb.build_comment_created(caller, project, task, comment),
        ])
        return comment_response(comment, caller)

    async def update_comment(self, req: rq.UpdateComment) -> CommentResponse:
        caller = await self._current_user()
        comment = await self._load_comment(req.comment_id)
        require(Action.COMMENT_UPDATE, AccessFacts(
            caller_id=caller.id, author_id=comment.author_id,
        ))

        content = req.content.strip()
        if content != comment.content:
            task = await self._load_task(comment.task_id)
            project = await self._load_project(task.project_id)
            comment.content = content
            await self.store.comments.update(comment)
            await self._commit_and_publish([
                eb.build_comment_updated(caller, project, task, comment),
            ])
        return comment_response(comment, caller)

    async def delete_comment(self, req: rq.DeleteComment) -> None:
        caller = await self._current_user()
        comment = await self._load_comment(req.comment_id)
        task = await self._load_task(comment.task_id)
        project = await self._load_project(task.project_id)
        require(Action.COMMENT_DELETE, AccessFacts(
            caller_id=caller.id, owner_id=project.owner_id, author_id=comment.author_id,
        ))

        event = eb.build_comment_deleted(caller, project, task, comment)
        await self.store.comments.delete(comment)
        await self._commit_and_publish([event])

    async def list_comments(self, req: rq.ListComments) -> list[CommentResponse]:
        caller_id = self.ctx.caller.require_user()
        task = await self._load_task(req.task_id)
        project = await self._load_project(task.project_id)
        require(Action.COMMENT_READ, AccessFacts(
            caller_id=caller_id, owner_id=project.owner_id, assignee_id=task.assignee_id,
        ))

        comments = await self.store.comments.find(Comment.task_id == task.id)
        comments.sort(key=lambda c: as_utc(c.created_at))
        authors = await self.store.users.find_by_ids({c.author_id for c in comments})
        return [comment_response(c, authors.get(c.author_id)) for c in comments]
