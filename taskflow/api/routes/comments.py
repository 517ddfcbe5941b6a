"""Comment Routes — nested under the owning task."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from taskflow.api.dependencies import get_dispatch
from taskflow.core import requests as rq
from taskflow.schemas.comment import CommentBody, CommentResponse
from taskflow.services.dispatch import RequestDispatch

router = APIRouter(prefix="/api/v1/tasks/{task_id}/comments", tags=["comments"])


@router.get("", response_model=list[CommentResponse])
async def list_comments(task_id: UUID, dispatch: RequestDispatch = Depends(get_dispatch)):
    return await dispatch.send(rq.ListComments(task_id=task_id))


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    task_id: UUID, body: CommentBody, dispatch: RequestDispatch = Depends(get_dispatch),
):
    return await dispatch.send(rq.CreateComment(task_id=task_id, content=body.content))


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    task_id: UUID, comment_id: UUID, body: CommentBody,
    dispatch: RequestDispatch = Depends(get_dispatch),
):
    return await dispatch.send(rq.UpdateComment(comment_id=comment_id, content=body.content))


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    task_id: UUID, comment_id: UUID, dispatch: RequestDispatch = Depends(get_dispatch),
):
    await dispatch.send(rq.DeleteComment(comment_id=comment_id))
