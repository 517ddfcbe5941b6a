"""Task Routes — CRUD, paged listing and per-project listing."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from taskflow.api.dependencies import get_dispatch
from taskflow.core import requests as rq
from taskflow.core.domain_types import TaskPriority, TaskSortKey, TaskStatus
from taskflow.schemas.task import (
    PagedResponse, TaskCreateBody, TaskResponse, TaskUpdateBody,
)
from taskflow.services.dispatch import RequestDispatch

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


@router.get("", response_model=PagedResponse[TaskResponse])
async def list_tasks(
    project_id: UUID | None = Query(None),
    task_status: TaskStatus | None = Query(None, alias="status"),
    priority: TaskPriority | None = Query(None),
    assignee_id: UUID | None = Query(None),
    search: str | None = Query(None, max_length=200),
    sort_by: TaskSortKey = Query(TaskSortKey.CREATED_AT),
    sort_descending: bool = Query(True),
    page_number: int = Query(1),
    page_size: int = Query(10),
    dispatch: RequestDispatch = Depends(get_dispatch),
):
    return await dispatch.send(rq.ListTasks(
        project_id=project_id,
        status=task_status,
        priority=priority,
        assignee_id=assignee_id,
        search=search,
        sort_by=sort_by,
        sort_descending=sort_descending,
        page_number=page_number,
        page_size=page_size,
    ))


@router.get("/project/{project_id}", response_model=list[TaskResponse])
async def list_project_tasks(
    project_id: UUID, dispatch: RequestDispatch = Depends(get_dispatch),
):
    return await dispatch.send(rq.ListProjectTasks(project_id=project_id))


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(body: TaskCreateBody, dispatch: RequestDispatch = Depends(get_dispatch)):
    return await dispatch.send(rq.CreateTask(
        project_id=body.project_id,
        title=body.title,
        description=body.description,
        priority=body.priority,
        assignee_id=body.assignee_id,
        due_date=body.due_date,
    ))


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: UUID, dispatch: RequestDispatch = Depends(get_dispatch)):
    return await dispatch.send(rq.GetTask(task_id=task_id))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID, body: TaskUpdateBody, dispatch: RequestDispatch = Depends(get_dispatch),
):
    return await dispatch.send(rq.UpdateTask(
        task_id=task_id,
        title=body.title,
        description=body.description,
        status=body.status,
        priority=body.priority,
        assignee_id=body.assignee_id,
        unassign=body.unassign,
        due_date=body.due_date,
        clear_due_date=body.clear_due_date,
    ))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: UUID, dispatch: RequestDispatch = Depends(get_dispatch)):
    await dispatch.send(rq.DeleteTask(task_id=task_id))
