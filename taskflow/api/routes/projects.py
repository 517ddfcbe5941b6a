"""Project Routes — CRUD plus membership management."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from taskflow.api.dependencies import get_dispatch
from taskflow.core import requests as rq
from taskflow.core.domain_types import ProjectStatus
from taskflow.schemas.project import (
    MemberAddBody, ProjectCreateBody, ProjectDetailResponse,
    ProjectMemberResponse, ProjectResponse, ProjectUpdateBody,
)
from taskflow.services.dispatch import RequestDispatch

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    owned_only: bool = Query(False),
    project_status: ProjectStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=200),
    dispatch: RequestDispatch = Depends(get_dispatch),
):
    return await dispatch.send(rq.ListProjects(
        owned_only=owned_only, status=project_status, search=search,
    ))


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreateBody, dispatch: RequestDispatch = Depends(get_dispatch),
):
    return await dispatch.send(rq.CreateProject(
        name=body.name,
        description=body.description,
        status=body.status,
        start_date=body.start_date,
        due_date=body.due_date,
    ))


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(project_id: UUID, dispatch: RequestDispatch = Depends(get_dispatch)):
    return await dispatch.send(rq.GetProject(project_id=project_id))


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: UUID, body: ProjectUpdateBody,
    dispatch: RequestDispatch = Depends(get_dispatch),
):
    return await dispatch.send(rq.UpdateProject(
        project_id=project_id,
        name=body.name,
        description=body.description,
        status=body.status,
        start_date=body.start_date,
        due_date=body.due_date,
    ))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: UUID, dispatch: RequestDispatch = Depends(get_dispatch)):
    await dispatch.send(rq.DeleteProject(project_id=project_id))


@router.post(
    "/{project_id}/members",
    response_model=ProjectMemberResponse, status_code=status.HTTP_201_CREATED,
)
async def add_member(
    project_id: UUID, body: MemberAddBody,
    dispatch: RequestDispatch = Depends(get_dispatch),
):
    return await dispatch.send(rq.AddProjectMember(
        project_id=project_id, user_id=body.user_id, role=body.role,
    ))


@router.delete("/{project_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    project_id: UUID, user_id: UUID, dispatch: RequestDispatch = Depends(get_dispatch),
):
    await dispatch.send(rq.RemoveProjectMember(project_id=project_id, user_id=user_id))
