"""Response Builders — map ORM rows plus denormalized lookups to response schemas."""

from datetime import datetime, timedelta

from taskflow.core.dashboard import is_overdue
from taskflow.core.domain_types import as_utc
from taskflow.models import Comment, Project, ProjectMember, Task, User
from taskflow.schemas.comment import CommentResponse
from taskflow.schemas.project import (
    ProjectDetailResponse, ProjectMemberResponse, ProjectResponse, TaskSummary,
)
from taskflow.schemas.task import TaskResponse
from taskflow.schemas.user import UserResponse

EDIT_GRACE = timedelta(seconds=1)


def user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
        created_at=as_utc(user.created_at),
    )


def project_response(
    project: Project, owner: User | None, task_count: int = 0, member_count: int = 0,
) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        status=project.status,
        owner_id=project.owner_id,
        owner_name=owner.full_name if owner else "",
        start_date=as_utc(project.start_date),
        due_date=as_utc(project.due_date),
        created_at=as_utc(project.created_at),
        updated_at=as_utc(project.updated_at),
        task_count=task_count,
        member_count=member_count,
    )


def member_response(member: ProjectMember, user: User) -> ProjectMemberResponse:
    return ProjectMemberResponse(
        project_id=member.project_id,
        user_id=member.user_id,
        email=user.email,
        full_name=user.full_name,
        role=member.role,
        joined_at=as_utc(member.created_at),
    )


def task_summary(task: Task, assignee: User | None) -> TaskSummary:
    return TaskSummary(
        id=task.id,
        title=task.title,
        status=task.status,
        priority=task.priority,
        assignee_id=task.assignee_id,
        assignee_name=assignee.full_name if assignee else None,
        due_date=as_utc(task.due_date),
    )


def project_detail_response(
    project: Project, users: dict, tasks: list[Task], members: list[ProjectMember],
) -> ProjectDetailResponse:
    base = project_response(
        project, users.get(project.owner_id), len(tasks), len(members),
    )
    return ProjectDetailResponse(
        **base.model_dump(),
        tasks=[task_summary(t, users.get(t.assignee_id)) for t in tasks],
        members=[
            member_response(m, users[m.user_id]) for m in members if m.user_id in users
        ],
    )


def task_response(
    task: Task, project: Project | None, assignee: User | None,
    comment_count: int, now: datetime,
) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        project_id=task.project_id,
        project_name=project.name if project else "",
        assignee_id=task.assignee_id,
        assignee_name=assignee.full_name if assignee else None,
        assignee_email=assignee.email if assignee else None,
        due_date=as_utc(task.due_date),
        created_at=as_utc(task.created_at),
        updated_at=as_utc(task.updated_at),
        comment_count=comment_count,
        is_overdue=is_overdue(task, now),
    )


def is_edited(comment: Comment) -> bool:
    return as_utc(comment.updated_at) - as_utc(comment.created_at) > EDIT_GRACE


def comment_response(comment: Comment, author: User | None) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        content=comment.content,
        task_id=comment.task_id,
        author_id=comment.author_id,
        author_name=author.full_name if author else "Unknown",
        author_email=author.email if author else "",
        created_at=as_utc(comment.created_at),
        updated_at=as_utc(comment.updated_at),
        is_edited=is_edited(comment),
    )
