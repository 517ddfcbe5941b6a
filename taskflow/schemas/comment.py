"""Comment Schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class CommentResponse(BaseModel):
    id: UUID
    content: str
    task_id: UUID
    author_id: UUID
    author_name: str
    author_email: str
    created_at: datetime
    updated_at: datetime
    is_edited: bool = False


class CommentBody(BaseModel):
    content: str
