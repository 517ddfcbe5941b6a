"""User & Auth Schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    first_name: str
    last_name: str
    full_name: str
    created_at: datetime


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserResponse


class RegisterBody(BaseModel):
    email: str
    password: str
    confirm_password: str
    first_name: str
    last_name: str


class LoginBody(BaseModel):
    email: str
    password: str


class RefreshBody(BaseModel):
    access_token: str
    refresh_token: str


class ProfileUpdateBody(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
