"""User Routes — the caller's own profile."""

from fastapi import APIRouter, Depends

from taskflow.api.dependencies import get_dispatch
from taskflow.core import requests as rq
from taskflow.schemas.user import ProfileUpdateBody, UserResponse
from taskflow.services.dispatch import RequestDispatch

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(dispatch: RequestDispatch = Depends(get_dispatch)):
    return await dispatch.send(rq.GetCurrentUser())


@router.put("/me", response_model=UserResponse)
async def update_me(
    body: ProfileUpdateBody, dispatch: RequestDispatch = Depends(get_dispatch),
):
    return await dispatch.send(rq.UpdateProfile(
        first_name=body.first_name, last_name=body.last_name, email=body.email,
    ))
