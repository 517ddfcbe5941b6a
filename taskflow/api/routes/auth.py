"""Auth Routes — register, login, token refresh and logout.

Invariants:
    - Routes only translate bodies into requests; all rules run in the pipeline
    - register/login/refresh work without a bearer token; logout requires one
"""

from fastapi import APIRouter, Depends, status

from taskflow.api.dependencies import get_dispatch
from taskflow.core import requests as rq
from taskflow.schemas.user import LoginBody, RefreshBody, RegisterBody, TokenResponse
from taskflow.services.dispatch import RequestDispatch

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterBody, dispatch: RequestDispatch = Depends(get_dispatch)):
    return await dispatch.send(rq.RegisterUser(
        email=body.email,
        password=body.password,
        confirm_password=body.confirm_password,
        first_name=body.first_name,
        last_name=body.last_name,
    ))


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginBody, dispatch: RequestDispatch = Depends(get_dispatch)):
    return await dispatch.send(rq.Login(email=body.email, password=body.password))


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshBody, dispatch: RequestDispatch = Depends(get_dispatch)):
    return await dispatch.send(rq.RefreshSession(
        access_token=body.access_token, refresh_token=body.refresh_token,
    ))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(dispatch: RequestDispatch = Depends(get_dispatch)):
    await dispatch.send(rq.Logout())
