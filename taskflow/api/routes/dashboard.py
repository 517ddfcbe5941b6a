"""Dashboard Routes."""

from fastapi import APIRouter, Depends

from taskflow.api.dependencies import get_dispatch
from taskflow.core import requests as rq
from taskflow.schemas.dashboard import DashboardStatsResponse
from taskflow.services.dispatch import RequestDispatch

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_stats(dispatch: RequestDispatch = Depends(get_dispatch)):
    return await dispatch.send(rq.GetDashboardStats())
