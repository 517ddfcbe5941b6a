"""API Dependencies — caller resolution and per-request dispatch wiring.

Invariants:
    - The caller is resolved once per request from the bearer token
    - A missing or invalid token yields an anonymous caller; handlers decide whether
      that is acceptable (auth endpoints) or Unauthenticated
    - One store scope (AsyncSession) per request, from get_db
"""

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.domain_types import UserId
from taskflow.core.identity import ANONYMOUS, CallerIdentity
from taskflow.infrastructure.database import get_db
from taskflow.infrastructure.repositories import SqlEntityStore
from taskflow.infrastructure.runtime import AppRuntime
from taskflow.services.dispatch import RequestDispatch
from taskflow.services.event_publisher import DomainEventPublisher
from taskflow.services.handler_base import HandlerContext

bearer_scheme = HTTPBearer(auto_error=False)


def get_runtime(request: Request) -> AppRuntime:
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise RuntimeError("Application runtime not initialized")
    return runtime


def _caller_from_token(token: str | None, runtime: AppRuntime) -> CallerIdentity:
    if not token:
        return ANONYMOUS
    user_id = runtime.tokens.read_user_id(token)
    return CallerIdentity(UserId(user_id)) if user_id else ANONYMOUS


async def get_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    runtime: AppRuntime = Depends(get_runtime),
) -> CallerIdentity:
    return _caller_from_token(credentials.credentials if credentials else None, runtime)


async def get_stream_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    access_token: str | None = Query(None),
    runtime: AppRuntime = Depends(get_runtime),
) -> CallerIdentity:
    """Like get_caller, but also accepts ?access_token= (EventSource cannot set headers)."""
    token = credentials.credentials if credentials else access_token
    return _caller_from_token(token, runtime)


async def get_dispatch(
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
    runtime: AppRuntime = Depends(get_runtime),
) -> RequestDispatch:
    ctx = HandlerContext(
        store=SqlEntityStore(db),
        caller=caller,
        publisher=DomainEventPublisher(runtime.event_bus),
        tokens=runtime.tokens,
        refresh_token_days=runtime.settings.refresh_token_expire_days,
    )
    return RequestDispatch(ctx, runtime.settings.slow_request_threshold_ms)
