"""Notification Stream — SSE endpoint draining the caller's push session.

Invariants:
    - One push session per open stream, connected only once the response body starts
      streaming and disconnected in finally
    - First frame is a "connected" event; then one frame per notification
    - A keepalive comment is sent every HEARTBEAT_SECONDS of silence

Design Decisions:
    - StreamingResponse with SSE headers that prevent proxy/browser buffering
    - Token accepted via ?access_token= because EventSource cannot set headers
"""

import asyncio
import json
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from taskflow.api.dependencies import get_runtime, get_stream_caller
from taskflow.core.identity import CallerIdentity
from taskflow.infrastructure.push_channel import ConnectionRegistry
from taskflow.infrastructure.runtime import AppRuntime

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])

HEARTBEAT_SECONDS = 15.0

# ADR: SSE headers prevent proxy/browser buffering of streamed events.
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


def format_sse(data: dict, event: str | None = None) -> str:
    lines = []
    if event:
        lines.append(f"event: {event}")
    lines.append(f"data: {json.dumps(data, ensure_ascii=False)}")
    return "\n".join(lines) + "\n\n"


async def stream_session(
    request: Request, registry: ConnectionRegistry, user_id: UUID,
    heartbeat: float = HEARTBEAT_SECONDS,
):
    session = registry.connect(user_id)
    try:
        yield format_sse({"type": "connected", "user_id": str(session.user_id)}, "connected")
        while True:
            if await request.is_disconnected():
                break
            try:
                notification = await asyncio.wait_for(session.queue.get(), heartbeat)
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
                continue
            yield format_sse(notification, "notification")
    except asyncio.CancelledError:
        logger.debug("SSE stream cancelled", extra={"user_id": str(session.user_id)})
        raise
    finally:
        registry.disconnect(session)


@router.get("/stream")
async def notification_stream(
    request: Request,
    caller: CallerIdentity = Depends(get_stream_caller),
    runtime: AppRuntime = Depends(get_runtime),
):
    user_id = caller.require_user()
    return StreamingResponse(
        stream_session(request, runtime.push_registry, user_id),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
