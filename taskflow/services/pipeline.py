"""Request Pipeline — ordered behaviors wrapped around one handler per request type.

Invariants:
    - Handlers registered in an explicit dict keyed by request type (no discovery)
    - Unknown request type -> HandlerNotRegisteredError before any behavior runs
    - Behaviors compose outermost-first: behaviors[0] sees the request first and the
      result (or exception) last
    - Default order: Logging -> Performance -> Validation -> handler
    - Validation failure raises ValidationFailed and the handler never runs
    - Every behavior re-raises exceptions unchanged

Design Decisions:
    - A behavior is any object with `async handle(request, call_next)`; no base class
    - Logging records request type, outcome and elapsed time only; request field values
      never reach the log (they may hold passwords or tokens)
"""

import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from typing import Any, Protocol

from taskflow.core.domain_types import utcnow
from taskflow.core.errors import HandlerNotRegisteredError, TaskFlowError, ValidationFailed
from taskflow.core.validate_requests import validate_request

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]
CallNext = Callable[[], Awaitable[Any]]


class Behavior(Protocol):
    async def handle(self, request: Any, call_next: CallNext) -> Any: ...


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class LoggingBehavior:
    """Log request type, outcome and elapsed time at a level matching the outcome."""

    def __init__(self, user_id: object | None = None):
        self._user_id = str(user_id) if user_id is not None else None

    async def handle(self, request: Any, call_next: CallNext) -> Any:
        request_type = type(request).__name__
        start = time.perf_counter()
        extra = {"request_type": request_type, "user_id": self._user_id}
        try:
            response = await call_next()
        except TaskFlowError as e:
            level = logging.WARNING if e.http_status < 500 else logging.ERROR
            logger.log(
                level, f"{request_type} failed: {e.code}",
                extra={**extra, "outcome": e.code, "error_code": e.code,
                       "elapsed_ms": _elapsed_ms(start)},
            )
            raise
        except Exception:
            logger.error(
                f"{request_type} failed unexpectedly",
                exc_info=True,
                extra={**extra, "outcome": "INTERNAL_ERROR",
                       "elapsed_ms": _elapsed_ms(start)},
            )
            raise
        logger.info(
            f"{request_type} handled",
            extra={**extra, "outcome": "success", "elapsed_ms": _elapsed_ms(start)},
        )
        return response


class PerformanceBehavior:
    """Warn when a request runs longer than threshold_ms."""

    def __init__(self, threshold_ms: int = 500):
        self._threshold_ms = threshold_ms

    async def handle(self, request: Any, call_next: CallNext) -> Any:
        start = time.perf_counter()
        try:
            return await call_next()
        finally:
            elapsed = _elapsed_ms(start)
            if elapsed > self._threshold_ms:
                request_type = type(request).__name__
                logger.warning(
                    f"Long running request: {request_type} ({elapsed}ms)",
                    extra={
                        "request_type": request_type,
                        "elapsed_ms": elapsed,
                        "threshold_ms": self._threshold_ms,
                    },
                )


class ValidationBehavior:
    """Run the pure validator for the request type; short-circuit on field errors."""

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clock = clock

    async def handle(self, request: Any, call_next: CallNext) -> Any:
        errors = validate_request(request, self._clock())
        if errors:
            raise ValidationFailed(errors)
        return await call_next()


class RequestPipeline:
    def __init__(
        self, handlers: dict[type, Handler], behaviors: Sequence[Behavior] = (),
    ):
        self._handlers = handlers
        self._behaviors = list(behaviors)

    def handles(self, request_type: type) -> bool:
        return request_type in self._handlers

    async def send(self, request: Any) -> Any:
        handler = self._handlers.get(type(request))
        if handler is None:
            raise HandlerNotRegisteredError(type(request).__name__)

        async def call_handler() -> Any:
            return await handler(request)

        call: CallNext = call_handler
        for behavior in reversed(self._behaviors):
            call = _bind(behavior, request, call)
        return await call()


def _bind(behavior: Behavior, request: Any, call_next: CallNext) -> CallNext:
    async def call() -> Any:
        return await behavior.handle(request, call_next)
    return call


def default_behaviors(
    user_id: object | None = None, slow_request_threshold_ms: int = 500,
) -> list[Behavior]:
    return [
        LoggingBehavior(user_id),
        PerformanceBehavior(slow_request_threshold_ms),
        ValidationBehavior(),
    ]
