"""Caller Identity — the authenticated user for the current request.

Invariants:
    - Resolved once per request, immutable afterwards
    - user_id None means anonymous; require_user() raises Unauthenticated
"""

from dataclasses import dataclass

from taskflow.core.domain_types import UserId
from taskflow.core.errors import Unauthenticated


@dataclass(frozen=True)
class CallerIdentity:
    user_id: UserId | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def require_user(self) -> UserId:
        if self.user_id is None:
            raise Unauthenticated()
        return self.user_id


ANONYMOUS = CallerIdentity()
