"""Auth Handlers — registration, login, refresh-token rotation and logout.

Invariants:
    - Emails are stored and compared lower-cased
    - Login never reveals whether the email or the password was wrong
    - RefreshSession accepts an expired access token (signature still verified) and
      rotates the refresh token; the old one stops working
    - Logout clears the refresh token and its expiry
    - No domain events are emitted for auth operations
"""

import hmac
import logging
from datetime import timedelta

from taskflow.core import requests as rq
from taskflow.core.domain_types import as_utc
from taskflow.core.errors import Conflict, Unauthenticated
from taskflow.models import User
from taskflow.schemas.user import TokenResponse
from taskflow.services.handler_base import BaseHandlers
from taskflow.services.response_builders import user_response

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthHandlers(BaseHandlers):
    @property
    def _tokens(self):
        if self.ctx.tokens is None:
            raise RuntimeError("Token service not configured")
        return self.ctx.tokens

    async def _issue_tokens(self, user: User) -> TokenResponse:
        access_token, expires_in = self._tokens.issue_access_token(user.id, user.email)
        user.refresh_token = self._tokens.new_refresh_token()
        user.refresh_token_expires_at = (
            self.ctx.clock() + timedelta(days=self.ctx.refresh_token_days)
        )
        await self.store.users.update(user)
        await self._commit_and_publish()
        return TokenResponse(
            access_token=access_token,
            refresh_token=user.refresh_token,
            expires_in=expires_in,
            user=user_response(user),
        )

    async def register_user(self, req: rq.RegisterUser) -> TokenResponse:
        email = req.email.strip().lower()
        if await self.store.users.any(User.email == email):
            raise Conflict("A user with this email already exists")
        user = User(
            email=email,
            first_name=req.first_name.strip(),
            last_name=req.last_name.strip(),
            password_hash=self._tokens.hash_password(req.password),
        )
        await self.store.users.add(user)
        logger.info("User registered", extra={"user_id": str(user.id)})
        return await self._issue_tokens(user)

    async def login(self, req: rq.Login) -> TokenResponse:
        email = req.email.strip().lower()
        users = await self.store.users.find(User.email == email)
        user = users[0] if users else None
        if user is None or not self._tokens.verify_password(req.password, user.password_hash):
            raise Unauthenticated(INVALID_CREDENTIALS)
        return await self._issue_tokens(user)

    async def refresh_session(self, req: rq.RefreshSession) -> TokenResponse:
        user_id = self._tokens.read_user_id(req.access_token, verify_expiry=False)
        if user_id is None:
            raise Unauthenticated("Invalid access token")
        user = await self.store.users.get(user_id)
        if (
            user is None
            or not user.refresh_token
            or not hmac.compare_digest(user.refresh_token, req.refresh_token)
            or user.refresh_token_expires_at is None
            or as_utc(user.refresh_token_expires_at) <= self.ctx.clock()
        ):
            raise Unauthenticated("Invalid or expired refresh token")
        return await self._issue_tokens(user)

    async def logout(self, req: rq.Logout) -> None:
        user = await self._current_user()
        user.refresh_token = None
        user.refresh_token_expires_at = None
        await self.store.users.update(user)
        await self._commit_and_publish()
