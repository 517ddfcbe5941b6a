"""User Handlers — current-user profile read and update."""

from taskflow.core import requests as rq
from taskflow.core.errors import Conflict
from taskflow.models import User
from taskflow.schemas.user import UserResponse
from taskflow.services.handler_base import BaseHandlers
from taskflow.services.response_builders import user_response


class UserHandlers(BaseHandlers):
    async def get_current_user(self, req: rq.GetCurrentUser) -> UserResponse:
        return user_response(await self._current_user())

    async def update_profile(self, req: rq.UpdateProfile) -> UserResponse:
        user = await self._current_user()
        changed = False
        if req.first_name and req.first_name.strip():
            user.first_name = req.first_name.strip()
            changed = True
        if req.last_name and req.last_name.strip():
            user.last_name = req.last_name.strip()
            changed = True
        if req.email and req.email.strip():
            email = req.email.strip().lower()
            if email != user.email:
                if await self.store.users.any(User.email == email, User.id != user.id):
                    raise Conflict("Email is already in use")
                user.email = email
                changed = True
        if changed:
            await self.store.users.update(user)
            await self._commit_and_publish()
        return user_response(user)
