from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.core.errors import AuthError
from statuspage.core.security import Authenticator, authenticator as default_authenticator
from statuspage.db.models import Role, User

logger = logging.getLogger(__name__)

# Reserved permission key granting every capability.
ALL_PERMISSIONS = "all"

_INVALID_CREDENTIALS = "Invalid username or password"


class AuthService:
    def __init__(self, session: AsyncSession, authenticator: Authenticator | None = None) -> None:
        self.session = session
        self.authenticator = authenticator or default_authenticator

    async def login(self, username: str, password: str) -> tuple[User, str]:
        """Return the user and a fresh session token.

        Unknown usernames and wrong passwords fail with the same error.
        """
        user = await self._user_with_role(User.username == username)
        if user is None or not self.authenticator.verify_password(password, user.hashed_password):
            logger.warning("login failed", extra={"username": username})
            raise AuthError(_INVALID_CREDENTIALS)

        token = self.authenticator.issue_token(
            {"sub": str(user.id), "username": user.username, "role_id": user.role_id}
        )
        logger.info("login succeeded", extra={"user_id": user.id})
        return user, token

    async def verify_token(self, token: str) -> User | None:
        claims = self.authenticator.verify_token(token)
        if claims is None:
            return None
        try:
            user_id = int(claims["sub"])
        except (KeyError, TypeError, ValueError):
            return None
        return await self._user_with_role(User.id == user_id)

    async def has_permission(self, user_id: int, permission: str) -> bool:
        permissions = await self.session.scalar(
            select(Role.permissions).join(User, User.role_id == Role.id).where(User.id == user_id)
        )
        return grants(permissions, permission)

    async def _user_with_role(self, criterion) -> User | None:
        # inner join: a user whose role is missing cannot authenticate
        return await self.session.scalar(
            select(User).join(Role, User.role_id == Role.id).where(criterion)
        )


def grants(permissions: dict | None, permission: str) -> bool:
    if not permissions:
        return False
    return permissions.get(permission) is True or permissions.get(ALL_PERMISSIONS) is True
