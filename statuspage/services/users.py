from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.core.errors import ConflictError, NotFoundError
from statuspage.core.security import Authenticator, authenticator as default_authenticator
from statuspage.db.models import Role, User
from statuspage.services.audit import AuditService

logger = logging.getLogger(__name__)


class UserService:
    def __init__(
        self,
        session: AsyncSession,
        audit: AuditService | None = None,
        authenticator: Authenticator | None = None,
    ) -> None:
        self.session = session
        self.audit = audit or AuditService(session)
        self.authenticator = authenticator or default_authenticator

    async def create(self, *, username: str, password: str, role_id: int, actor: str) -> User:
        await self._require_role(role_id)
        await self._ensure_username_free(username)

        user = User(
            username=username,
            hashed_password=self.authenticator.hash_password(password),
            role_id=role_id,
        )
        self.session.add(user)
        await self.session.flush()
        await self.audit.record(actor, "create_user", f'Created user "{username}" with role {role_id}')
        logger.info("user created", extra={"user_id": user.id})
        return await self._load(user.id)

    async def list(self) -> Sequence[User]:
        rows = await self.session.scalars(select(User).order_by(User.id))
        return list(rows)

    async def get(self, user_id: int) -> User | None:
        return await self._load(user_id)

    async def get_by_username(self, username: str) -> User | None:
        return await self.session.scalar(select(User).where(User.username == username))

    async def update(
        self,
        user_id: int,
        *,
        username: str | None = None,
        password: str | None = None,
        role_id: int | None = None,
        actor: str,
    ) -> User:
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User with id {user_id} not found")

        # validate everything before assigning, a check's SELECT autoflushes
        if role_id is not None:
            await self._require_role(role_id)
        if username is not None and username != user.username:
            await self._ensure_username_free(username)

        if role_id is not None:
            user.role_id = role_id
        if username is not None:
            user.username = username
        if password is not None:
            user.hashed_password = self.authenticator.hash_password(password)

        await self.session.flush()
        await self.audit.record(actor, "update_user", f"Updated user with id {user_id}")
        logger.info("user updated", extra={"user_id": user_id})
        return await self._load(user_id)

    async def delete(self, user_id: int, *, actor: str) -> None:
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User with id {user_id} not found")

        await self.session.delete(user)
        await self.session.flush()
        await self.audit.record(actor, "delete_user", f"Deleted user with id {user_id}")
        logger.info("user deleted", extra={"user_id": user_id})

    async def _require_role(self, role_id: int) -> None:
        exists = await self.session.scalar(select(Role.id).where(Role.id == role_id))
        if exists is None:
            raise ConflictError(f"Role with id {role_id} not found")

    async def _ensure_username_free(self, username: str) -> None:
        existing = await self.session.scalar(select(User.id).where(User.username == username))
        if existing is not None:
            raise ConflictError(f'User with username "{username}" already exists')

    async def _load(self, user_id: int) -> User | None:
        # refresh the joined role after role_id changes
        return await self.session.scalar(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
