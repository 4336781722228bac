from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.core.errors import ConflictError, NotFoundError
from statuspage.db.models import Role, User
from statuspage.services.audit import AuditService
from statuspage.services.common import UNSET

logger = logging.getLogger(__name__)


class RoleService:
    def __init__(self, session: AsyncSession, audit: AuditService | None = None) -> None:
        self.session = session
        self.audit = audit or AuditService(session)

    async def create(
        self,
        *,
        name: str,
        description: str | None = None,
        permissions: dict[str, bool] | None = None,
        actor: str,
    ) -> Role:
        await self._ensure_name_free(name)
        role = Role(name=name, description=description, permissions=dict(permissions or {}))
        self.session.add(role)
        await self.session.flush()
        await self.audit.record(actor, "create_role", f'Created role "{name}"')
        logger.info("role created", extra={"role_id": role.id})
        return role

    async def list(self) -> Sequence[Role]:
        rows = await self.session.scalars(select(Role).order_by(Role.id))
        return list(rows)

    async def get(self, role_id: int) -> Role | None:
        return await self.session.get(Role, role_id)

    async def update(
        self,
        role_id: int,
        *,
        name: str | None = None,
        description: str | None = UNSET,
        permissions: dict[str, bool] | None = None,
        actor: str,
    ) -> Role:
        role = await self.session.get(Role, role_id)
        if role is None:
            raise NotFoundError(f"Role with id {role_id} not found")

        if name is not None and name != role.name:
            await self._ensure_name_free(name)
            role.name = name
        if description is not UNSET:
            role.description = description
        if permissions is not None:
            role.permissions = dict(permissions)

        await self.session.flush()
        await self.audit.record(actor, "update_role", f"Updated role with id {role_id}")
        logger.info("role updated", extra={"role_id": role_id})
        return role

    async def delete(self, role_id: int, *, actor: str) -> None:
        assigned = await self.session.scalar(
            select(func.count()).select_from(User).where(User.role_id == role_id)
        )
        if assigned:
            raise ConflictError(f"Cannot delete role: {assigned} users are assigned to this role")

        role = await self.session.get(Role, role_id)
        if role is None:
            raise NotFoundError(f"Role with id {role_id} not found")

        await self.session.delete(role)
        await self.session.flush()
        await self.audit.record(actor, "delete_role", f"Deleted role with id {role_id}")
        logger.info("role deleted", extra={"role_id": role_id})

    async def _ensure_name_free(self, name: str) -> None:
        existing = await self.session.scalar(select(Role.id).where(Role.name == name))
        if existing is not None:
            raise ConflictError(f'Role with name "{name}" already exists (name must be unique)')
