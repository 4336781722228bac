from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.core.errors import ConflictError, NotFoundError
from statuspage.db.models import Component, ComponentGroup, ComponentStatus
from statuspage.services.audit import AuditService
from statuspage.services.status import overall_status

logger = logging.getLogger(__name__)


class ComponentService:
    def __init__(self, session: AsyncSession, audit: AuditService | None = None) -> None:
        self.session = session
        self.audit = audit or AuditService(session)

    # -- groups -----------------------------------------------------------

    async def create_group(
        self,
        *,
        name: str,
        display_order: int | None = None,
        collapsed_by_default: bool = False,
        actor: str,
    ) -> ComponentGroup:
        if display_order is None:
            display_order = await self._next_order(select(func.max(ComponentGroup.display_order)))

        group = ComponentGroup(
            name=name,
            display_order=display_order,
            collapsed_by_default=collapsed_by_default,
        )
        self.session.add(group)
        await self.session.flush()
        await self.audit.record(actor, "create_component_group", f'Created component group "{name}"')
        logger.info("component group created", extra={"group_id": group.id})
        return await self._load_group(group.id)

    async def list_groups(self) -> Sequence[ComponentGroup]:
        rows = await self.session.scalars(
            select(ComponentGroup)
            .order_by(ComponentGroup.display_order, ComponentGroup.id)
            .execution_options(populate_existing=True)
        )
        return list(rows)

    async def get_group(self, group_id: int) -> ComponentGroup | None:
        return await self._load_group(group_id)

    async def update_group(
        self,
        group_id: int,
        *,
        name: str | None = None,
        display_order: int | None = None,
        collapsed_by_default: bool | None = None,
        actor: str,
    ) -> ComponentGroup:
        group = await self.session.get(ComponentGroup, group_id)
        if group is None:
            raise NotFoundError(f"Component group with id {group_id} not found")

        if name is not None:
            group.name = name
        if display_order is not None:
            group.display_order = display_order
        if collapsed_by_default is not None:
            group.collapsed_by_default = collapsed_by_default

        await self.session.flush()
        await self.audit.record(actor, "update_component_group", f"Updated component group with id {group_id}")
        logger.info("component group updated", extra={"group_id": group_id})
        return await self._load_group(group_id)

    async def delete_group(self, group_id: int, *, actor: str) -> None:
        count = await self.session.scalar(
            select(func.count()).select_from(Component).where(Component.group_id == group_id)
        )
        if count:
            raise ConflictError("Cannot delete component group that contains components")

        group = await self.session.get(ComponentGroup, group_id)
        if group is None:
            raise NotFoundError(f"Component group with id {group_id} not found")

        await self.session.delete(group)
        await self.session.flush()
        await self.audit.record(actor, "delete_component_group", f"Deleted component group with id {group_id}")
        logger.info("component group deleted", extra={"group_id": group_id})

    # -- components -------------------------------------------------------

    async def create(
        self,
        *,
        name: str,
        group_id: int,
        status: ComponentStatus = ComponentStatus.OPERATIONAL,
        display_order: int | None = None,
        actor: str,
    ) -> Component:
        await self._require_group(group_id)

        if display_order is None:
            # ordering is per group
            display_order = await self._next_order(
                select(func.max(Component.display_order)).where(Component.group_id == group_id)
            )

        component = Component(
            name=name,
            status=status,
            display_order=display_order,
            group_id=group_id,
        )
        self.session.add(component)
        await self.session.flush()
        await self.audit.record(
            actor,
            "create_component",
            f'Created component "{name}" in group {group_id} with status {ComponentStatus(status).value}',
        )
        logger.info("component created", extra={"component_id": component.id, "group_id": group_id})
        return component

    async def list(self) -> Sequence[Component]:
        rows = await self.session.scalars(
            select(Component).order_by(Component.group_id, Component.display_order, Component.id)
        )
        return list(rows)

    async def get(self, component_id: int) -> Component | None:
        return await self.session.get(Component, component_id)

    async def update(
        self,
        component_id: int,
        *,
        name: str | None = None,
        status: ComponentStatus | None = None,
        display_order: int | None = None,
        group_id: int | None = None,
        actor: str,
    ) -> Component:
        component = await self.session.get(Component, component_id)
        if component is None:
            raise NotFoundError(f"Component with id {component_id} not found")

        if group_id is not None:
            await self._require_group(group_id)
            component.group_id = group_id
        if name is not None:
            component.name = name
        if status is not None:
            component.status = status
        if display_order is not None:
            component.display_order = display_order

        await self.session.flush()
        await self.audit.record(actor, "update_component", f"Updated component with id {component_id}")
        logger.info("component updated", extra={"component_id": component_id})
        return component

    async def delete(self, component_id: int, *, actor: str) -> None:
        component = await self.session.get(Component, component_id)
        if component is None:
            raise NotFoundError(f"Component with id {component_id} not found")

        await self.session.delete(component)
        await self.session.flush()
        await self.audit.record(actor, "delete_component", f"Deleted component with id {component_id}")
        logger.info("component deleted", extra={"component_id": component_id})

    async def get_overall_status(self) -> ComponentStatus:
        statuses = await self.session.scalars(select(Component.status))
        return overall_status(statuses)

    # -- helpers ----------------------------------------------------------

    async def _next_order(self, max_stmt) -> int:
        current = await self.session.scalar(max_stmt)
        return 0 if current is None else current + 1

    async def _require_group(self, group_id: int) -> None:
        exists = await self.session.scalar(select(ComponentGroup.id).where(ComponentGroup.id == group_id))
        if exists is None:
            raise NotFoundError(f"Component group with id {group_id} not found")

    async def _load_group(self, group_id: int) -> ComponentGroup | None:
        return await self.session.scalar(
            select(ComponentGroup)
            .where(ComponentGroup.id == group_id)
            .execution_options(populate_existing=True)
        )


async def resolve_components(session: AsyncSession, component_ids: Sequence[int]) -> list[Component]:
    """Load components by id, keeping the given order and dropping duplicates.

    Raises ConflictError naming the first id that does not exist.
    """
    wanted = list(dict.fromkeys(component_ids))
    if not wanted:
        return []
    rows = await session.scalars(select(Component).where(Component.id.in_(wanted)))
    found = {component.id: component for component in rows}
    for component_id in wanted:
        if component_id not in found:
            raise ConflictError(f"Component with id {component_id} does not exist")
    return [found[component_id] for component_id in wanted]
