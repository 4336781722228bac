from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.core.errors import NotFoundError
from statuspage.db.models import Automation, Component, ComponentStatus
from statuspage.db.types import utcnow
from statuspage.services.audit import AuditService
from statuspage.services.components import resolve_components

logger = logging.getLogger(__name__)


class AutomationService:
    def __init__(self, session: AsyncSession, audit: AuditService | None = None) -> None:
        self.session = session
        self.audit = audit or AuditService(session)

    async def create(
        self,
        *,
        name: str,
        new_status: ComponentStatus,
        target_component_ids: Sequence[int] = (),
        actor: str,
    ) -> Automation:
        new_status = ComponentStatus(new_status)
        components = await resolve_components(self.session, target_component_ids)
        automation = Automation(name=name, new_status=new_status)
        automation.components = components
        self.session.add(automation)
        await self.session.flush()

        await self.audit.record(
            actor,
            "create_automation",
            f'Created automation "{name}" targeting {len(components)} components',
        )
        logger.info("automation created", extra={"automation_id": automation.id})
        return await self._require(automation.id)

    async def list(self) -> Sequence[Automation]:
        rows = await self.session.scalars(
            select(Automation).order_by(Automation.id).execution_options(populate_existing=True)
        )
        return list(rows)

    async def get(self, automation_id: int) -> Automation | None:
        return await self.session.scalar(
            select(Automation)
            .where(Automation.id == automation_id)
            .execution_options(populate_existing=True)
        )

    async def update(
        self,
        automation_id: int,
        *,
        name: str | None = None,
        new_status: ComponentStatus | None = None,
        actor: str,
    ) -> Automation:
        automation = await self._require(automation_id)
        if name is not None:
            automation.name = name
        if new_status is not None:
            automation.new_status = ComponentStatus(new_status)

        await self.session.flush()
        await self.audit.record(actor, "update_automation", f"Updated automation with id {automation_id}")
        logger.info("automation updated", extra={"automation_id": automation_id})
        return await self._require(automation_id)

    async def delete(self, automation_id: int, *, actor: str) -> None:
        automation = await self._require(automation_id)
        await self.session.delete(automation)
        await self.session.flush()
        await self.audit.record(actor, "delete_automation", f"Deleted automation with id {automation_id}")
        logger.info("automation deleted", extra={"automation_id": automation_id})

    async def execute(self, automation_id: int, *, actor: str) -> dict:
        """Force every target component to the automation's status in one write."""
        automation = await self._require(automation_id)
        target_ids = [component.id for component in automation.components]

        if target_ids:
            await self.session.execute(
                update(Component)
                .where(Component.id.in_(target_ids))
                .values(status=automation.new_status, updated_at=utcnow())
            )
            await self.session.flush()

        # logged even when there was nothing to change
        await self.audit.record(
            actor,
            "execute_automation",
            f'Executed automation "{automation.name}": set {len(target_ids)} components '
            f"to {automation.new_status.value}",
        )
        logger.info(
            "automation executed",
            extra={"automation_id": automation_id, "affected_components": len(target_ids)},
        )
        return {"affected_components": len(target_ids), "success": True}

    async def add_components(self, automation_id: int, component_ids: Sequence[int], *, actor: str) -> Automation:
        automation = await self._require(automation_id)
        components = await resolve_components(self.session, component_ids)
        linked = {component.id for component in automation.components}
        added = [component for component in components if component.id not in linked]
        automation.components.extend(added)
        await self.session.flush()

        await self.audit.record(
            actor,
            "add_components_to_automation",
            f"Added {len(added)} components to automation {automation_id}",
        )
        logger.info("automation targets added", extra={"automation_id": automation_id, "added": len(added)})
        return await self._require(automation_id)

    async def remove_components(
        self,
        automation_id: int,
        component_ids: Sequence[int],
        *,
        actor: str,
    ) -> Automation:
        automation = await self._require(automation_id)
        to_remove = set(component_ids)
        kept = [component for component in automation.components if component.id not in to_remove]
        removed = len(automation.components) - len(kept)
        automation.components = kept
        await self.session.flush()

        await self.audit.record(
            actor,
            "remove_components_from_automation",
            f"Removed {removed} components from automation {automation_id}",
        )
        logger.info("automation targets removed", extra={"automation_id": automation_id, "removed": removed})
        return await self._require(automation_id)

    async def _require(self, automation_id: int) -> Automation:
        automation = await self.get(automation_id)
        if automation is None:
            raise NotFoundError(f"Automation with id {automation_id} not found")
        return automation
