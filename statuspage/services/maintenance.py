from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Sequence

from sqlalchemy import Select, and_, desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.core.errors import NotFoundError
from statuspage.db.models import MaintenanceStatus, MaintenanceUpdate, MaintenanceWindow
from statuspage.db.types import utcnow
from statuspage.services.audit import AuditService
from statuspage.services.common import UNSET
from statuspage.services.components import resolve_components

logger = logging.getLogger(__name__)


class MaintenanceService:
    def __init__(self, session: AsyncSession, audit: AuditService | None = None) -> None:
        self.session = session
        self.audit = audit or AuditService(session)

    async def create(
        self,
        *,
        title: str,
        start_time: datetime,
        end_time: datetime,
        description: str | None = None,
        status: MaintenanceStatus = MaintenanceStatus.SCHEDULED,
        affected_component_ids: Sequence[int] = (),
        actor: str,
    ) -> MaintenanceWindow:
        components = await resolve_components(self.session, affected_component_ids)

        window = MaintenanceWindow(
            title=title,
            description=description,
            start_time=start_time,
            end_time=end_time,
            status=status,
        )
        window.affected_components = components
        window.updates = []
        self.session.add(window)
        await self.session.flush()

        await self.audit.record(actor, "create_maintenance_window", f"Created maintenance window: {title}")
        logger.info("maintenance window created", extra={"maintenance_id": window.id})
        return await self._require(window.id)

    async def get(self, maintenance_id: int) -> MaintenanceWindow | None:
        return await self.session.scalar(
            select(MaintenanceWindow)
            .where(MaintenanceWindow.id == maintenance_id)
            .execution_options(populate_existing=True)
        )

    async def list_all(self) -> Sequence[MaintenanceWindow]:
        return await self._fetch(
            select(MaintenanceWindow).order_by(desc(MaintenanceWindow.created_at), desc(MaintenanceWindow.id))
        )

    async def list_active(self) -> Sequence[MaintenanceWindow]:
        """In-progress windows whose time range contains now; both must agree."""
        now = utcnow()
        return await self._fetch(
            select(MaintenanceWindow)
            .where(
                MaintenanceWindow.status == MaintenanceStatus.IN_PROGRESS,
                MaintenanceWindow.start_time <= now,
                MaintenanceWindow.end_time >= now,
            )
            .order_by(desc(MaintenanceWindow.start_time), desc(MaintenanceWindow.id))
        )

    async def list_upcoming(self) -> Sequence[MaintenanceWindow]:
        now = utcnow()
        return await self._fetch(
            select(MaintenanceWindow)
            .where(
                MaintenanceWindow.status == MaintenanceStatus.SCHEDULED,
                MaintenanceWindow.start_time > now,
            )
            .order_by(MaintenanceWindow.start_time, MaintenanceWindow.id)
        )

    async def list_recent_completed(self, days: int = 15) -> Sequence[MaintenanceWindow]:
        cutoff = utcnow() - timedelta(days=days)
        return await self._fetch(
            select(MaintenanceWindow)
            .where(
                MaintenanceWindow.status == MaintenanceStatus.COMPLETED,
                MaintenanceWindow.end_time >= cutoff,
            )
            .order_by(desc(MaintenanceWindow.end_time), desc(MaintenanceWindow.id))
        )

    async def list_public(self, days: int = 15) -> Sequence[MaintenanceWindow]:
        """Scheduled, in-progress, and recently completed windows, earliest first."""
        cutoff = utcnow() - timedelta(days=days)
        return await self._fetch(
            select(MaintenanceWindow)
            .where(
                or_(
                    MaintenanceWindow.status.in_(
                        [MaintenanceStatus.SCHEDULED, MaintenanceStatus.IN_PROGRESS]
                    ),
                    and_(
                        MaintenanceWindow.status == MaintenanceStatus.COMPLETED,
                        MaintenanceWindow.end_time >= cutoff,
                    ),
                )
            )
            .order_by(MaintenanceWindow.start_time, MaintenanceWindow.id)
        )

    async def update(
        self,
        maintenance_id: int,
        *,
        title: str | None = None,
        description: str | None = UNSET,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        status: MaintenanceStatus | None = None,
        actor: str,
    ) -> MaintenanceWindow:
        window = await self._require(maintenance_id)

        if title is not None:
            window.title = title
        if description is not UNSET:
            window.description = description
        if start_time is not None:
            window.start_time = start_time
        if end_time is not None:
            window.end_time = end_time
        if status is not None:
            window.status = status

        await self.session.flush()
        await self.audit.record(
            actor,
            "update_maintenance_window",
            f"Updated maintenance window id {maintenance_id}",
        )
        logger.info("maintenance window updated", extra={"maintenance_id": maintenance_id})
        return await self._require(maintenance_id)

    async def delete(self, maintenance_id: int, *, actor: str) -> None:
        window = await self._require(maintenance_id)
        await self.session.delete(window)
        await self.session.flush()
        await self.audit.record(
            actor,
            "delete_maintenance_window",
            f"Deleted maintenance window id {maintenance_id}",
        )
        logger.info("maintenance window deleted", extra={"maintenance_id": maintenance_id})

    # -- maintenance updates ----------------------------------------------

    async def create_update(
        self,
        maintenance_id: int,
        *,
        message: str,
        timestamp: datetime | None = None,
        actor: str,
    ) -> MaintenanceUpdate:
        window = await self._require(maintenance_id)
        update = MaintenanceUpdate(message=message, timestamp=timestamp or utcnow())
        window.updates.append(update)
        await self.session.flush()

        await self.audit.record(
            actor,
            "create_maintenance_update",
            f"Created update for maintenance window {maintenance_id}",
        )
        logger.info(
            "maintenance update created",
            extra={"maintenance_id": maintenance_id, "update_id": update.id},
        )
        return update

    async def list_updates(self, maintenance_id: int) -> Sequence[MaintenanceUpdate]:
        rows = await self.session.scalars(
            select(MaintenanceUpdate)
            .where(MaintenanceUpdate.maintenance_id == maintenance_id)
            .order_by(desc(MaintenanceUpdate.timestamp), desc(MaintenanceUpdate.id))
        )
        return list(rows)

    async def get_update(self, update_id: int) -> MaintenanceUpdate | None:
        return await self.session.get(MaintenanceUpdate, update_id)

    async def edit_update(
        self,
        update_id: int,
        *,
        message: str | None = None,
        timestamp: datetime | None = None,
        actor: str,
    ) -> MaintenanceUpdate:
        update = await self.session.get(MaintenanceUpdate, update_id)
        if update is None:
            raise NotFoundError(f"Maintenance update with id {update_id} does not exist")

        if message is not None:
            update.message = message
        if timestamp is not None:
            update.timestamp = timestamp

        await self.session.flush()
        await self.audit.record(actor, "update_maintenance_update", f"Updated maintenance update id {update_id}")
        logger.info("maintenance update edited", extra={"update_id": update_id})
        return update

    async def delete_update(self, update_id: int, *, actor: str) -> None:
        update = await self.session.get(MaintenanceUpdate, update_id)
        if update is None:
            raise NotFoundError(f"Maintenance update with id {update_id} does not exist")

        await self.session.delete(update)
        await self.session.flush()
        await self.audit.record(actor, "delete_maintenance_update", f"Deleted maintenance update id {update_id}")
        logger.info("maintenance update deleted", extra={"update_id": update_id})

    # -- helpers ----------------------------------------------------------

    async def _require(self, maintenance_id: int) -> MaintenanceWindow:
        window = await self.get(maintenance_id)
        if window is None:
            raise NotFoundError(f"Maintenance window with id {maintenance_id} does not exist")
        return window

    async def _fetch(self, stmt: Select) -> list[MaintenanceWindow]:
        rows = await self.session.scalars(stmt.execution_options(populate_existing=True))
        return list(rows)

