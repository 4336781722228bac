from __future__ import annotations

from datetime import timedelta
from typing import Any, Sequence

from sqlalchemy import and_, desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.core.config import settings
from statuspage.db.models import Incident, IncidentStatus, MaintenanceWindow
from statuspage.db.types import utcnow
from statuspage.services.components import ComponentService
from statuspage.services.incidents import IncidentService
from statuspage.services.maintenance import MaintenanceService
from statuspage.services.settings import SiteSettingService


class PublicService:
    """Read-only views backing the unauthenticated status page."""

    def __init__(self, session: AsyncSession, recent_days: int | None = None) -> None:
        self.session = session
        self.recent_days = settings.recent_days if recent_days is None else recent_days
        self.components = ComponentService(session)
        self.incidents = IncidentService(session)
        self.maintenance = MaintenanceService(session)
        self.site_settings = SiteSettingService(session)

    async def get_status(self) -> dict[str, Any]:
        return {
            "overall_status": await self.components.get_overall_status(),
            "component_groups": await self.components.list_groups(),
            "active_incidents": await self.incidents.list_active(),
            "recent_incidents": await self.incidents.list_recent(days=self.recent_days),
            "active_maintenance": await self.maintenance.list_active(),
            "upcoming_maintenance": await self.maintenance.list_upcoming(),
            "maintenance_mode": await self.site_settings.get_maintenance_mode(),
            "maintenance_mode_message": await self.site_settings.get_maintenance_mode_message(),
        }

    async def get_incidents(self, *, include_resolved: bool = True, days: int = 15) -> Sequence[Incident]:
        stmt = select(Incident)
        if not include_resolved:
            stmt = stmt.where(Incident.status != IncidentStatus.RESOLVED)
        elif days > 0:
            cutoff = utcnow() - timedelta(days=days)
            stmt = stmt.where(
                or_(
                    Incident.status != IncidentStatus.RESOLVED,
                    and_(Incident.status == IncidentStatus.RESOLVED, Incident.resolved_at >= cutoff),
                )
            )
        rows = await self.session.scalars(
            stmt.order_by(desc(Incident.created_at), desc(Incident.id)).execution_options(populate_existing=True)
        )
        return list(rows)

    async def get_incident(self, incident_id: int) -> Incident | None:
        return await self.incidents.get(incident_id)

    async def get_maintenance(self) -> Sequence[MaintenanceWindow]:
        return await self.maintenance.list_public(days=self.recent_days)

    async def get_maintenance_window(self, maintenance_id: int) -> MaintenanceWindow | None:
        return await self.maintenance.get(maintenance_id)
