from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Sequence

from sqlalchemy import Select, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.core.errors import NotFoundError, ValidationError
from statuspage.db.models import Incident, IncidentImpact, IncidentStatus, IncidentUpdate
from statuspage.db.types import utcnow
from statuspage.services.audit import AuditService
from statuspage.services.common import UNSET, period_bounds
from statuspage.services.components import resolve_components

logger = logging.getLogger(__name__)


def apply_status(incident: Incident, status: IncidentStatus, *, at: datetime) -> None:
    """Move an incident to ``status`` keeping resolved_at consistent with it.

    resolved_at is stamped the first time the incident becomes resolved and
    cleared again if it is reopened, so it is set exactly while resolved.
    """
    incident.status = status
    if status == IncidentStatus.RESOLVED:
        if incident.resolved_at is None:
            incident.resolved_at = at
    else:
        incident.resolved_at = None


class IncidentService:
    def __init__(self, session: AsyncSession, audit: AuditService | None = None) -> None:
        self.session = session
        self.audit = audit or AuditService(session)

    async def create(
        self,
        *,
        title: str,
        impact: IncidentImpact,
        initial_update_message: str,
        status: IncidentStatus = IncidentStatus.INVESTIGATING,
        impact_description: str | None = None,
        root_cause: str | None = None,
        affected_component_ids: Sequence[int] = (),
        actor: str,
    ) -> Incident:
        status = IncidentStatus(status)
        components = await resolve_components(self.session, affected_component_ids)
        now = utcnow()

        incident = Incident(
            title=title,
            impact=impact,
            impact_description=impact_description,
            root_cause=root_cause,
            created_at=now,
        )
        apply_status(incident, status, at=now)
        incident.affected_components = components
        incident.updates = [IncidentUpdate(message=initial_update_message, status=status, timestamp=now)]
        self.session.add(incident)
        await self.session.flush()

        await self.audit.record(
            actor,
            "create_incident",
            f'Created incident "{title}" affecting {len(components)} components',
        )
        logger.info("incident created", extra={"incident_id": incident.id, "status": status.value})
        return await self._require(incident.id)

    async def get(self, incident_id: int) -> Incident | None:
        return await self.session.scalar(
            select(Incident)
            .where(Incident.id == incident_id)
            .execution_options(populate_existing=True)
        )

    async def list_all(self) -> Sequence[Incident]:
        return await self._fetch(select(Incident).order_by(desc(Incident.created_at), desc(Incident.id)))

    async def list_active(self) -> Sequence[Incident]:
        return await self._fetch(
            select(Incident)
            .where(Incident.status != IncidentStatus.RESOLVED)
            .order_by(desc(Incident.created_at), desc(Incident.id))
        )

    async def list_recent(self, days: int = 15) -> Sequence[Incident]:
        """Resolved incidents whose resolution falls within the last ``days`` days."""
        cutoff = utcnow() - timedelta(days=days)
        return await self._fetch(
            select(Incident)
            .where(Incident.status == IncidentStatus.RESOLVED, Incident.resolved_at >= cutoff)
            .order_by(desc(Incident.resolved_at), desc(Incident.id))
        )

    async def history(self, *, year: int | None = None, month: int | None = None) -> Sequence[Incident]:
        stmt = select(Incident)
        if month is not None:
            if not 1 <= month <= 12:
                raise ValidationError(f"Month must be between 1 and 12, got {month}")
            if year is None:
                year = utcnow().year
        if year is not None:
            start, end = period_bounds(year, month)
            stmt = stmt.where(Incident.created_at >= start, Incident.created_at < end)
        return await self._fetch(stmt.order_by(desc(Incident.created_at), desc(Incident.id)))

    async def update(
        self,
        incident_id: int,
        *,
        title: str | None = None,
        status: IncidentStatus | None = None,
        impact: IncidentImpact | None = None,
        impact_description: str | None = UNSET,
        root_cause: str | None = UNSET,
        resolved_at: datetime | None = None,
        actor: str,
    ) -> Incident:
        incident = await self._require(incident_id)

        if title is not None:
            incident.title = title
        if impact is not None:
            incident.impact = impact
        if impact_description is not UNSET:
            incident.impact_description = impact_description
        if root_cause is not UNSET:
            incident.root_cause = root_cause
        if status is not None:
            apply_status(incident, status, at=utcnow())
        # an explicit resolution time only makes sense on a resolved incident
        if resolved_at is not None and incident.status == IncidentStatus.RESOLVED:
            incident.resolved_at = resolved_at

        await self.session.flush()
        await self.audit.record(actor, "update_incident", f"Updated incident with id {incident_id}")
        logger.info("incident updated", extra={"incident_id": incident_id})
        return await self._require(incident_id)

    async def delete(self, incident_id: int, *, actor: str) -> None:
        incident = await self._require(incident_id)
        await self.session.delete(incident)
        await self.session.flush()
        await self.audit.record(actor, "delete_incident", f"Deleted incident with id {incident_id}")
        logger.info("incident deleted", extra={"incident_id": incident_id})

    # -- incident updates -------------------------------------------------

    async def create_update(
        self,
        incident_id: int,
        *,
        message: str,
        status: IncidentStatus,
        timestamp: datetime | None = None,
        actor: str,
    ) -> IncidentUpdate:
        status = IncidentStatus(status)
        incident = await self._require(incident_id)
        at = timestamp or utcnow()

        update = IncidentUpdate(message=message, status=status, timestamp=at)
        incident.updates.append(update)
        apply_status(incident, status, at=at)
        await self.session.flush()

        await self.audit.record(
            actor,
            "create_incident_update",
            f"Added update to incident {incident_id} with status {status.value}",
        )
        logger.info("incident update created", extra={"incident_id": incident_id, "update_id": update.id})
        return update

    async def list_updates(self, incident_id: int) -> Sequence[IncidentUpdate]:
        rows = await self.session.scalars(
            select(IncidentUpdate)
            .where(IncidentUpdate.incident_id == incident_id)
            .order_by(desc(IncidentUpdate.timestamp), desc(IncidentUpdate.id))
        )
        return list(rows)

    async def get_update(self, update_id: int) -> IncidentUpdate | None:
        return await self.session.get(IncidentUpdate, update_id)

    async def edit_update(
        self,
        update_id: int,
        *,
        message: str | None = None,
        status: IncidentStatus | None = None,
        timestamp: datetime | None = None,
        actor: str,
    ) -> IncidentUpdate:
        """Correct a past update. The parent incident's status is left alone."""
        update = await self.session.get(IncidentUpdate, update_id)
        if update is None:
            raise NotFoundError(f"Incident update with id {update_id} not found")

        if message is not None:
            update.message = message
        if status is not None:
            update.status = status
        if timestamp is not None:
            update.timestamp = timestamp

        await self.session.flush()
        await self.audit.record(actor, "update_incident_update", f"Updated incident update with id {update_id}")
        logger.info("incident update edited", extra={"update_id": update_id})
        return update

    async def delete_update(self, update_id: int, *, actor: str) -> None:
        update = await self.session.get(IncidentUpdate, update_id)
        if update is None:
            raise NotFoundError(f"Incident update with id {update_id} not found")

        await self.session.delete(update)
        await self.session.flush()
        await self.audit.record(actor, "delete_incident_update", f"Deleted incident update with id {update_id}")
        logger.info("incident update deleted", extra={"update_id": update_id})

    # -- helpers ----------------------------------------------------------

    async def _require(self, incident_id: int) -> Incident:
        incident = await self.get(incident_id)
        if incident is None:
            raise NotFoundError(f"Incident with id {incident_id} not found")
        return incident

    async def _fetch(self, stmt: Select) -> list[Incident]:
        rows = await self.session.scalars(stmt.execution_options(populate_existing=True))
        return list(rows)
