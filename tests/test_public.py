"""
Test the public read facade.
"""
from datetime import timedelta

from statuspage.db.models import ComponentStatus, IncidentImpact, IncidentStatus, MaintenanceStatus
from statuspage.db.types import utcnow
from statuspage.services.components import ComponentService
from statuspage.services.incidents import IncidentService
from statuspage.services.maintenance import MaintenanceService
from statuspage.services.public import PublicService
from statuspage.services.settings import SiteSettingService

ACTOR = "tester"


async def _incident(service, title, status):
    return await service.create(
        title=title,
        status=status,
        impact=IncidentImpact.MINOR,
        initial_update_message="update",
        actor=ACTOR,
    )


class TestPublicIncidents:
    """Public incident listing parameters."""

    async def _seed(self, session):
        service = IncidentService(session)
        open_incident = await _incident(service, "open", IncidentStatus.IDENTIFIED)
        fresh = await _incident(service, "fresh", IncidentStatus.RESOLVED)
        stale = await _incident(service, "stale", IncidentStatus.RESOLVED)
        await service.update(stale.id, resolved_at=utcnow() - timedelta(days=30), actor=ACTOR)
        return open_incident, fresh, stale

    async def test_without_resolved(self, session):
        open_incident, _, _ = await self._seed(session)

        found = await PublicService(session).get_incidents(include_resolved=False, days=365)
        assert [i.id for i in found] == [open_incident.id]

    async def test_with_recent_resolved(self, session):
        open_incident, fresh, _ = await self._seed(session)

        found = await PublicService(session).get_incidents(include_resolved=True, days=15)
        assert {i.id for i in found} == {open_incident.id, fresh.id}

    async def test_all_when_days_not_positive(self, session):
        open_incident, fresh, stale = await self._seed(session)

        found = await PublicService(session).get_incidents(include_resolved=True, days=0)
        assert [i.id for i in found] == [stale.id, fresh.id, open_incident.id]


class TestPublicStatus:
    """Combined status page payload."""

    async def test_status_payload(self, session, group):
        components = ComponentService(session)
        await components.create(name="api", group_id=group.id, status=ComponentStatus.DEGRADED, actor=ACTOR)
        incidents = IncidentService(session)
        active = await _incident(incidents, "active", IncidentStatus.INVESTIGATING)
        resolved = await _incident(incidents, "resolved", IncidentStatus.RESOLVED)
        maintenance = MaintenanceService(session)
        now = utcnow()
        running = await maintenance.create(
            title="running",
            start_time=now - timedelta(hours=1),
            end_time=now + timedelta(hours=1),
            status=MaintenanceStatus.IN_PROGRESS,
            actor=ACTOR,
        )
        upcoming = await maintenance.create(
            title="upcoming",
            start_time=now + timedelta(days=1),
            end_time=now + timedelta(days=1, hours=1),
            actor=ACTOR,
        )
        await SiteSettingService(session).set_maintenance_mode(True, "Back soon", actor=ACTOR)

        status = await PublicService(session).get_status()

        assert status["overall_status"] == ComponentStatus.DEGRADED
        assert [g.name for g in status["component_groups"]] == ["Core"]
        assert [c.name for c in status["component_groups"][0].components] == ["api"]
        assert [i.id for i in status["active_incidents"]] == [active.id]
        assert [i.id for i in status["recent_incidents"]] == [resolved.id]
        assert [w.id for w in status["active_maintenance"]] == [running.id]
        assert [w.id for w in status["upcoming_maintenance"]] == [upcoming.id]
        assert status["maintenance_mode"] is True
        assert status["maintenance_mode_message"] == "Back soon"

    async def test_single_lookups(self, session):
        public = PublicService(session)
        assert await public.get_incident(1) is None
        assert await public.get_maintenance_window(1) is None
        assert await public.get_maintenance() == []
