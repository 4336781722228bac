"""
Test automations and their batch execution.
"""
import pytest

from statuspage.core.errors import ConflictError, NotFoundError
from statuspage.db.models import ComponentStatus
from statuspage.services.audit import AuditService
from statuspage.services.automations import AutomationService
from statuspage.services.components import ComponentService

ACTOR = "tester"


@pytest.fixture
async def components(session, group):
    service = ComponentService(session)
    return [
        await service.create(name=name, group_id=group.id, actor=ACTOR)
        for name in ("api", "web", "worker")
    ]


class TestAutomationService:
    """CRUD and target management."""

    async def test_create_with_targets(self, session, components):
        service = AutomationService(session)
        automation = await service.create(
            name="Outage",
            new_status=ComponentStatus.MAJOR_OUTAGE,
            target_component_ids=[components[0].id, components[1].id],
            actor=ACTOR,
        )

        fetched = await service.get(automation.id)
        assert fetched.new_status == ComponentStatus.MAJOR_OUTAGE
        assert [c.name for c in fetched.components] == ["api", "web"]

    async def test_create_with_unknown_target(self, session, components):
        with pytest.raises(ConflictError, match="does not exist"):
            await AutomationService(session).create(
                name="x", new_status=ComponentStatus.DEGRADED, target_component_ids=[999], actor=ACTOR
            )

    async def test_update(self, session):
        service = AutomationService(session)
        automation = await service.create(name="x", new_status=ComponentStatus.DEGRADED, actor=ACTOR)

        updated = await service.update(automation.id, new_status=ComponentStatus.OPERATIONAL, actor=ACTOR)
        assert updated.name == "x"
        assert updated.new_status == ComponentStatus.OPERATIONAL

    async def test_missing_automation(self, session):
        service = AutomationService(session)
        with pytest.raises(NotFoundError, match="Automation with id 9 not found"):
            await service.execute(9, actor=ACTOR)
        with pytest.raises(NotFoundError):
            await service.update(9, name="x", actor=ACTOR)
        with pytest.raises(NotFoundError):
            await service.delete(9, actor=ACTOR)

    async def test_add_components_ignores_linked(self, session, components):
        service = AutomationService(session)
        automation = await service.create(
            name="x",
            new_status=ComponentStatus.DEGRADED,
            target_component_ids=[components[0].id],
            actor=ACTOR,
        )

        updated = await service.add_components(
            automation.id, [components[0].id, components[2].id], actor=ACTOR
        )
        assert [c.name for c in updated.components] == ["api", "worker"]

        with pytest.raises(ConflictError):
            await service.add_components(automation.id, [404], actor=ACTOR)

    async def test_remove_components(self, session, components):
        service = AutomationService(session)
        automation = await service.create(
            name="x",
            new_status=ComponentStatus.DEGRADED,
            target_component_ids=[c.id for c in components],
            actor=ACTOR,
        )

        updated = await service.remove_components(automation.id, [components[1].id], actor=ACTOR)
        assert [c.name for c in updated.components] == ["api", "worker"]
        assert await ComponentService(session).get(components[1].id) is not None

    async def test_delete_keeps_components(self, session, components):
        service = AutomationService(session)
        automation = await service.create(
            name="x",
            new_status=ComponentStatus.DEGRADED,
            target_component_ids=[components[0].id],
            actor=ACTOR,
        )

        await service.delete(automation.id, actor=ACTOR)

        assert await service.get(automation.id) is None
        assert len(await ComponentService(session).list()) == 3


class TestExecuteAutomation:
    """Executing forces every target to the automation status."""

    async def test_sets_all_targets(self, session, components):
        service = AutomationService(session)
        automation = await service.create(
            name="Outage",
            new_status=ComponentStatus.MAJOR_OUTAGE,
            target_component_ids=[components[0].id, components[1].id],
            actor=ACTOR,
        )

        result = await service.execute(automation.id, actor=ACTOR)

        assert result == {"affected_components": 2, "success": True}
        statuses = {c.name: c.status for c in await ComponentService(session).list()}
        assert statuses == {
            "api": ComponentStatus.MAJOR_OUTAGE,
            "web": ComponentStatus.MAJOR_OUTAGE,
            "worker": ComponentStatus.OPERATIONAL,
        }

    async def test_no_targets(self, session):
        service = AutomationService(session)
        automation = await service.create(name="Empty", new_status=ComponentStatus.DEGRADED, actor=ACTOR)

        assert await service.execute(automation.id, actor=ACTOR) == {"affected_components": 0, "success": True}

        entries = await AuditService(session).by_action("execute_automation")
        assert len(entries) == 1
        assert "Empty" in entries[0].details
