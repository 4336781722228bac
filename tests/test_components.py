"""
Test component groups, components and display ordering.
"""
import pytest

from statuspage.core.errors import ConflictError, NotFoundError
from statuspage.db.models import ComponentStatus
from statuspage.services.components import ComponentService, resolve_components

ACTOR = "tester"


class TestComponentGroups:
    """Group CRUD, ordering and the deletion guard."""

    async def test_auto_display_order(self, session):
        service = ComponentService(session)
        first = await service.create_group(name="API", actor=ACTOR)
        second = await service.create_group(name="Web", actor=ACTOR)
        explicit = await service.create_group(name="DB", display_order=10, actor=ACTOR)
        after = await service.create_group(name="Queue", actor=ACTOR)

        assert first.display_order == 0
        assert second.display_order == 1
        assert explicit.display_order == 10
        assert after.display_order == 11

    async def test_list_groups_sorted_with_components(self, session):
        service = ComponentService(session)
        late = await service.create_group(name="Late", display_order=5, actor=ACTOR)
        early = await service.create_group(name="Early", display_order=1, actor=ACTOR)
        empty = await service.create_group(name="Empty", display_order=9, actor=ACTOR)
        await service.create(name="b", group_id=early.id, display_order=2, actor=ACTOR)
        await service.create(name="a", group_id=early.id, display_order=1, actor=ACTOR)
        await service.create(name="c", group_id=late.id, actor=ACTOR)

        groups = await service.list_groups()

        assert [g.id for g in groups] == [early.id, late.id, empty.id]
        assert [c.name for c in groups[0].components] == ["a", "b"]
        assert [c.name for c in groups[1].components] == ["c"]
        assert groups[2].components == []

    async def test_update_group(self, session):
        service = ComponentService(session)
        group = await service.create_group(name="API", actor=ACTOR)

        updated = await service.update_group(group.id, name="Public API", collapsed_by_default=True, actor=ACTOR)
        assert updated.name == "Public API"
        assert updated.collapsed_by_default is True
        assert updated.display_order == 0

    async def test_update_missing_group(self, session):
        with pytest.raises(NotFoundError, match="not found"):
            await ComponentService(session).update_group(3, name="x", actor=ACTOR)

    async def test_delete_group_with_components_conflicts(self, session):
        service = ComponentService(session)
        group = await service.create_group(name="API", actor=ACTOR)
        await service.create(name="gateway", group_id=group.id, actor=ACTOR)

        with pytest.raises(ConflictError, match="(?i)contains components"):
            await service.delete_group(group.id, actor=ACTOR)

    async def test_delete_empty_group(self, session):
        service = ComponentService(session)
        group = await service.create_group(name="API", actor=ACTOR)

        await service.delete_group(group.id, actor=ACTOR)
        assert await service.get_group(group.id) is None

    async def test_delete_missing_group(self, session):
        with pytest.raises(NotFoundError):
            await ComponentService(session).delete_group(404, actor=ACTOR)


class TestComponents:
    """Component CRUD and overall status."""

    async def test_create_requires_existing_group(self, session):
        with pytest.raises(NotFoundError, match="Component group with id 9 not found"):
            await ComponentService(session).create(name="api", group_id=9, actor=ACTOR)

    async def test_display_order_is_scoped_per_group(self, session):
        service = ComponentService(session)
        api = await service.create_group(name="API", actor=ACTOR)
        web = await service.create_group(name="Web", actor=ACTOR)
        await service.create(name="a1", group_id=api.id, actor=ACTOR)
        await service.create(name="a2", group_id=api.id, display_order=7, actor=ACTOR)

        first_web = await service.create(name="w1", group_id=web.id, actor=ACTOR)
        next_api = await service.create(name="a3", group_id=api.id, actor=ACTOR)

        assert first_web.display_order == 0
        assert next_api.display_order == 8

    async def test_list_orders_by_group_then_display_order(self, session, group):
        service = ComponentService(session)
        other = await service.create_group(name="Other", actor=ACTOR)
        await service.create(name="z", group_id=other.id, display_order=0, actor=ACTOR)
        await service.create(name="y", group_id=group.id, display_order=3, actor=ACTOR)
        await service.create(name="x", group_id=group.id, display_order=1, actor=ACTOR)

        names = [c.name for c in await service.list()]
        assert names == ["x", "y", "z"]

    async def test_update_component(self, session, group):
        service = ComponentService(session)
        component = await service.create(name="api", group_id=group.id, actor=ACTOR)

        updated = await service.update(component.id, status=ComponentStatus.DEGRADED, actor=ACTOR)
        assert updated.status == ComponentStatus.DEGRADED
        assert updated.name == "api"

    async def test_update_into_missing_group(self, session, group):
        service = ComponentService(session)
        component = await service.create(name="api", group_id=group.id, actor=ACTOR)

        with pytest.raises(NotFoundError):
            await service.update(component.id, group_id=999, actor=ACTOR)

    async def test_update_and_delete_missing_component(self, session):
        service = ComponentService(session)
        with pytest.raises(NotFoundError, match="Component with id 1 not found"):
            await service.update(1, name="x", actor=ACTOR)
        with pytest.raises(NotFoundError):
            await service.delete(1, actor=ACTOR)

    async def test_overall_status(self, session, group):
        service = ComponentService(session)
        assert await service.get_overall_status() == ComponentStatus.OPERATIONAL

        await service.create(name="a", group_id=group.id, actor=ACTOR)
        await service.create(name="b", group_id=group.id, status=ComponentStatus.UNDER_MAINTENANCE, actor=ACTOR)
        assert await service.get_overall_status() == ComponentStatus.UNDER_MAINTENANCE

        await service.create(name="c", group_id=group.id, status=ComponentStatus.DEGRADED, actor=ACTOR)
        assert await service.get_overall_status() == ComponentStatus.DEGRADED


class TestResolveComponents:
    """Bulk lookup used by incidents, maintenance and automations."""

    async def test_keeps_order_and_drops_duplicates(self, session, group):
        service = ComponentService(session)
        a = await service.create(name="a", group_id=group.id, actor=ACTOR)
        b = await service.create(name="b", group_id=group.id, actor=ACTOR)

        found = await resolve_components(session, [b.id, a.id, b.id])
        assert [c.id for c in found] == [b.id, a.id]

    async def test_unknown_id_conflicts(self, session, group):
        component = await ComponentService(session).create(name="a", group_id=group.id, actor=ACTOR)

        with pytest.raises(ConflictError, match="Component with id 999 does not exist"):
            await resolve_components(session, [component.id, 999])
