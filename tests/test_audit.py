"""
Test audit log queries.
"""
from datetime import datetime, timezone

from statuspage.services.audit import AuditService


class TestAuditService:
    """Append-only log, newest first."""

    async def test_list_newest_first_with_paging(self, session):
        service = AuditService(session)
        for n in range(5):
            await service.record("alice", "create_component", f"entry {n}")

        entries = await service.list(limit=2)
        assert [e.details for e in entries] == ["entry 4", "entry 3"]

        page = await service.list(limit=2, offset=2)
        assert [e.details for e in page] == ["entry 2", "entry 1"]

    async def test_filters(self, session):
        service = AuditService(session)
        await service.record("alice", "create_incident")
        await service.record("bob", "create_incident")
        await service.create(username="alice", action="delete_role", details="manual")

        assert {e.action for e in await service.by_user("alice")} == {"create_incident", "delete_role"}
        assert {e.username for e in await service.by_action("create_incident")} == {"alice", "bob"}

    async def test_search_combines_filters(self, session):
        service = AuditService(session)
        await service.record("alice", "create_incident", "wanted")
        await service.record("alice", "delete_role")
        await service.record("bob", "create_incident")
        old = await service.record("alice", "create_incident", "too old")
        old.timestamp = datetime(2020, 1, 1, tzinfo=timezone.utc)
        await session.flush()

        found = await service.search(username="alice", action="create_incident")
        assert [e.details for e in found] == ["wanted", "too old"]

        ranged = await service.search(
            username="alice",
            action="create_incident",
            start=datetime(2024, 1, 1, tzinfo=timezone.utc),
            end=datetime(2999, 1, 1, tzinfo=timezone.utc),
        )
        assert [e.details for e in ranged] == ["wanted"]

    async def test_by_date_range_is_inclusive(self, session):
        service = AuditService(session)
        inside = await service.record("alice", "a")
        edge = await service.record("alice", "b")
        outside = await service.record("alice", "c")
        inside.timestamp = datetime(2025, 1, 10, tzinfo=timezone.utc)
        edge.timestamp = datetime(2025, 1, 31, tzinfo=timezone.utc)
        outside.timestamp = datetime(2025, 2, 1, 0, 0, 1, tzinfo=timezone.utc)
        await session.flush()

        found = await service.by_date_range(
            datetime(2025, 1, 1, tzinfo=timezone.utc),
            datetime(2025, 1, 31, tzinfo=timezone.utc),
        )
        assert [e.id for e in found] == [edge.id, inside.id]

    async def test_get(self, session):
        service = AuditService(session)
        entry = await service.record("alice", "a", "details")

        assert (await service.get(entry.id)).details == "details"
        assert await service.get(entry.id + 100) is None
