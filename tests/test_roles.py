"""
Test role management.
"""
import pytest

from statuspage.core.errors import ConflictError, NotFoundError
from statuspage.db.models import User
from statuspage.services.roles import RoleService

ACTOR = "tester"


class TestRoleService:
    """Role CRUD and its deletion guard."""

    async def test_create_and_get(self, session):
        service = RoleService(session)
        role = await service.create(
            name="editor",
            description="Edits incidents",
            permissions={"manage_incidents": True},
            actor=ACTOR,
        )

        fetched = await service.get(role.id)
        assert fetched.name == "editor"
        assert fetched.permissions == {"manage_incidents": True}

    async def test_duplicate_name_conflicts(self, session):
        service = RoleService(session)
        await service.create(name="editor", actor=ACTOR)

        with pytest.raises(ConflictError, match="already exists"):
            await service.create(name="editor", actor=ACTOR)

    async def test_rename_to_taken_name_conflicts(self, session):
        service = RoleService(session)
        await service.create(name="editor", actor=ACTOR)
        other = await service.create(name="viewer", actor=ACTOR)

        with pytest.raises(ConflictError, match="unique"):
            await service.update(other.id, name="editor", actor=ACTOR)

    async def test_update_keeps_omitted_fields(self, session):
        service = RoleService(session)
        role = await service.create(name="editor", description="desc", actor=ACTOR)

        updated = await service.update(role.id, permissions={"all": True}, actor=ACTOR)
        assert updated.description == "desc"
        assert updated.permissions == {"all": True}

        cleared = await service.update(role.id, description=None, actor=ACTOR)
        assert cleared.description is None

    async def test_update_missing_role(self, session):
        with pytest.raises(NotFoundError, match="not found"):
            await RoleService(session).update(999, name="x", actor=ACTOR)

    async def test_delete_role_with_users_conflicts(self, session):
        service = RoleService(session)
        role = await service.create(name="editor", actor=ACTOR)
        session.add(User(username="u1", hashed_password="x", role_id=role.id))
        await session.flush()

        with pytest.raises(ConflictError, match="users are assigned"):
            await service.delete(role.id, actor=ACTOR)

    async def test_delete_unreferenced_role(self, session):
        service = RoleService(session)
        role = await service.create(name="editor", actor=ACTOR)

        await service.delete(role.id, actor=ACTOR)
        assert await service.get(role.id) is None

    async def test_delete_missing_role(self, session):
        with pytest.raises(NotFoundError):
            await RoleService(session).delete(42, actor=ACTOR)
