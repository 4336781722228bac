"""
Test user management.
"""
import pytest

from statuspage.core.errors import ConflictError, NotFoundError
from statuspage.core.security import authenticator
from statuspage.services.audit import AuditService
from statuspage.services.roles import RoleService
from statuspage.services.users import UserService

ACTOR = "tester"


@pytest.fixture
async def role(session):
    return await RoleService(session).create(name="editor", actor=ACTOR)


class TestUserService:
    """User CRUD with hashed passwords."""

    async def test_create_hashes_password(self, session, role):
        user = await UserService(session).create(
            username="alice", password="s3cret", role_id=role.id, actor=ACTOR
        )

        assert user.hashed_password != "s3cret"
        assert authenticator.verify_password("s3cret", user.hashed_password)
        assert user.role.name == "editor"

    async def test_unknown_role_conflicts(self, session):
        with pytest.raises(ConflictError, match="Role with id 77 not found"):
            await UserService(session).create(username="alice", password="pw", role_id=77, actor=ACTOR)

    async def test_duplicate_username_conflicts(self, session, role):
        service = UserService(session)
        await service.create(username="alice", password="pw", role_id=role.id, actor=ACTOR)

        with pytest.raises(ConflictError, match="already exists"):
            await service.create(username="alice", password="pw2", role_id=role.id, actor=ACTOR)

    async def test_get_by_username(self, session, role):
        service = UserService(session)
        created = await service.create(username="alice", password="pw", role_id=role.id, actor=ACTOR)

        found = await service.get_by_username("alice")
        assert found.id == created.id
        assert await service.get_by_username("bob") is None

    async def test_update_rehashes_password_and_moves_role(self, session, role):
        service = UserService(session)
        other = await RoleService(session).create(name="viewer", actor=ACTOR)
        user = await service.create(username="alice", password="old", role_id=role.id, actor=ACTOR)

        updated = await service.update(user.id, password="new", role_id=other.id, actor=ACTOR)

        assert authenticator.verify_password("new", updated.hashed_password)
        assert not authenticator.verify_password("old", updated.hashed_password)
        assert updated.role.name == "viewer"

    async def test_rejected_update_leaves_user_untouched(self, session, role):
        service = UserService(session)
        other = await RoleService(session).create(name="viewer", actor=ACTOR)
        await service.create(username="alice", password="pw", role_id=role.id, actor=ACTOR)
        bob = await service.create(username="bob", password="pw", role_id=role.id, actor=ACTOR)
        await session.commit()

        with pytest.raises(ConflictError, match="already exists"):
            await service.update(bob.id, role_id=other.id, username="alice", actor=ACTOR)
        await session.commit()

        reloaded = await service.get(bob.id)
        assert reloaded.role_id == role.id
        assert reloaded.username == "bob"
        assert await AuditService(session).by_action("update_user") == []

    async def test_update_missing_user(self, session):
        with pytest.raises(NotFoundError, match="User with id 5 not found"):
            await UserService(session).update(5, username="x", actor=ACTOR)

    async def test_delete(self, session, role):
        service = UserService(session)
        user = await service.create(username="alice", password="pw", role_id=role.id, actor=ACTOR)

        await service.delete(user.id, actor=ACTOR)
        assert await service.get(user.id) is None

        with pytest.raises(NotFoundError):
            await service.delete(user.id, actor=ACTOR)
