from __future__ import annotations

from typing import Sequence

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.api.dependencies import get_db_session, require_permission
from statuspage.api.schemas.roles import RoleCreate, RoleRead, RoleUpdate
from statuspage.db.models import User
from statuspage.services.roles import RoleService

router = APIRouter(prefix="/roles", tags=["roles"])

manage_roles = require_permission("manage_roles")


@router.get("/", response_model=Sequence[RoleRead])
async def list_roles(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_roles),
) -> Sequence[RoleRead]:
    return await RoleService(session).list()


@router.get("/{role_id}", response_model=RoleRead)
async def get_role(
    role_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_roles),
) -> RoleRead:
    role = await RoleService(session).get(role_id)
    if role is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Role not found")
    return role


@router.post("/", response_model=RoleRead, status_code=status.HTTP_201_CREATED)
async def create_role(
    payload: RoleCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_roles),
) -> RoleRead:
    role = await RoleService(session).create(**payload.model_dump(), actor=user.username)
    await session.commit()
    return role


@router.patch("/{role_id}", response_model=RoleRead)
async def update_role(
    role_id: int,
    payload: RoleUpdate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_roles),
) -> RoleRead:
    role = await RoleService(session).update(
        role_id, **payload.model_dump(exclude_unset=True), actor=user.username
    )
    await session.commit()
    return role


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_roles),
) -> None:
    await RoleService(session).delete(role_id, actor=user.username)
    await session.commit()
    return None
