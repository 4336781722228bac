from __future__ import annotations

from typing import Sequence

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.api.dependencies import get_current_user, get_db_session, require_permission
from statuspage.api.schemas.components import (
    ComponentCreate,
    ComponentGroupCreate,
    ComponentGroupRead,
    ComponentGroupUpdate,
    ComponentRead,
    ComponentUpdate,
    OverallStatusRead,
)
from statuspage.db.models import User
from statuspage.services.components import ComponentService

groups_router = APIRouter(prefix="/component-groups", tags=["components"])
router = APIRouter(prefix="/components", tags=["components"])

manage_components = require_permission("manage_components")


@groups_router.get("/", response_model=Sequence[ComponentGroupRead])
async def list_groups(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> Sequence[ComponentGroupRead]:
    return await ComponentService(session).list_groups()


@groups_router.get("/{group_id}", response_model=ComponentGroupRead)
async def get_group(
    group_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> ComponentGroupRead:
    group = await ComponentService(session).get_group(group_id)
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Component group not found")
    return group


@groups_router.post("/", response_model=ComponentGroupRead, status_code=status.HTTP_201_CREATED)
async def create_group(
    payload: ComponentGroupCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_components),
) -> ComponentGroupRead:
    group = await ComponentService(session).create_group(**payload.model_dump(), actor=user.username)
    await session.commit()
    return group


@groups_router.patch("/{group_id}", response_model=ComponentGroupRead)
async def update_group(
    group_id: int,
    payload: ComponentGroupUpdate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_components),
) -> ComponentGroupRead:
    group = await ComponentService(session).update_group(
        group_id, **payload.model_dump(exclude_unset=True), actor=user.username
    )
    await session.commit()
    return group


@groups_router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_components),
) -> None:
    await ComponentService(session).delete_group(group_id, actor=user.username)
    await session.commit()
    return None


@router.get("/", response_model=Sequence[ComponentRead])
async def list_components(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> Sequence[ComponentRead]:
    return await ComponentService(session).list()


@router.get("/overall-status", response_model=OverallStatusRead)
async def overall_status(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> OverallStatusRead:
    return OverallStatusRead(status=await ComponentService(session).get_overall_status())


@router.get("/{component_id}", response_model=ComponentRead)
async def get_component(
    component_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> ComponentRead:
    component = await ComponentService(session).get(component_id)
    if component is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Component not found")
    return component


@router.post("/", response_model=ComponentRead, status_code=status.HTTP_201_CREATED)
async def create_component(
    payload: ComponentCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_components),
) -> ComponentRead:
    component = await ComponentService(session).create(**payload.model_dump(), actor=user.username)
    await session.commit()
    return component


@router.patch("/{component_id}", response_model=ComponentRead)
async def update_component(
    component_id: int,
    payload: ComponentUpdate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_components),
) -> ComponentRead:
    component = await ComponentService(session).update(
        component_id, **payload.model_dump(exclude_unset=True), actor=user.username
    )
    await session.commit()
    return component


@router.delete("/{component_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_component(
    component_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_components),
) -> None:
    await ComponentService(session).delete(component_id, actor=user.username)
    await session.commit()
    return None
