from __future__ import annotations

from typing import Sequence

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.api.dependencies import get_current_user, get_db_session, require_permission
from statuspage.api.schemas.maintenance import (
    MaintenanceCreate,
    MaintenanceEdit,
    MaintenanceRead,
    MaintenanceUpdateCreate,
    MaintenanceUpdateEdit,
    MaintenanceUpdateRead,
)
from statuspage.core.config import settings
from statuspage.db.models import User
from statuspage.services.maintenance import MaintenanceService

router = APIRouter(prefix="/maintenance", tags=["maintenance"])

manage_maintenance = require_permission("manage_maintenance")


@router.get("/", response_model=Sequence[MaintenanceRead])
async def list_maintenance(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> Sequence[MaintenanceRead]:
    return await MaintenanceService(session).list_all()


@router.get("/active", response_model=Sequence[MaintenanceRead])
async def list_active_maintenance(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> Sequence[MaintenanceRead]:
    return await MaintenanceService(session).list_active()


@router.get("/upcoming", response_model=Sequence[MaintenanceRead])
async def list_upcoming_maintenance(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> Sequence[MaintenanceRead]:
    return await MaintenanceService(session).list_upcoming()


@router.get("/recent-completed", response_model=Sequence[MaintenanceRead])
async def list_recent_completed_maintenance(
    days: int = Query(default=settings.recent_days, ge=0),
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> Sequence[MaintenanceRead]:
    return await MaintenanceService(session).list_recent_completed(days=days)


@router.get("/updates/{update_id}", response_model=MaintenanceUpdateRead)
async def get_maintenance_update(
    update_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> MaintenanceUpdateRead:
    update = await MaintenanceService(session).get_update(update_id)
    if update is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Maintenance update not found")
    return update


@router.patch("/updates/{update_id}", response_model=MaintenanceUpdateRead)
async def edit_maintenance_update(
    update_id: int,
    payload: MaintenanceUpdateEdit,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_maintenance),
) -> MaintenanceUpdateRead:
    update = await MaintenanceService(session).edit_update(
        update_id, **payload.model_dump(exclude_unset=True), actor=user.username
    )
    await session.commit()
    return update


@router.delete("/updates/{update_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_maintenance_update(
    update_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_maintenance),
) -> None:
    await MaintenanceService(session).delete_update(update_id, actor=user.username)
    await session.commit()
    return None


@router.get("/{maintenance_id}", response_model=MaintenanceRead)
async def get_maintenance(
    maintenance_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> MaintenanceRead:
    window = await MaintenanceService(session).get(maintenance_id)
    if window is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Maintenance window not found")
    return window


@router.post("/", response_model=MaintenanceRead, status_code=status.HTTP_201_CREATED)
async def create_maintenance(
    payload: MaintenanceCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_maintenance),
) -> MaintenanceRead:
    window = await MaintenanceService(session).create(**payload.model_dump(), actor=user.username)
    await session.commit()
    return window


@router.patch("/{maintenance_id}", response_model=MaintenanceRead)
async def update_maintenance(
    maintenance_id: int,
    payload: MaintenanceEdit,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_maintenance),
) -> MaintenanceRead:
    window = await MaintenanceService(session).update(
        maintenance_id, **payload.model_dump(exclude_unset=True), actor=user.username
    )
    await session.commit()
    return window


@router.delete("/{maintenance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_maintenance(
    maintenance_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_maintenance),
) -> None:
    await MaintenanceService(session).delete(maintenance_id, actor=user.username)
    await session.commit()
    return None


@router.get("/{maintenance_id}/updates", response_model=Sequence[MaintenanceUpdateRead])
async def list_maintenance_updates(
    maintenance_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> Sequence[MaintenanceUpdateRead]:
    service = MaintenanceService(session)
    if await service.get(maintenance_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Maintenance window not found")
    return await service.list_updates(maintenance_id)


@router.post(
    "/{maintenance_id}/updates",
    response_model=MaintenanceUpdateRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_maintenance_update(
    maintenance_id: int,
    payload: MaintenanceUpdateCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_maintenance),
) -> MaintenanceUpdateRead:
    update = await MaintenanceService(session).create_update(
        maintenance_id, **payload.model_dump(), actor=user.username
    )
    await session.commit()
    return update
