from __future__ import annotations

from typing import Sequence

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.api.dependencies import get_db_session, require_permission
from statuspage.api.schemas.settings import (
    MaintenanceModeRead,
    MaintenanceModeWrite,
    SiteSettingRead,
    SiteSettingWrite,
)
from statuspage.db.models import User
from statuspage.services.settings import SiteSettingService

router = APIRouter(prefix="/settings", tags=["settings"])

manage_settings = require_permission("manage_settings")


@router.get("/", response_model=Sequence[SiteSettingRead])
async def list_settings(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_settings),
) -> Sequence[SiteSettingRead]:
    return await SiteSettingService(session).list()


@router.get("/maintenance-mode", response_model=MaintenanceModeRead)
async def get_maintenance_mode(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_settings),
) -> MaintenanceModeRead:
    service = SiteSettingService(session)
    return MaintenanceModeRead(
        enabled=await service.get_maintenance_mode(),
        message=await service.get_maintenance_mode_message(),
    )


@router.put("/maintenance-mode", response_model=MaintenanceModeRead)
async def set_maintenance_mode(
    payload: MaintenanceModeWrite,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_settings),
) -> MaintenanceModeRead:
    service = SiteSettingService(session)
    if "message" in payload.model_fields_set:
        await service.set_maintenance_mode(payload.enabled, payload.message, actor=user.username)
    else:
        await service.set_maintenance_mode(payload.enabled, actor=user.username)
    await session.commit()
    return MaintenanceModeRead(
        enabled=await service.get_maintenance_mode(),
        message=await service.get_maintenance_mode_message(),
    )


@router.get("/{key}", response_model=SiteSettingRead)
async def get_setting(
    key: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_settings),
) -> SiteSettingRead:
    setting = await SiteSettingService(session).get(key)
    if setting is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Setting not found")
    return setting


@router.put("/", response_model=SiteSettingRead)
async def upsert_setting(
    payload: SiteSettingWrite,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_settings),
) -> SiteSettingRead:
    setting = await SiteSettingService(session).upsert(payload.key, payload.value, actor=user.username)
    await session.commit()
    return setting
