from __future__ import annotations

from typing import Sequence

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.api.dependencies import get_db_session
from statuspage.api.schemas.incidents import IncidentRead
from statuspage.api.schemas.maintenance import MaintenanceRead
from statuspage.api.schemas.public import PublicStatus
from statuspage.api.schemas.settings import MaintenanceModeRead
from statuspage.services.public import PublicService
from statuspage.services.settings import SiteSettingService

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/status", response_model=PublicStatus)
async def public_status(session: AsyncSession = Depends(get_db_session)) -> PublicStatus:
    return await PublicService(session).get_status()


@router.get("/incidents", response_model=Sequence[IncidentRead])
async def public_incidents(
    include_resolved: bool = True,
    days: int = Query(default=15),
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[IncidentRead]:
    return await PublicService(session).get_incidents(include_resolved=include_resolved, days=days)


@router.get("/incidents/{incident_id}", response_model=IncidentRead)
async def public_incident(
    incident_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> IncidentRead:
    incident = await PublicService(session).get_incident(incident_id)
    if incident is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Incident not found")
    return incident


@router.get("/maintenance", response_model=Sequence[MaintenanceRead])
async def public_maintenance(session: AsyncSession = Depends(get_db_session)) -> Sequence[MaintenanceRead]:
    return await PublicService(session).get_maintenance()


@router.get("/maintenance/{maintenance_id}", response_model=MaintenanceRead)
async def public_maintenance_window(
    maintenance_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> MaintenanceRead:
    window = await PublicService(session).get_maintenance_window(maintenance_id)
    if window is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Maintenance window not found")
    return window


@router.get("/maintenance-mode", response_model=MaintenanceModeRead)
async def public_maintenance_mode(session: AsyncSession = Depends(get_db_session)) -> MaintenanceModeRead:
    service = SiteSettingService(session)
    return MaintenanceModeRead(
        enabled=await service.get_maintenance_mode(),
        message=await service.get_maintenance_mode_message(),
    )
