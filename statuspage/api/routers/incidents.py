from __future__ import annotations

from typing import Sequence

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.api.dependencies import get_current_user, get_db_session, require_permission
from statuspage.api.schemas.incidents import (
    IncidentCreate,
    IncidentEdit,
    IncidentRead,
    IncidentUpdateCreate,
    IncidentUpdateEdit,
    IncidentUpdateRead,
)
from statuspage.core.config import settings
from statuspage.db.models import User
from statuspage.services.incidents import IncidentService

router = APIRouter(prefix="/incidents", tags=["incidents"])

manage_incidents = require_permission("manage_incidents")


@router.get("/", response_model=Sequence[IncidentRead])
async def list_incidents(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> Sequence[IncidentRead]:
    return await IncidentService(session).list_all()


@router.get("/active", response_model=Sequence[IncidentRead])
async def list_active_incidents(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> Sequence[IncidentRead]:
    return await IncidentService(session).list_active()


@router.get("/recent", response_model=Sequence[IncidentRead])
async def list_recent_incidents(
    days: int = Query(default=settings.recent_days, ge=0),
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> Sequence[IncidentRead]:
    return await IncidentService(session).list_recent(days=days)


@router.get("/history", response_model=Sequence[IncidentRead])
async def incident_history(
    year: int | None = Query(default=None, ge=1970, le=9999),
    month: int | None = None,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> Sequence[IncidentRead]:
    return await IncidentService(session).history(year=year, month=month)


@router.get("/updates/{update_id}", response_model=IncidentUpdateRead)
async def get_incident_update(
    update_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> IncidentUpdateRead:
    update = await IncidentService(session).get_update(update_id)
    if update is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Incident update not found")
    return update


@router.patch("/updates/{update_id}", response_model=IncidentUpdateRead)
async def edit_incident_update(
    update_id: int,
    payload: IncidentUpdateEdit,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_incidents),
) -> IncidentUpdateRead:
    update = await IncidentService(session).edit_update(
        update_id, **payload.model_dump(exclude_unset=True), actor=user.username
    )
    await session.commit()
    return update


@router.delete("/updates/{update_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_incident_update(
    update_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_incidents),
) -> None:
    await IncidentService(session).delete_update(update_id, actor=user.username)
    await session.commit()
    return None


@router.get("/{incident_id}", response_model=IncidentRead)
async def get_incident(
    incident_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> IncidentRead:
    incident = await IncidentService(session).get(incident_id)
    if incident is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Incident not found")
    return incident


@router.post("/", response_model=IncidentRead, status_code=status.HTTP_201_CREATED)
async def create_incident(
    payload: IncidentCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_incidents),
) -> IncidentRead:
    incident = await IncidentService(session).create(**payload.model_dump(), actor=user.username)
    await session.commit()
    return incident


@router.patch("/{incident_id}", response_model=IncidentRead)
async def update_incident(
    incident_id: int,
    payload: IncidentEdit,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_incidents),
) -> IncidentRead:
    incident = await IncidentService(session).update(
        incident_id, **payload.model_dump(exclude_unset=True), actor=user.username
    )
    await session.commit()
    return incident


@router.delete("/{incident_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_incident(
    incident_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_incidents),
) -> None:
    await IncidentService(session).delete(incident_id, actor=user.username)
    await session.commit()
    return None


@router.get("/{incident_id}/updates", response_model=Sequence[IncidentUpdateRead])
async def list_incident_updates(
    incident_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> Sequence[IncidentUpdateRead]:
    service = IncidentService(session)
    if await service.get(incident_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Incident not found")
    return await service.list_updates(incident_id)


@router.post(
    "/{incident_id}/updates",
    response_model=IncidentUpdateRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_incident_update(
    incident_id: int,
    payload: IncidentUpdateCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_incidents),
) -> IncidentUpdateRead:
    update = await IncidentService(session).create_update(
        incident_id, **payload.model_dump(), actor=user.username
    )
    await session.commit()
    return update
