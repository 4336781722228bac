from __future__ import annotations

from typing import Sequence

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.api.dependencies import get_db_session, require_permission
from statuspage.api.schemas.automations import (
    AutomationComponents,
    AutomationCreate,
    AutomationRead,
    AutomationUpdate,
    ExecutionResult,
)
from statuspage.db.models import User
from statuspage.services.automations import AutomationService

router = APIRouter(prefix="/automations", tags=["automations"])

manage_automations = require_permission("manage_automations")


@router.get("/", response_model=Sequence[AutomationRead])
async def list_automations(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_automations),
) -> Sequence[AutomationRead]:
    return await AutomationService(session).list()


@router.get("/{automation_id}", response_model=AutomationRead)
async def get_automation(
    automation_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_automations),
) -> AutomationRead:
    automation = await AutomationService(session).get(automation_id)
    if automation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Automation not found")
    return automation


@router.post("/", response_model=AutomationRead, status_code=status.HTTP_201_CREATED)
async def create_automation(
    payload: AutomationCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_automations),
) -> AutomationRead:
    automation = await AutomationService(session).create(**payload.model_dump(), actor=user.username)
    await session.commit()
    return automation


@router.patch("/{automation_id}", response_model=AutomationRead)
async def update_automation(
    automation_id: int,
    payload: AutomationUpdate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_automations),
) -> AutomationRead:
    automation = await AutomationService(session).update(
        automation_id, **payload.model_dump(exclude_unset=True), actor=user.username
    )
    await session.commit()
    return automation


@router.delete("/{automation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_automation(
    automation_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_automations),
) -> None:
    await AutomationService(session).delete(automation_id, actor=user.username)
    await session.commit()
    return None


@router.post("/{automation_id}/execute", response_model=ExecutionResult)
async def execute_automation(
    automation_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_automations),
) -> ExecutionResult:
    result = await AutomationService(session).execute(automation_id, actor=user.username)
    await session.commit()
    return ExecutionResult(**result)


@router.post("/{automation_id}/components", response_model=AutomationRead)
async def add_automation_components(
    automation_id: int,
    payload: AutomationComponents,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_automations),
) -> AutomationRead:
    automation = await AutomationService(session).add_components(
        automation_id, payload.component_ids, actor=user.username
    )
    await session.commit()
    return automation


@router.delete("/{automation_id}/components", response_model=AutomationRead)
async def remove_automation_components(
    automation_id: int,
    payload: AutomationComponents,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_automations),
) -> AutomationRead:
    automation = await AutomationService(session).remove_components(
        automation_id, payload.component_ids, actor=user.username
    )
    await session.commit()
    return automation
