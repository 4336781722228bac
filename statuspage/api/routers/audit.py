from __future__ import annotations

from datetime import datetime
from typing import Sequence

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.api.dependencies import get_db_session, require_permission
from statuspage.api.schemas.audit import AuditLogCreate, AuditLogRead
from statuspage.core.errors import ValidationError
from statuspage.db.models import User
from statuspage.services.audit import AuditService

router = APIRouter(prefix="/audit-logs", tags=["audit"])

view_audit_logs = require_permission("view_audit_logs")


@router.get("/", response_model=Sequence[AuditLogRead])
async def list_audit_logs(
    username: str | None = None,
    action: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(view_audit_logs),
) -> Sequence[AuditLogRead]:
    if (start is None) != (end is None):
        raise ValidationError("start and end must be given together")
    return await AuditService(session).search(
        username=username, action=action, start=start, end=end, limit=limit, offset=offset
    )


@router.get("/{log_id}", response_model=AuditLogRead)
async def get_audit_log(
    log_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(view_audit_logs),
) -> AuditLogRead:
    entry = await AuditService(session).get(log_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Audit log not found")
    return entry


@router.post("/", response_model=AuditLogRead, status_code=status.HTTP_201_CREATED)
async def create_audit_log(
    payload: AuditLogCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(view_audit_logs),
) -> AuditLogRead:
    entry = await AuditService(session).create(
        username=user.username, action=payload.action, details=payload.details
    )
    await session.commit()
    return entry
