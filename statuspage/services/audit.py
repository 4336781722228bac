from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.db.models import AuditLog

logger = logging.getLogger(__name__)


class AuditService:
    """Append-only audit trail.

    Rows are added to the caller's session, so an audit entry commits or
    rolls back together with the mutation it describes.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def record(self, username: str, action: str, details: str | None = None) -> AuditLog:
        entry = AuditLog(username=username, action=action, details=details)
        self.session.add(entry)
        await self.session.flush()
        logger.info("audit %s", action, extra={"username": username, "details": details})
        return entry

    async def create(self, *, username: str, action: str, details: str | None = None) -> AuditLog:
        return await self.record(username, action, details)

    async def get(self, log_id: int) -> AuditLog | None:
        return await self.session.get(AuditLog, log_id)

    async def list(self, *, limit: int = 100, offset: int = 0) -> Sequence[AuditLog]:
        rows = await self.session.scalars(
            select(AuditLog)
            .order_by(desc(AuditLog.timestamp), desc(AuditLog.id))
            .limit(limit)
            .offset(offset)
        )
        return list(rows)

    async def search(
        self,
        *,
        username: str | None = None,
        action: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = 100,
        offset: int = 0,
    ) -> Sequence[AuditLog]:
        """Entries matching every given filter, newest first.

        The date range is inclusive at both ends. ``limit=None`` returns
        all matches.
        """
        stmt = select(AuditLog)
        if username is not None:
            stmt = stmt.where(AuditLog.username == username)
        if action is not None:
            stmt = stmt.where(AuditLog.action == action)
        if start is not None:
            stmt = stmt.where(AuditLog.timestamp >= start)
        if end is not None:
            stmt = stmt.where(AuditLog.timestamp <= end)
        stmt = stmt.order_by(desc(AuditLog.timestamp), desc(AuditLog.id)).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        rows = await self.session.scalars(stmt)
        return list(rows)

    async def by_user(self, username: str, *, limit: int = 100) -> Sequence[AuditLog]:
        return await self.search(username=username, limit=limit)

    async def by_action(self, action: str, *, limit: int = 100) -> Sequence[AuditLog]:
        return await self.search(action=action, limit=limit)

    async def by_date_range(self, start: datetime, end: datetime) -> Sequence[AuditLog]:
        return await self.search(start=start, end=end, limit=None)
