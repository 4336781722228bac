from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.db.models import SiteSetting
from statuspage.services.audit import AuditService
from statuspage.services.common import UNSET

logger = logging.getLogger(__name__)

MAINTENANCE_MODE_ENABLED = "maintenance_mode_enabled"
MAINTENANCE_MODE_MESSAGE = "maintenance_mode_message"


class SiteSettingService:
    """Key/value site settings, including the maintenance-mode switch."""

    def __init__(self, session: AsyncSession, audit: AuditService | None = None) -> None:
        self.session = session
        self.audit = audit or AuditService(session)

    async def get(self, key: str) -> SiteSetting | None:
        return await self.session.scalar(select(SiteSetting).where(SiteSetting.key == key))

    async def list(self) -> Sequence[SiteSetting]:
        rows = await self.session.scalars(select(SiteSetting).order_by(SiteSetting.key))
        return list(rows)

    async def upsert(self, key: str, value: str | None, *, actor: str) -> SiteSetting:
        setting = await self._write(key, value)
        await self.audit.record(actor, "update_site_setting", f'Set site setting "{key}"')
        logger.info("site setting saved", extra={"key": key})
        return setting

    async def get_maintenance_mode(self) -> bool:
        setting = await self.get(MAINTENANCE_MODE_ENABLED)
        return setting is not None and setting.value == "true"

    async def get_maintenance_mode_message(self) -> str | None:
        setting = await self.get(MAINTENANCE_MODE_MESSAGE)
        return setting.value if setting is not None else None

    async def set_maintenance_mode(
        self,
        enabled: bool,
        message: str | None = UNSET,
        *,
        actor: str,
    ) -> None:
        """Flip maintenance mode; the message is only written when passed.

        An empty string is stored as given, it does not clear to None.
        """
        await self._write(MAINTENANCE_MODE_ENABLED, "true" if enabled else "false")
        if message is not UNSET:
            await self._write(MAINTENANCE_MODE_MESSAGE, message)

        state = "enabled" if enabled else "disabled"
        await self.audit.record(actor, "set_maintenance_mode", f"Maintenance mode {state}")
        logger.info("maintenance mode set", extra={"enabled": enabled})

    async def _write(self, key: str, value: str | None) -> SiteSetting:
        setting = await self.get(key)
        if setting is None:
            setting = SiteSetting(key=key, value=value)
            self.session.add(setting)
        else:
            setting.value = value
        await self.session.flush()
        return setting
