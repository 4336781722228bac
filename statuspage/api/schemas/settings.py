from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SiteSettingWrite(BaseModel):
    key: str = Field(..., min_length=1, max_length=255)
    value: str | None = None


class SiteSettingRead(BaseModel):
    id: int
    key: str
    value: str | None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MaintenanceModeRead(BaseModel):
    enabled: bool
    message: str | None = None


class MaintenanceModeWrite(BaseModel):
    enabled: bool
    # omit to keep the stored message; "" stores an empty message
    message: str | None = None
