from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from statuspage.api.schemas.components import ComponentRead
from statuspage.db.models import MaintenanceStatus


class MaintenanceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    start_time: datetime
    end_time: datetime
    status: MaintenanceStatus = MaintenanceStatus.SCHEDULED
    affected_component_ids: list[int] = Field(default_factory=list)


class MaintenanceEdit(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: MaintenanceStatus | None = None


class MaintenanceUpdateCreate(BaseModel):
    message: str = Field(..., min_length=1)
    timestamp: datetime | None = None


class MaintenanceUpdateEdit(BaseModel):
    message: str | None = Field(default=None, min_length=1)
    timestamp: datetime | None = None


class MaintenanceUpdateRead(BaseModel):
    id: int
    maintenance_id: int
    message: str
    timestamp: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MaintenanceRead(BaseModel):
    id: int
    title: str
    description: str | None
    start_time: datetime
    end_time: datetime
    status: MaintenanceStatus
    created_at: datetime
    updated_at: datetime
    updates: list[MaintenanceUpdateRead] = []
    affected_components: list[ComponentRead] = []

    model_config = ConfigDict(from_attributes=True)
