from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from statuspage.db.models import ComponentStatus


class ComponentGroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    display_order: int | None = None
    collapsed_by_default: bool = False


class ComponentGroupUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    display_order: int | None = None
    collapsed_by_default: bool | None = None


class ComponentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    group_id: int
    status: ComponentStatus = ComponentStatus.OPERATIONAL
    display_order: int | None = None


class ComponentUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    group_id: int | None = None
    status: ComponentStatus | None = None
    display_order: int | None = None


class ComponentRead(BaseModel):
    id: int
    name: str
    status: ComponentStatus
    display_order: int
    group_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ComponentGroupRead(BaseModel):
    id: int
    name: str
    display_order: int
    collapsed_by_default: bool
    components: list[ComponentRead] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OverallStatusRead(BaseModel):
    status: ComponentStatus
