from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from statuspage.api.schemas.components import ComponentRead
from statuspage.db.models import ComponentStatus


class AutomationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    new_status: ComponentStatus
    target_component_ids: list[int] = Field(default_factory=list)


class AutomationUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    new_status: ComponentStatus | None = None


class AutomationComponents(BaseModel):
    component_ids: list[int] = Field(..., min_length=1)


class AutomationRead(BaseModel):
    id: int
    name: str
    new_status: ComponentStatus
    components: list[ComponentRead] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ExecutionResult(BaseModel):
    affected_components: int
    success: bool
