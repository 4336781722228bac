from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from statuspage.api.schemas.components import ComponentRead
from statuspage.db.models import IncidentImpact, IncidentStatus


class IncidentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    status: IncidentStatus = IncidentStatus.INVESTIGATING
    impact: IncidentImpact
    impact_description: str | None = None
    root_cause: str | None = None
    affected_component_ids: list[int] = Field(default_factory=list)
    initial_update_message: str = Field(..., min_length=1)


class IncidentEdit(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    status: IncidentStatus | None = None
    impact: IncidentImpact | None = None
    impact_description: str | None = None
    root_cause: str | None = None
    resolved_at: datetime | None = None


class IncidentUpdateCreate(BaseModel):
    message: str = Field(..., min_length=1)
    status: IncidentStatus
    timestamp: datetime | None = None


class IncidentUpdateEdit(BaseModel):
    message: str | None = Field(default=None, min_length=1)
    status: IncidentStatus | None = None
    timestamp: datetime | None = None


class IncidentUpdateRead(BaseModel):
    id: int
    incident_id: int
    message: str
    status: IncidentStatus
    timestamp: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class IncidentRead(BaseModel):
    id: int
    title: str
    status: IncidentStatus
    impact: IncidentImpact
    impact_description: str | None
    root_cause: str | None
    resolved_at: datetime | None
    created_at: datetime
    updated_at: datetime
    updates: list[IncidentUpdateRead] = []
    affected_components: list[ComponentRead] = []

    model_config = ConfigDict(from_attributes=True)
