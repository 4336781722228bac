from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AuditLogCreate(BaseModel):
    action: str = Field(..., min_length=1, max_length=100)
    details: str | None = None


class AuditLogRead(BaseModel):
    id: int
    timestamp: datetime
    username: str
    action: str
    details: str | None

    model_config = ConfigDict(from_attributes=True)
