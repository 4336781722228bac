from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    permissions: dict[str, bool] = Field(default_factory=dict)


class RoleUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    permissions: dict[str, bool] | None = None


class RoleRead(BaseModel):
    id: int
    name: str
    description: str | None
    permissions: dict[str, bool]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
