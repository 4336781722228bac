from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from statuspage.api.schemas.roles import RoleRead


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)
    role_id: int


class UserUpdate(BaseModel):
    username: str | None = Field(default=None, min_length=1, max_length=255)
    password: str | None = Field(default=None, min_length=1)
    role_id: int | None = None


class UserRead(BaseModel):
    id: int
    username: str
    role_id: int
    role: RoleRead | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
