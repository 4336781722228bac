from __future__ import annotations

from pydantic import BaseModel

from statuspage.api.schemas.users import UserRead


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
