from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.api.dependencies import get_current_user, get_db_session
from statuspage.api.schemas.auth import LoginRequest, TokenResponse
from statuspage.api.schemas.users import UserRead
from statuspage.db.models import User
from statuspage.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    user, token = await AuthService(session).login(payload.username, payload.password)
    return TokenResponse(access_token=token, user=UserRead.model_validate(user))


@router.get("/me", response_model=UserRead)
async def me(user: User = Depends(get_current_user)) -> UserRead:
    return user
