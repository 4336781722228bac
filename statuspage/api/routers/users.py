from __future__ import annotations

from typing import Sequence

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from statuspage.api.dependencies import get_db_session, require_permission
from statuspage.api.schemas.users import UserCreate, UserRead, UserUpdate
from statuspage.db.models import User
from statuspage.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])

manage_users = require_permission("manage_users")


@router.get("/", response_model=Sequence[UserRead])
async def list_users(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_users),
) -> Sequence[UserRead]:
    return await UserService(session).list()


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_users),
) -> UserRead:
    found = await UserService(session).get(user_id)
    if found is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return found


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_users),
) -> UserRead:
    created = await UserService(session).create(**payload.model_dump(), actor=user.username)
    await session.commit()
    return created


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_users),
) -> UserRead:
    updated = await UserService(session).update(
        user_id, **payload.model_dump(exclude_unset=True), actor=user.username
    )
    await session.commit()
    return updated


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(manage_users),
) -> None:
    await UserService(session).delete(user_id, actor=user.username)
    await session.commit()
    return None
