from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.api.deps import get_current_user
from momentum.db import get_db
from momentum.schemas.user import UserOut, UserSettingsUpdate
from momentum.services.users import update_user_settings


router = APIRouter()


@router.get("/me", response_model=UserOut)
async def me(user=Depends(get_current_user)) -> UserOut:
    return UserOut.model_validate(user)


@router.patch("/me/settings", response_model=UserOut)
async def update_settings(
    payload: UserSettingsUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> UserOut:
    user = await update_user_settings(db, user.id, payload.model_dump(exclude_unset=True))
    await db.commit()
    return UserOut.model_validate(user)
