from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.db import get_db
from momentum.models.user import User
from momentum.services.date_math import local_today
from momentum.services.users import get_or_create_local_user


async def get_current_user(db: AsyncSession = Depends(get_db)) -> User:
    # Single local user; there is no authentication layer.
    return await get_or_create_local_user(db)


def user_today(user: User):
    return local_today(user.timezone)
