from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.config import settings
from momentum.errors import PreconditionViolation
from momentum.models.streak import Streak
from momentum.models.user import DEFAULT_USER_SETTINGS, User


async def create_user(
    db: AsyncSession,
    *,
    display_name: str = "Me",
    tz_name: str | None = None,
    user_settings: dict | None = None,
    now: datetime | None = None,
) -> User:
    """Create a user together with its streak singleton."""
    now = now or datetime.now(timezone.utc)
    user = User(
        id=uuid.uuid4(),
        display_name=display_name,
        timezone=tz_name or settings.TIMEZONE,
        settings={
            **DEFAULT_USER_SETTINGS,
            "freeze_tokens_per_month": settings.FREEZE_TOKENS_PER_MONTH,
            **(user_settings or {}),
        },
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    db.add(
        Streak(
            user_id=user.id,
            current_streak=0,
            longest_streak=0,
            last_completion_date=None,
            freeze_tokens=0,
            last_token_refresh=now,
        )
    )
    await db.flush()
    return user


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if user is None:
        raise PreconditionViolation(f"User {user_id} missing")
    return user


async def get_or_create_local_user(db: AsyncSession) -> User:
    user = (await db.execute(select(User).order_by(User.created_at).limit(1))).scalar_one_or_none()
    if user is not None:
        return user
    user = await create_user(db)
    await db.commit()
    return user


async def update_user_settings(db: AsyncSession, user_id: uuid.UUID, changes: dict) -> User:
    user = await get_user(db, user_id)
    # Reassign so the JSON column is flagged dirty.
    user.settings = {**(user.settings or {}), **changes}
    user.updated_at = datetime.now(timezone.utc)
    return user
