import unittest
from datetime import date, datetime, time, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import momentum.models  # noqa: F401
from momentum.db import Base
from momentum.models.occurrence import Occurrence
from momentum.schemas.task import TaskCreate
from momentum.services.tasks import create_task
from momentum.services.users import create_user


USER_CREATED_AT = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_engine():
    return create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


class DatabaseTestCase(unittest.IsolatedAsyncioTestCase):
    """In-memory SQLite database with one committed user."""

    async def asyncSetUp(self) -> None:
        self.engine = make_engine()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False, class_=AsyncSession)
        self.db = self.session_factory()
        self.user = await create_user(self.db, now=USER_CREATED_AT)
        await self.db.commit()

    async def asyncTearDown(self) -> None:
        await self.db.close()
        await self.engine.dispose()

    async def add_single_task(self, day: date, start: time = time(9, 0), duration: int = 60, title: str = "Task"):
        draft = TaskCreate(title=title, duration=duration, day=day, start_time=start)
        return await create_task(self.db, user_id=self.user.id, draft=draft, today=day)

    async def occurrences_of(self, task_id) -> list[Occurrence]:
        return list(
            (
                await self.db.execute(
                    select(Occurrence).where(Occurrence.task_id == task_id).order_by(Occurrence.scheduled_date)
                )
            ).scalars().all()
        )
