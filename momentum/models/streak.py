from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from momentum.db import Base


class Streak(Base):
    __tablename__ = "streaks"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    # Last day the streak state was touched by a badge (gold, or the non-gold day that broke it).
    last_completion_date: Mapped[date | None] = mapped_column(Date)
    freeze_tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    last_token_refresh: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
