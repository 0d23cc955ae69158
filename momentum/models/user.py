from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from momentum.db import Base


DEFAULT_USER_SETTINGS: dict = {
    "sleep_start": "23:00",
    "sleep_end": "07:00",
    "first_day_of_week": "Monday",
    "time_format": "24h",
    "freeze_tokens_per_month": 1,
}


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False, server_default="Me")
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, server_default="UTC")
    settings: Mapped[dict] = mapped_column(JSON, nullable=False, default=lambda: dict(DEFAULT_USER_SETTINGS))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
