from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    display_name: str
    timezone: str
    settings: dict
    created_at: datetime | None = None


class UserSettingsUpdate(BaseModel):
    sleep_start: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    sleep_end: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    first_day_of_week: Literal["Monday", "Sunday"] | None = None
    time_format: Literal["24h", "12h"] | None = None
    freeze_tokens_per_month: int | None = Field(default=None, ge=0, le=3)
