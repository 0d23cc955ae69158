from __future__ import annotations

import uuid
from datetime import date, datetime, time

from pydantic import BaseModel, Field


class OccurrenceOut(BaseModel):
    id: uuid.UUID
    task_id: uuid.UUID
    title: str
    color: str
    duration: int
    scheduled_date: date
    scheduled_time: time
    completed: bool
    completed_at: datetime | None = None
    skipped: bool
    is_exception: bool


class OverlapQuery(BaseModel):
    day: date
    start_time: time
    duration: int = Field(gt=0, le=24 * 60)
    exclude_task_id: uuid.UUID | None = None
