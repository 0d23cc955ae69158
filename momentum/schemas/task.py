from __future__ import annotations

import uuid
from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict, Field, model_validator

from momentum.models.enums import RecurrencePattern, Weekday


class RecurrenceIn(BaseModel):
    pattern: RecurrencePattern
    days: list[Weekday] = Field(default_factory=list)
    start_date: date | None = None
    end_date: date | None = None
    exceptions: list[date] = Field(default_factory=list)

    @model_validator(mode="after")
    def _end_after_start(self) -> RecurrenceIn:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class RecurrenceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    pattern: RecurrencePattern
    days: list[str]
    start_date: date
    end_date: date | None = None
    exceptions: list[str]
    start_time: time
    materialized_through: date | None = None


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str = Field(default="", max_length=8000)
    color: str = Field(default="#2563EB", max_length=16)
    duration: int = Field(gt=0, le=24 * 60, description="Minutes")
    category: str | None = Field(default=None, max_length=100)
    # Day of the single occurrence when no recurrence is given.
    day: date | None = None
    start_time: time
    recurrence: RecurrenceIn | None = None

    @model_validator(mode="after")
    def _has_schedule(self) -> TaskCreate:
        if self.recurrence is None and self.day is None:
            raise ValueError("day is required for a task without recurrence")
        return self


class TaskUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = Field(default=None, max_length=8000)
    color: str | None = Field(default=None, max_length=16)
    duration: int | None = Field(default=None, gt=0, le=24 * 60)
    category: str | None = Field(default=None, max_length=100)


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: str
    color: str
    duration: int
    category: str | None = None
    version: int
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    recurrence: RecurrenceOut | None = None


class ExceptionCreate(BaseModel):
    day: date
