from __future__ import annotations

import uuid
from datetime import date, datetime, time

from sqlalchemy import JSON, Date, DateTime, Enum, ForeignKey, Time, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from momentum.db import Base
from momentum.models.enums import RecurrencePattern


class RecurrenceRule(Base):
    __tablename__ = "recurrence_rules"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    task_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    pattern: Mapped[RecurrencePattern] = mapped_column(
        Enum(
            RecurrencePattern,
            name="recurrence_pattern",
            values_callable=lambda enum_cls: [item.value for item in enum_cls],
        ),
        nullable=False,
    )
    # Weekday names ("Monday"...), used by specific_days and weekly.
    days: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date | None] = mapped_column(Date)
    # ISO dates skipped even when the pattern matches.
    exceptions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)

    materialized_through: Mapped[date | None] = mapped_column(Date)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
