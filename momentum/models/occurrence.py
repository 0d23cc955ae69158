from __future__ import annotations

import uuid
from datetime import date, datetime, time

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Time, UniqueConstraint, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from momentum.db import Base


class Occurrence(Base):
    """
    One concrete scheduled instance of a task.

    Rows are materialized ahead of time from the task's recurrence rule; the
    completion-rate engine reads them directly, never a cached aggregate.
    """

    __tablename__ = "occurrences"
    __table_args__ = (
        UniqueConstraint("task_id", "scheduled_date", name="uq_occurrences_task_id_scheduled_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    task_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    scheduled_time: Mapped[time] = mapped_column(Time, nullable=False)

    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    skipped: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    is_exception: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())

    task = relationship("Task", lazy="joined")
