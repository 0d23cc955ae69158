from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Enum, Float, ForeignKey, Integer, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from momentum.db import Base
from momentum.models.enums import BadgeTier


class DailySummary(Base):
    __tablename__ = "daily_summaries"
    __table_args__ = (
        UniqueConstraint("user_id", "day_date", name="uq_daily_summaries_user_id_day_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    total_tasks: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    completed_tasks: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    # Percentage rounded to one decimal.
    completion_rate: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    badge_tier: Mapped[BadgeTier] = mapped_column(
        Enum(BadgeTier, name="badge_tier", values_callable=lambda enum_cls: [item.value for item in enum_cls]),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
