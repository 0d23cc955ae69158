from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Index, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from momentum.db import Base
from momentum.models.enums import BadgeTier


class Badge(Base):
    """Append-only history of awarded daily badges."""

    __tablename__ = "badges"
    __table_args__ = (Index("ix_badges_user_id_day_date", "user_id", "day_date"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    day_date: Mapped[date] = mapped_column(Date, nullable=False)
    tier: Mapped[BadgeTier] = mapped_column(
        Enum(BadgeTier, name="badge_tier", values_callable=lambda enum_cls: [item.value for item in enum_cls]),
        nullable=False,
    )
    awarded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
