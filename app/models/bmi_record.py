"""BMIRecord model: height, weight and the BMI value derived from them."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class BMIRecord(Base):
    """A single BMI calculation.

    ``value`` is always weight / height^2 for the stored pair; category and
    risk are derived from it on read and are not stored here.
    """

    __tablename__ = "bmi_records"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    height: Mapped[float] = mapped_column(Float, nullable=False)  # metres
    weight: Mapped[float] = mapped_column(Float, nullable=False)  # kg
    value: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
