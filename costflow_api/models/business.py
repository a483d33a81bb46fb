"""
Business configuration Models: BusinessSettings, OverheadConfig.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from costflow_shared.config.constants import DEFAULT_CURRENCY

from .base import Base, utcnow


class BusinessSettings(Base):
    """
    Singleton business profile. Calculations read the labor rate from the first row.
    """

    __tablename__ = "business_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    business_name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text)
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    labor_rate_per_hour: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default=DEFAULT_CURRENCY)
    is_initialized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class OverheadConfig(Base):
    """
    Overhead allocation policy. Rows are never edited; the newest effective_date is current.

    allocation_rate is a percentage (0-100) for the percentage methods
    and a flat currency amount per unit for per_unit.
    """

    __tablename__ = "overhead_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    allocation_method: Mapped[str] = mapped_column(String(30), nullable=False)
    allocation_rate: Mapped[float] = mapped_column(Float, nullable=False)
    effective_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text)
