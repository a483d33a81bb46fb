"""
Costing snapshot Models: CostStandard, VarianceRecord.

Both tables are append-only. Each calculation inserts a new row and the
current value is resolved at read time by the latest date.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from costflow_shared.config.constants import VarianceType

from .base import Base, utcnow

if TYPE_CHECKING:
    from .menu import MenuItem
    from .production import ProductionLog


class CostStandard(Base):
    """
    Expected material, labor and overhead cost of one standard batch at a point in time.
    """

    __tablename__ = "cost_standard"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    menu_item_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("menu_item.id", ondelete="CASCADE"), nullable=False
    )
    effective_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    material_cost: Mapped[float] = mapped_column(Float, nullable=False)
    labor_cost: Mapped[float] = mapped_column(Float, nullable=False)
    overhead_cost: Mapped[float] = mapped_column(Float, nullable=False)
    total_cost: Mapped[float] = mapped_column(Float, nullable=False)
    cost_per_portion: Mapped[float] = mapped_column(Float, nullable=False)

    __table_args__ = (
        Index("ix_cost_standard_item_date", "menu_item_id", "effective_date"),
    )

    menu_item: Mapped["MenuItem"] = relationship(back_populates="cost_standards")


class VarianceRecord(Base):
    """
    Actual versus standard cost of one production run.
    Negative variance_amount is favorable, positive is unfavorable.
    """

    __tablename__ = "variance_record"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    menu_item_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("menu_item.id"), nullable=False, index=True
    )
    production_log_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("production_log.id", ondelete="CASCADE"), nullable=False, index=True
    )
    variance_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    standard_cost: Mapped[float] = mapped_column(Float, nullable=False)
    actual_cost: Mapped[float] = mapped_column(Float, nullable=False)
    variance_amount: Mapped[float] = mapped_column(Float, nullable=False)
    variance_percentage: Mapped[float] = mapped_column(Float, nullable=False)
    variance_type: Mapped[str] = mapped_column(
        String(30), nullable=False, default=VarianceType.MATERIAL_PRICE
    )
    notes: Mapped[Optional[str]] = mapped_column(Text)

    menu_item: Mapped["MenuItem"] = relationship()
    production_log: Mapped["ProductionLog"] = relationship(back_populates="variance_records")
