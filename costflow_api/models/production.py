"""
Production Models: ProductionLog, ProductionLogDetail.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .menu import MenuItem
    from .material import RawMaterial
    from .costing import VarianceRecord


class ProductionLog(Base):
    """
    One production run of a menu item with the labor actually spent.
    """

    __tablename__ = "production_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    menu_item_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("menu_item.id"), nullable=False, index=True
    )
    production_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    portions_produced: Mapped[int] = mapped_column(Integer, nullable=False)
    portions_sold: Mapped[Optional[int]] = mapped_column(Integer)
    labor_hours_actual: Mapped[Optional[float]] = mapped_column(Float)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("portions_produced >= 1", name="chk_production_portions_positive"),
        CheckConstraint(
            "portions_sold IS NULL OR portions_sold >= 0", name="chk_production_sold_positive"
        ),
    )

    menu_item: Mapped["MenuItem"] = relationship(back_populates="production_logs")
    details: Mapped[list["ProductionLogDetail"]] = relationship(
        back_populates="production_log",
        cascade="all, delete-orphan",
        order_by="ProductionLogDetail.id",
    )
    variance_records: Mapped[list["VarianceRecord"]] = relationship(
        back_populates="production_log", cascade="all, delete-orphan"
    )


class ProductionLogDetail(Base):
    """
    Material consumed by a production run, priced at the time of use.
    subtotal is computed when the row is written and never recomputed.
    """

    __tablename__ = "production_log_detail"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    production_log_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("production_log.id", ondelete="CASCADE"), nullable=False, index=True
    )
    raw_material_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("raw_material.id", ondelete="SET NULL"), index=True
    )
    quantity_used: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(30), nullable=False)
    unit_price: Mapped[float] = mapped_column(Float, nullable=False)
    subtotal: Mapped[float] = mapped_column(Float, nullable=False)

    production_log: Mapped["ProductionLog"] = relationship(back_populates="details")
    raw_material: Mapped[Optional["RawMaterial"]] = relationship()
