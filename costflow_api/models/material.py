"""
Material Models: RawMaterial, YieldTest.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base

if TYPE_CHECKING:
    from .supplier import Supplier


class RawMaterial(AuditMixin, Base):
    """
    Purchasable ingredient with its current unit price and usable yield.

    yield_percentage is overwritten by every recorded yield test.
    """

    __tablename__ = "raw_material"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    unit: Mapped[str] = mapped_column(String(30), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    current_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    yield_percentage: Mapped[float] = mapped_column(Float, nullable=False, default=100.0)
    supplier_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("supplier.id", ondelete="SET NULL"), index=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("current_price >= 0", name="chk_material_price_positive"),
    )

    supplier: Mapped[Optional["Supplier"]] = relationship(back_populates="raw_materials")
    yield_tests: Mapped[list["YieldTest"]] = relationship(
        back_populates="raw_material", cascade="all, delete-orphan"
    )


class YieldTest(Base):
    """
    Historical As-Purchased / Edible-Portion measurement for a material.
    """

    __tablename__ = "yield_test"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    raw_material_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("raw_material.id", ondelete="CASCADE"), nullable=False
    )
    test_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ap_weight: Mapped[float] = mapped_column(Float, nullable=False)
    ep_weight: Mapped[float] = mapped_column(Float, nullable=False)
    yield_percentage: Mapped[float] = mapped_column(Float, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        Index("ix_yield_test_material_date", "raw_material_id", "test_date"),
    )

    raw_material: Mapped["RawMaterial"] = relationship(back_populates="yield_tests")
