"""
Menu Models: MenuItem, RecipeDetail, MenuPricing.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, utcnow

if TYPE_CHECKING:
    from .material import RawMaterial
    from .costing import CostStandard
    from .production import ProductionLog


class MenuItem(AuditMixin, Base):
    """
    Sellable dish. The recipe is costed for one batch of standard_portion portions
    taking standard_labor_hours of work.
    """

    __tablename__ = "menu_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    standard_portion: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    standard_portion_unit: Mapped[str] = mapped_column(String(30), nullable=False)
    standard_labor_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    __table_args__ = (
        CheckConstraint("standard_portion >= 1", name="chk_menu_item_portion_positive"),
        CheckConstraint("standard_labor_hours >= 0", name="chk_menu_item_labor_positive"),
    )

    recipe_details: Mapped[list["RecipeDetail"]] = relationship(
        back_populates="menu_item",
        cascade="all, delete-orphan",
        order_by=lambda: [RecipeDetail.sequence, RecipeDetail.id],
    )
    pricing: Mapped[list["MenuPricing"]] = relationship(
        back_populates="menu_item", cascade="all, delete-orphan"
    )
    cost_standards: Mapped[list["CostStandard"]] = relationship(
        back_populates="menu_item", cascade="all, delete-orphan"
    )
    production_logs: Mapped[list["ProductionLog"]] = relationship(back_populates="menu_item")


class RecipeDetail(Base):
    """
    One ingredient line: quantity of a material needed per standard batch.
    """

    __tablename__ = "recipe_detail"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    menu_item_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("menu_item.id", ondelete="CASCADE"), nullable=False, index=True
    )
    raw_material_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("raw_material.id"), nullable=False, index=True
    )
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(30), nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    menu_item: Mapped["MenuItem"] = relationship(back_populates="recipe_details")
    raw_material: Mapped["RawMaterial"] = relationship()


class MenuPricing(Base):
    """
    Selling price history. The current price is the row with the latest effective_date.
    """

    __tablename__ = "menu_pricing"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    menu_item_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("menu_item.id", ondelete="CASCADE"), nullable=False
    )
    selling_price: Mapped[float] = mapped_column(Float, nullable=False)
    effective_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    notes: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("selling_price >= 0", name="chk_menu_pricing_price_positive"),
        Index("ix_menu_pricing_item_date", "menu_item_id", "effective_date"),
    )

    menu_item: Mapped["MenuItem"] = relationship(back_populates="pricing")
