"""
Report Service.

Gathers menu items, prices, cost standards, production runs and variance
records, then hands plain values to the reporting aggregator.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from costflow_api.models import (
    CostStandard,
    MenuItem,
    ProductionLog,
    RawMaterial,
    Supplier,
    VarianceRecord,
)
from costflow_api.models.base import utcnow
from costflow_api.services.costing import (
    CostTrendPoint,
    MenuItemSales,
    MonthlySummary,
    ProductionRun,
    ProfitabilityRow,
    build_cost_trends,
    build_monthly_summary,
    build_profitability_rows,
    period_bounds,
)
from costflow_api.services.crud.repository import BaseRepository, date_range_filters
from costflow_api.services.domain.cost_service import CostStandardService
from costflow_api.services.domain.menu_service import MenuItemService
from costflow_api.services.domain.settings_service import OverheadPolicyService, SettingsService
from costflow_shared.config.constants import DASHBOARD_RECENT_DAYS, Limits
from costflow_shared.config.logging import get_logger
from costflow_shared.utils.money import round_money
from costflow_shared.utils.schemas import DashboardCounts, DashboardOutput, DashboardVariance

logger = get_logger(__name__)


class ReportService:
    """Read-only reporting over the costing snapshots."""

    def __init__(self, db: Session):
        self._db = db
        self._menu_service = MenuItemService(db)
        self._cost_service = CostStandardService(db)

    def menu_profitability(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[ProfitabilityRow]:
        """
        Margin and totals per active menu item, scaled by portions sold in the range.
        """
        menu_items = BaseRepository(MenuItem, self._db).find_all(is_active=True)

        sold_query = select(
            ProductionLog.menu_item_id,
            func.coalesce(func.sum(ProductionLog.portions_sold), 0),
        ).group_by(ProductionLog.menu_item_id)
        range_filters = date_range_filters(ProductionLog.production_date, start_date, end_date)
        if range_filters:
            sold_query = sold_query.where(*range_filters)
        sold_by_item = {
            menu_item_id: int(total) for menu_item_id, total in self._db.execute(sold_query)
        }

        sales = []
        for item in menu_items:
            standard = self._cost_service.latest_for(item.id)
            sales.append(
                MenuItemSales(
                    menu_item_id=item.id,
                    menu_name=item.name,
                    category=item.category,
                    cost_per_portion=standard.cost_per_portion if standard else 0.0,
                    selling_price=self._menu_service.current_selling_price(item.id),
                    total_sold=sold_by_item.get(item.id, 0),
                )
            )
        return build_profitability_rows(sales)

    def monthly_summary(self, month: int | None, year: int | None) -> MonthlySummary:
        """
        Raises:
            InvalidInputError: If month or year is missing or out of range.
        """
        start, end = period_bounds(month, year)

        logs = BaseRepository(ProductionLog, self._db).find_all(
            filters=date_range_filters(ProductionLog.production_date, start, end),
            options=[selectinload(ProductionLog.details)],
        )

        prices: dict[int, float] = {}
        runs = []
        for log in logs:
            if log.menu_item_id not in prices:
                prices[log.menu_item_id] = self._menu_service.current_selling_price(log.menu_item_id)
            runs.append(
                ProductionRun(
                    portions_sold=log.portions_sold or 0,
                    selling_price=prices[log.menu_item_id],
                    material_cost=sum((d.subtotal for d in log.details), 0.0),
                    labor_hours_actual=log.labor_hours_actual or 0.0,
                )
            )

        summary = build_monthly_summary(
            month,
            year,
            runs,
            SettingsService(self._db).current_labor_rate(),
            OverheadPolicyService(self._db).current_overhead_config(),
        )
        logger.info("Monthly summary built", period=summary.period, runs=len(runs))
        return summary

    def cost_trends(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        menu_item_id: int | None = None,
    ) -> list[CostTrendPoint]:
        filters = date_range_filters(CostStandard.effective_date, start_date, end_date)
        if menu_item_id is not None:
            filters.append(CostStandard.menu_item_id == menu_item_id)

        standards = BaseRepository(CostStandard, self._db).find_all(
            filters=filters,
            order_by=[CostStandard.effective_date, CostStandard.id],
        )
        return build_cost_trends(standards)

    def dashboard(self) -> DashboardOutput:
        """Active entity counts, recent production and recent variance average."""
        since = utcnow() - timedelta(days=DASHBOARD_RECENT_DAYS)

        recent_variances = BaseRepository(VarianceRecord, self._db).find_all(
            order_by=[VarianceRecord.variance_date.desc(), VarianceRecord.id.desc()],
            limit=Limits.SUMMARY_RECENT_RECORDS,
        )
        average = (
            sum(v.variance_percentage for v in recent_variances) / len(recent_variances)
            if recent_variances
            else 0.0
        )

        return DashboardOutput(
            counts=DashboardCounts(
                suppliers=BaseRepository(Supplier, self._db).count(is_active=True),
                materials=BaseRepository(RawMaterial, self._db).count(is_active=True),
                menu_items=BaseRepository(MenuItem, self._db).count(is_active=True),
                recent_production=BaseRepository(ProductionLog, self._db).count(
                    filters=[ProductionLog.production_date >= since]
                ),
            ),
            variance=DashboardVariance(
                average=round_money(average),
                recent_count=len(recent_variances),
            ),
        )
