"""
Variance Service.

Compares a production run against the current cost standard of its menu
item and appends a VarianceRecord.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session, selectinload

from costflow_api.models import ProductionLog, VarianceRecord
from costflow_api.services.base_service import BaseService
from costflow_api.services.costing import (
    VarianceBreakdown,
    VarianceSummary,
    analyze_variance,
    summarize_variances,
)
from costflow_api.services.crud.repository import BaseRepository, date_range_filters
from costflow_api.services.domain.cost_service import CostStandardService
from costflow_api.services.domain.settings_service import (
    BusinessSettingsProvider,
    OverheadPolicyProvider,
    OverheadPolicyService,
    SettingsService,
)
from costflow_shared.config.constants import VarianceType
from costflow_shared.config.logging import costing_logger as logger
from costflow_shared.config.settings import settings
from costflow_shared.utils.exceptions import NotFoundError


class VarianceService(BaseService[VarianceRecord]):
    """
    Business rules:
    - A run can only be analyzed once its menu item has a cost standard
    - The record is dated with the run's production_date
    - Every calculation appends; repeated analysis of a run keeps all records
    """

    def __init__(
        self,
        db: Session,
        *,
        settings_provider: BusinessSettingsProvider | None = None,
        overhead_provider: OverheadPolicyProvider | None = None,
    ):
        super().__init__(db, VarianceRecord)
        self._log_repo = BaseRepository(ProductionLog, db)
        self._settings_provider = settings_provider or SettingsService(db)
        self._overhead_provider = overhead_provider or OverheadPolicyService(db)

    def calculate(self, production_log_id: int) -> tuple[VarianceRecord, VarianceBreakdown]:
        """
        Raises:
            NotFoundError: If the production log does not exist.
            MissingCostStandardError: If the menu item has no cost standard.
        """
        log = self._log_repo.find_by_id(
            production_log_id, options=[selectinload(ProductionLog.details)]
        )
        if log is None:
            raise NotFoundError("Production log", production_log_id)

        cost_standard = CostStandardService(self._db).latest_for(log.menu_item_id)
        breakdown = analyze_variance(
            log,
            log.details,
            cost_standard,
            self._settings_provider.current_labor_rate(),
            self._overhead_provider.current_overhead_config(),
        )

        record = VarianceRecord(
            menu_item_id=log.menu_item_id,
            production_log_id=log.id,
            variance_date=log.production_date,
            standard_cost=breakdown.standard_cost,
            actual_cost=breakdown.actual_cost,
            variance_amount=breakdown.variance,
            variance_percentage=breakdown.variance_percentage,
            variance_type=VarianceType.MATERIAL_PRICE,
            notes=f"Variance for {log.portions_produced} portions",
        )
        self._repo.add(record)
        self._commit("save variance record", production_log_id=production_log_id)
        self._db.refresh(record)

        logger.info(
            "Variance calculated",
            production_log_id=production_log_id,
            menu_item_id=log.menu_item_id,
            variance=breakdown.variance,
            classification=breakdown.classification,
        )
        return record, breakdown

    def summary(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> VarianceSummary:
        records = self._repo.find_all(
            filters=date_range_filters(VarianceRecord.variance_date, start_date, end_date),
            order_by=[VarianceRecord.variance_date.desc(), VarianceRecord.id.desc()],
            options=[selectinload(VarianceRecord.menu_item)],
        )
        return summarize_variances(records)

    def history(self, menu_item_id: int, limit: int | None = None) -> list[VarianceRecord]:
        """Records for a menu item, newest variance_date first."""
        return list(
            self._repo.find_all(
                filters=[VarianceRecord.menu_item_id == menu_item_id],
                order_by=[VarianceRecord.variance_date.desc(), VarianceRecord.id.desc()],
                limit=limit or settings.variance_history_limit,
                options=[selectinload(VarianceRecord.menu_item)],
            )
        )
