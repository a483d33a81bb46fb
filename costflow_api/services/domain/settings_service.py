"""
Business Settings and Overhead Policy Services.

Usage:
    from costflow_api.services.domain import SettingsService, OverheadPolicyService

    SettingsService(db).initialize({"business_name": "Warung", "labor_rate_per_hour": 50000})
    rate = SettingsService(db).current_labor_rate()
    config = OverheadPolicyService(db).current_overhead_config()
"""

from __future__ import annotations

from typing import Any, Protocol

from sqlalchemy.orm import Session

from costflow_api.models import BusinessSettings, OverheadConfig
from costflow_api.models.base import utcnow
from costflow_api.services.base_service import BaseService
from costflow_api.services.validation import validate_business_settings, validate_overhead_config
from costflow_shared.config.logging import get_logger
from costflow_shared.utils.exceptions import NotFoundError, ValidationError
from costflow_shared.utils.schemas import (
    BusinessSettingsOutput,
    OverheadConfigOutput,
    SettingsStatusOutput,
)

logger = get_logger(__name__)


class BusinessSettingsProvider(Protocol):
    def current_labor_rate(self) -> float: ...


class OverheadPolicyProvider(Protocol):
    def current_overhead_config(self) -> OverheadConfig | None: ...


class SettingsService(BaseService[BusinessSettings]):
    """
    Singleton business profile.

    Business rules:
    - Initialization happens once; a second init is rejected
    - The labor rate is read fresh for every calculation; 0 when unset
    """

    def __init__(self, db: Session):
        super().__init__(db, BusinessSettings)

    def _first(self) -> BusinessSettings | None:
        return self._repo.find_one_by()

    def status(self) -> SettingsStatusOutput:
        current = self._first()
        return SettingsStatusOutput(
            initialized=bool(current and current.is_initialized),
            business_name=current.business_name if current else None,
        )

    def get(self) -> BusinessSettingsOutput:
        current = self._first()
        if current is None:
            raise NotFoundError("Business settings")
        return BusinessSettingsOutput.model_validate(current)

    def initialize(self, data: dict[str, Any]) -> BusinessSettingsOutput:
        """
        Raises:
            ValidationError: If the application is already initialized.
            InvalidInputError: If data is invalid.
        """
        validate_business_settings(data)

        current = self._first()
        if current is not None and current.is_initialized:
            raise ValidationError("Application already initialized")

        if current is None:
            current = BusinessSettings(**data, is_initialized=True)
            self._repo.add(current)
        else:
            for field_name, value in data.items():
                setattr(current, field_name, value)
            current.is_initialized = True

        self._commit("initialize business settings")
        self._db.refresh(current)
        logger.info("Business settings initialized", business_name=current.business_name)
        return BusinessSettingsOutput.model_validate(current)

    def update(self, data: dict[str, Any]) -> BusinessSettingsOutput:
        """
        Raises:
            NotFoundError: If settings were never initialized.
        """
        current = self._first()
        if current is None:
            raise NotFoundError("Business settings")

        validate_business_settings(data)
        for field_name, value in data.items():
            setattr(current, field_name, value)

        self._commit("update business settings")
        self._db.refresh(current)
        return BusinessSettingsOutput.model_validate(current)

    def current_labor_rate(self) -> float:
        current = self._first()
        if current is None or current.labor_rate_per_hour is None:
            return 0.0
        return current.labor_rate_per_hour


class OverheadPolicyService(BaseService[OverheadConfig]):
    """
    Append-only overhead policy history.

    The current policy is the row with the latest effective_date.
    """

    def __init__(self, db: Session):
        super().__init__(db, OverheadConfig)

    def current_overhead_config(self) -> OverheadConfig | None:
        return self._repo.find_latest(OverheadConfig.effective_date)

    def get_current(self) -> OverheadConfigOutput | None:
        config = self.current_overhead_config()
        return OverheadConfigOutput.model_validate(config) if config else None

    def create(self, data: dict[str, Any]) -> OverheadConfigOutput:
        """
        Append a new policy effective now.

        Raises:
            InvalidInputError: If method or rate is invalid.
        """
        validate_overhead_config(data)

        config = OverheadConfig(
            allocation_method=data["allocation_method"],
            allocation_rate=data["allocation_rate"],
            notes=data.get("notes"),
            effective_date=utcnow(),
        )
        self._repo.add(config)
        self._commit("create overhead configuration")
        self._db.refresh(config)

        logger.info(
            "Overhead policy changed",
            allocation_method=config.allocation_method,
            allocation_rate=config.allocation_rate,
        )
        return OverheadConfigOutput.model_validate(config)
