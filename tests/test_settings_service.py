"""
Tests for business settings and overhead policy services.
"""

import pytest

from costflow_api.services.domain import OverheadPolicyService, SettingsService
from costflow_shared.config.constants import AllocationMethod
from costflow_shared.utils.exceptions import InvalidInputError, NotFoundError, ValidationError

PROFILE = {"business_name": "Warung Baru", "labor_rate_per_hour": 40_000, "currency": "IDR"}


class TestSettingsService:
    @pytest.fixture
    def service(self, db_session):
        return SettingsService(db_session)

    def test_status_before_init(self, service):
        status = service.status()

        assert status.initialized is False
        assert status.business_name is None

    def test_initialize_once(self, service):
        created = service.initialize(PROFILE)

        assert created.is_initialized is True
        assert service.status().initialized is True
        with pytest.raises(ValidationError):
            service.initialize(PROFILE)

    def test_labor_rate_defaults_to_zero(self, service):
        assert service.current_labor_rate() == 0.0

    def test_labor_rate_read_fresh(self, service):
        service.initialize(PROFILE)
        service.update({"labor_rate_per_hour": 45_000})

        assert service.current_labor_rate() == 45_000

    def test_negative_labor_rate(self, service):
        with pytest.raises(InvalidInputError):
            service.initialize({**PROFILE, "labor_rate_per_hour": -1})

    def test_get_before_init(self, service):
        with pytest.raises(NotFoundError):
            service.get()


class TestOverheadPolicyService:
    @pytest.fixture
    def service(self, db_session):
        return OverheadPolicyService(db_session)

    def test_no_policy(self, service):
        assert service.get_current() is None

    def test_new_policy_becomes_current(self, service, seed_overhead):
        service.create({"allocation_method": AllocationMethod.PER_UNIT, "allocation_rate": 5_000})

        current = service.get_current()
        assert current.allocation_method == AllocationMethod.PER_UNIT
        assert current.allocation_rate == 5_000

    @pytest.mark.parametrize(
        "payload",
        [
            {"allocation_method": "per_hour", "allocation_rate": 10},
            {"allocation_method": AllocationMethod.PERCENTAGE_LABOR, "allocation_rate": 150},
            {"allocation_method": AllocationMethod.PER_UNIT, "allocation_rate": -1},
        ],
    )
    def test_invalid_policy(self, service, payload):
        with pytest.raises(InvalidInputError):
            service.create(payload)
