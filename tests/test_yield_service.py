"""
Tests for YieldTestService: derivation, propagation and averages.
"""

from datetime import datetime, timedelta, timezone

import pytest

from costflow_api.models import RawMaterial
from costflow_api.services.domain import YieldTestService
from costflow_shared.utils.exceptions import InvalidInputError, NotFoundError

TEST_DATE = datetime(2026, 1, 10, 9, 0, tzinfo=timezone.utc)


class TestYieldTestService:
    @pytest.fixture
    def service(self, db_session):
        return YieldTestService(db_session)

    def _record(self, service, material_id, ap_weight, ep_weight, test_date=TEST_DATE):
        return service.create(
            {
                "raw_material_id": material_id,
                "test_date": test_date,
                "ap_weight": ap_weight,
                "ep_weight": ep_weight,
            }
        )

    def test_create_derives_and_propagates(self, service, db_session, seed_material):
        test = self._record(service, seed_material.id, 1000, 750)

        assert test.yield_percentage == pytest.approx(75)
        assert db_session.get(RawMaterial, seed_material.id).yield_percentage == pytest.approx(75)

    def test_last_write_wins_regardless_of_date(self, service, db_session, seed_material):
        self._record(service, seed_material.id, 1000, 900, TEST_DATE)
        self._record(service, seed_material.id, 1000, 600, TEST_DATE - timedelta(days=30))

        assert db_session.get(RawMaterial, seed_material.id).yield_percentage == pytest.approx(60)

    def test_update_recomputes(self, service, db_session, seed_material):
        test = self._record(service, seed_material.id, 1000, 750)

        updated = service.update(test.id, {"ep_weight": 500})

        assert updated.yield_percentage == pytest.approx(50)
        assert db_session.get(RawMaterial, seed_material.id).yield_percentage == pytest.approx(50)

    def test_yield_above_hundred_accepted(self, service, seed_material):
        test = self._record(service, seed_material.id, 1000, 1200)

        assert test.yield_percentage == pytest.approx(120)

    def test_zero_ap_weight_rejected(self, service, db_session, seed_material):
        with pytest.raises(InvalidInputError) as exc_info:
            self._record(service, seed_material.id, 0, 10)

        assert exc_info.value.violations[0].field == "ap_weight"
        assert db_session.get(RawMaterial, seed_material.id).yield_percentage == 80

    def test_unknown_material(self, service):
        with pytest.raises(NotFoundError):
            self._record(service, 999, 1000, 750)

    def test_delete_keeps_material_yield(self, service, db_session, seed_material):
        test = self._record(service, seed_material.id, 1000, 750)

        service.delete(test.id)

        assert db_session.get(RawMaterial, seed_material.id).yield_percentage == pytest.approx(75)

    def test_average_without_tests(self, service, seed_material):
        average = service.average_yield(seed_material.id)

        assert average.average_yield == 100
        assert average.test_count == 0

    def test_average_over_recent_tests(self, service, seed_material):
        self._record(service, seed_material.id, 1000, 700, TEST_DATE)
        self._record(service, seed_material.id, 1000, 800, TEST_DATE + timedelta(days=1))

        average = service.average_yield(seed_material.id)

        assert average.average_yield == pytest.approx(75)
        assert average.test_count == 2
        assert average.latest_yield == pytest.approx(80)

    def test_list_by_material(self, service, seed_material):
        self._record(service, seed_material.id, 1000, 700)

        items, total = service.list_tests(raw_material_id=seed_material.id)

        assert total == 1
        assert items[0].raw_material_id == seed_material.id
