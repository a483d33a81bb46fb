"""
Property-based tests for the costing engine with Hypothesis.
"""

import pytest
from hypothesis import assume, given, settings, strategies as st

from costflow_api.models import (
    CostStandard,
    MenuItem,
    OverheadConfig,
    ProductionLog,
    ProductionLogDetail,
    RawMaterial,
    RecipeDetail,
)
from costflow_api.services.costing import analyze_variance, calculate_cost_standard, compute_yield
from costflow_shared.config.constants import AllocationMethod, VarianceClass
from costflow_shared.utils.money import round_money


weights = st.floats(min_value=0.001, max_value=1e6, allow_nan=False, allow_infinity=False)
amounts = st.floats(min_value=0, max_value=1e7, allow_nan=False, allow_infinity=False)
methods = st.sampled_from(AllocationMethod.ALL)


class TestYieldProperties:
    @given(ap=weights, ep=st.floats(min_value=0, max_value=1e6, allow_nan=False))
    @settings(max_examples=100)
    def test_yield_is_ep_over_ap(self, ap, ep):
        """Property: yield == ep / ap * 100."""
        assert compute_yield(ap, ep) == pytest.approx((ep / ap) * 100)

    @given(weight=weights)
    def test_equal_weights_yield_100(self, weight):
        assert compute_yield(weight, weight) == pytest.approx(100)


class TestCostStandardProperties:
    @given(
        portion=st.integers(min_value=1, max_value=500),
        labor_hours=st.floats(min_value=0, max_value=100, allow_nan=False),
        labor_rate=amounts,
        lines=st.lists(
            st.tuples(
                st.floats(min_value=0, max_value=1000, allow_nan=False),  # quantity
                amounts,  # price
                st.floats(min_value=1, max_value=100, allow_nan=False),  # yield
            ),
            max_size=8,
        ),
        method=methods,
        rate=st.floats(min_value=0, max_value=100, allow_nan=False),
    )
    @settings(max_examples=100)
    def test_total_is_sum_of_components(self, portion, labor_hours, labor_rate, lines, method, rate):
        """Property: total = material + labor + overhead; per portion = total / portion."""
        menu_item = MenuItem(
            id=1, code="X", name="X", standard_portion=portion,
            standard_portion_unit="plate", standard_labor_hours=labor_hours,
        )
        recipe = []
        for i, (quantity, price, yield_percentage) in enumerate(lines):
            material = RawMaterial(
                id=i + 1, code=f"M{i}", name=f"M{i}", unit="kg",
                current_price=price, yield_percentage=yield_percentage,
            )
            recipe.append(RecipeDetail(raw_material=material, quantity=quantity, unit="kg"))
        config = OverheadConfig(allocation_method=method, allocation_rate=rate)

        breakdown = calculate_cost_standard(menu_item, recipe, labor_rate, config)

        components = breakdown.material_cost + breakdown.labor_cost + breakdown.overhead_cost
        assert breakdown.total_cost == pytest.approx(components, rel=1e-9, abs=1e-9)
        assert breakdown.cost_per_portion == pytest.approx(breakdown.total_cost / portion, rel=1e-9, abs=1e-9)
        assert breakdown.material_cost >= 0


class TestVarianceProperties:
    @given(
        cost_per_portion=amounts,
        portions=st.integers(min_value=1, max_value=1000),
        subtotals=st.lists(amounts, max_size=6),
    )
    @settings(max_examples=100)
    def test_sign_matches_classification(self, cost_per_portion, portions, subtotals):
        """Property: negative variance is favorable, positive is unfavorable."""
        standard = CostStandard(
            menu_item_id=1, material_cost=0, labor_cost=0, overhead_cost=0,
            total_cost=cost_per_portion, cost_per_portion=cost_per_portion,
        )
        log = ProductionLog(id=1, menu_item_id=1, portions_produced=portions, labor_hours_actual=0)
        details = [
            ProductionLogDetail(quantity_used=1, unit="kg", unit_price=s, subtotal=s)
            for s in subtotals
        ]

        breakdown = analyze_variance(log, details, standard, 0, None)

        assume(abs(breakdown.variance) > 1e-6)
        if breakdown.actual_cost < breakdown.standard_cost:
            assert breakdown.classification == VarianceClass.FAVORABLE
        else:
            assert breakdown.classification == VarianceClass.UNFAVORABLE


class TestRoundingProperties:
    @given(value=st.floats(min_value=-1e9, max_value=1e9, allow_nan=False))
    def test_round_money_within_half_cent(self, value):
        assert abs(round_money(value) - value) <= 0.005 + 1e-6
