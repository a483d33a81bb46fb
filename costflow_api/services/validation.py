"""
Per-operation input validation.

Each function receives the request payload as a dict (only the fields the
caller sent, for updates) and raises a single InvalidInputError listing
every violated field.

Usage:
    from costflow_api.services.validation import validate_material

    validate_material(body.model_dump(exclude_unset=True))
"""

from __future__ import annotations

from typing import Any, Mapping

from costflow_shared.config.constants import AllocationMethod, Limits
from costflow_shared.utils.validators import ViolationCollector


def _check_text(
    errors: ViolationCollector,
    data: Mapping[str, Any],
    field: str,
    max_length: int,
    *,
    required: bool = True,
) -> None:
    if field not in data:
        return
    value = data[field]
    if value is None or not str(value).strip():
        if required:
            errors.add(field, f"{field} must not be empty")
        return
    errors.check(
        len(value) <= max_length, field, f"{field} must be at most {max_length} characters"
    )


def _check_non_negative(
    errors: ViolationCollector,
    data: Mapping[str, Any],
    field: str,
    *,
    nullable: bool = False,
) -> None:
    if field not in data:
        return
    value = data[field]
    if value is None:
        if not nullable:
            errors.add(field, f"{field} is required")
        return
    errors.check(value >= 0, field, f"{field} must not be negative")


def _check_positive(errors: ViolationCollector, data: Mapping[str, Any], field: str) -> None:
    if field not in data:
        return
    value = data[field]
    errors.check(value is not None and value > 0, field, f"{field} must be greater than 0")


def validate_business_settings(data: Mapping[str, Any]) -> None:
    errors = ViolationCollector()
    _check_text(errors, data, "business_name", Limits.MAX_NAME_LENGTH)
    _check_non_negative(errors, data, "labor_rate_per_hour")
    _check_text(errors, data, "currency", 10)
    errors.raise_if_any(operation="business_settings")


def validate_overhead_config(data: Mapping[str, Any]) -> None:
    errors = ViolationCollector()
    method = data.get("allocation_method")
    errors.check(
        method in AllocationMethod.ALL,
        "allocation_method",
        f"allocation_method must be one of {', '.join(AllocationMethod.ALL)}",
    )
    rate = data.get("allocation_rate")
    if rate is None or rate < 0:
        errors.add("allocation_rate", "allocation_rate must not be negative")
    elif method in AllocationMethod.PERCENTAGE:
        errors.check(rate <= 100, "allocation_rate", "Percentage rate must be between 0 and 100")
    errors.raise_if_any(operation="overhead_config")


def validate_supplier(data: Mapping[str, Any]) -> None:
    errors = ViolationCollector()
    _check_text(errors, data, "name", Limits.MAX_NAME_LENGTH)
    errors.raise_if_any(operation="supplier")


def validate_material(data: Mapping[str, Any]) -> None:
    """
    Material rules: code, name and unit present; price not negative;
    yield in (0, 100].
    """
    errors = ViolationCollector()
    _check_text(errors, data, "code", Limits.MAX_CODE_LENGTH)
    _check_text(errors, data, "name", Limits.MAX_NAME_LENGTH)
    _check_text(errors, data, "unit", 30)
    if "current_price" in data:
        price = data["current_price"]
        errors.check(
            price is not None and price >= 0, "current_price", "current_price must not be negative"
        )
    if "yield_percentage" in data:
        value = data["yield_percentage"]
        errors.check(
            value is not None
            and Limits.MIN_YIELD_PERCENTAGE < value <= Limits.MAX_YIELD_PERCENTAGE,
            "yield_percentage",
            "yield_percentage must be greater than 0 and at most 100",
        )
    errors.raise_if_any(operation="material")


def validate_menu_item(data: Mapping[str, Any]) -> None:
    errors = ViolationCollector()
    _check_text(errors, data, "code", Limits.MAX_CODE_LENGTH)
    _check_text(errors, data, "name", Limits.MAX_NAME_LENGTH)
    _check_text(errors, data, "standard_portion_unit", 30)
    _check_positive(errors, data, "standard_portion")
    if "standard_labor_hours" in data:
        hours = data["standard_labor_hours"]
        errors.check(
            hours is not None and hours >= 0,
            "standard_labor_hours",
            "standard_labor_hours must not be negative",
        )
    errors.raise_if_any(operation="menu_item")


def validate_menu_pricing(data: Mapping[str, Any]) -> None:
    errors = ViolationCollector()
    _check_non_negative(errors, data, "selling_price")
    errors.raise_if_any(operation="menu_pricing")


def validate_recipe_detail(data: Mapping[str, Any]) -> None:
    errors = ViolationCollector()
    _check_text(errors, data, "unit", 30)
    if "quantity" in data:
        quantity = data["quantity"]
        errors.check(
            quantity is not None and quantity >= 0, "quantity", "quantity must not be negative"
        )
    errors.raise_if_any(operation="recipe_detail")


def validate_yield_test(data: Mapping[str, Any]) -> None:
    """ap_weight must be positive; ep_weight may exceed it but not be negative."""
    errors = ViolationCollector()
    _check_positive(errors, data, "ap_weight")
    if "ep_weight" in data:
        ep_weight = data["ep_weight"]
        errors.check(
            ep_weight is not None and ep_weight >= 0, "ep_weight", "ep_weight must not be negative"
        )
    errors.raise_if_any(operation="yield_test")


def validate_production_log(data: Mapping[str, Any]) -> None:
    errors = ViolationCollector()
    _check_positive(errors, data, "portions_produced")
    _check_non_negative(errors, data, "portions_sold", nullable=True)
    _check_non_negative(errors, data, "labor_hours_actual", nullable=True)
    errors.raise_if_any(operation="production_log")


def validate_production_detail(data: Mapping[str, Any]) -> None:
    errors = ViolationCollector()
    _check_text(errors, data, "unit", 30)
    for field in ("quantity_used", "unit_price"):
        if field in data:
            value = data[field]
            errors.check(value is not None and value >= 0, field, f"{field} must not be negative")
    errors.raise_if_any(operation="production_detail")
