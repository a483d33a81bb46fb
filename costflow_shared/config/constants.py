"""
Centralized constants for the backend application.
Avoid magic strings and repeated constants.

Usage:
    from costflow_shared.config.constants import AllocationMethod, VarianceClass

    if config.allocation_method == AllocationMethod.PER_UNIT:
        ...
"""

from typing import Final


# =============================================================================
# Overhead Allocation
# =============================================================================


class AllocationMethod:
    """Overhead allocation method constants."""

    PERCENTAGE_LABOR: Final[str] = "percentage_labor"
    PERCENTAGE_MATERIAL: Final[str] = "percentage_material"
    PER_UNIT: Final[str] = "per_unit"

    ALL: Final[list[str]] = [PERCENTAGE_LABOR, PERCENTAGE_MATERIAL, PER_UNIT]
    PERCENTAGE: Final[list[str]] = [PERCENTAGE_LABOR, PERCENTAGE_MATERIAL]


# =============================================================================
# Variance
# =============================================================================


class VarianceClass:
    """Variance classification labels."""

    FAVORABLE: Final[str] = "favorable"
    UNFAVORABLE: Final[str] = "unfavorable"
    ON_TARGET: Final[str] = "on target"

    ALL: Final[list[str]] = [FAVORABLE, UNFAVORABLE, ON_TARGET]


class VarianceType:
    """Variance record type labels. Only one is produced today."""

    MATERIAL_PRICE: Final[str] = "material_price"


# Absolute difference below which a variance counts as zero
VARIANCE_ZERO_TOLERANCE: Final[float] = 1e-9


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # Yield percentage accepted on material create/update: (0, 100]
    MIN_YIELD_PERCENTAGE: Final[float] = 0.0
    MAX_YIELD_PERCENTAGE: Final[float] = 100.0
    DEFAULT_YIELD_PERCENTAGE: Final[float] = 100.0

    # Monthly summary period bounds
    MIN_YEAR: Final[int] = 1900
    MAX_YEAR: Final[int] = 9999

    # String lengths
    MAX_CODE_LENGTH: Final[int] = 50
    MAX_NAME_LENGTH: Final[int] = 200

    # Number of yield tests averaged per material
    YIELD_AVERAGE_WINDOW: Final[int] = 10

    # Number of recent records shown in summaries
    SUMMARY_RECENT_RECORDS: Final[int] = 10


# Days counted as "recent production" on the dashboard
DASHBOARD_RECENT_DAYS: Final[int] = 7

DEFAULT_CURRENCY: Final[str] = "IDR"
