"""
Utilities module: Exceptions, validators, money rounding.
"""

from costflow_shared.utils.exceptions import (
    NotFoundError,
    ValidationError,
    InvalidInputError,
    FieldViolation,
    DuplicateEntityError,
    InvalidMaterialYieldError,
    MissingCostStandardError,
    DatabaseError,
)
from costflow_shared.utils.validators import (
    escape_like_pattern,
    ViolationCollector,
)
from costflow_shared.utils.money import round_money

__all__ = [
    "NotFoundError",
    "ValidationError",
    "InvalidInputError",
    "FieldViolation",
    "DuplicateEntityError",
    "InvalidMaterialYieldError",
    "MissingCostStandardError",
    "DatabaseError",
    "escape_like_pattern",
    "ViolationCollector",
    "round_money",
]
