"""
Shared validators for input sanitization.
"""

from costflow_shared.utils.exceptions import FieldViolation, InvalidInputError


def escape_like_pattern(value: str) -> str:
    """
    Escape special characters in LIKE patterns.

    SQL LIKE uses % and _ as wildcards. Escaping them keeps a search term
    literal and avoids accidental full-table matches.
    """
    if not value:
        return value

    # Escape the escape character first, then the wildcards
    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


class ViolationCollector:
    """
    Accumulates field violations and raises them together.

    Usage:
        errors = ViolationCollector()
        errors.check(ap_weight > 0, "ap_weight", "must be greater than 0")
        errors.check(ep_weight >= 0, "ep_weight", "must not be negative")
        errors.raise_if_any()
    """

    def __init__(self) -> None:
        self._violations: list[FieldViolation] = []

    def check(self, condition: bool, field: str, message: str) -> None:
        if not condition:
            self._violations.append(FieldViolation(field, message))

    def add(self, field: str, message: str) -> None:
        self._violations.append(FieldViolation(field, message))

    @property
    def violations(self) -> list[FieldViolation]:
        return list(self._violations)

    def raise_if_any(self, **log_context) -> None:
        if self._violations:
            raise InvalidInputError(self._violations, **log_context)
