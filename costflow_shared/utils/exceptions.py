"""
HTTP-mapped domain errors.

Raising one logs it once, at construction, with its context. FastAPI turns
it into a `{"detail": ...}` response with the status code below.

Usage:
    from costflow_shared.utils.exceptions import NotFoundError, InvalidInputError

    raise NotFoundError("Menu item", menu_item_id)
    raise InvalidInputError([FieldViolation("ap_weight", "must be greater than 0")])
    raise MissingCostStandardError(menu_item_id)
"""

from dataclasses import asdict, dataclass
from typing import Any

from fastapi import HTTPException, status

from costflow_shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """Root of every error the API reports to callers."""

    def __init__(
        self,
        status_code: int,
        detail: Any,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(str(detail), status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """404 for an id that matches no row."""

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with ID {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


class MissingCostStandardError(AppException):
    """No cost standard has been calculated for the menu item yet."""

    def __init__(self, menu_item_id: int | None = None, **log_context: Any):
        self.menu_item_id = menu_item_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cost standard not found. Please calculate cost standard first.",
            log_level="warning",
            menu_item_id=menu_item_id,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """400 for a request that conflicts with current state."""

    def __init__(self, detail: Any, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


@dataclass(frozen=True)
class FieldViolation:
    """One violated input rule."""

    field: str
    message: str


class InvalidInputError(ValidationError):
    """
    Malformed or out-of-range input.

    Lists every violated field so callers can fix them in one round trip.
    """

    def __init__(self, violations: list[FieldViolation], **log_context: Any):
        self.violations = list(violations)
        fields = ", ".join(v.field for v in self.violations)
        detail = {
            "message": f"Invalid input: {fields}",
            "violations": [asdict(v) for v in self.violations],
        }
        super().__init__(detail, fields=fields, **log_context)

    @classmethod
    def single(cls, field: str, message: str, **log_context: Any) -> "InvalidInputError":
        return cls([FieldViolation(field, message)], **log_context)


class DuplicateEntityError(ValidationError):
    """Entity with the same unique key already exists."""

    def __init__(self, entity: str, identifier: str | None = None, **log_context: Any):
        if identifier:
            detail = f"{entity} code '{identifier}' already exists"
        else:
            detail = f"{entity} already exists"

        super().__init__(detail, entity=entity, identifier=identifier, **log_context)


# =============================================================================
# 422 Unprocessable Entity Errors
# =============================================================================


class InvalidMaterialYieldError(AppException):
    """
    A recipe references a material whose yield percentage makes costing undefined.
    """

    def __init__(
        self,
        material_id: int | None,
        material_code: str | None = None,
        yield_percentage: float | None = None,
        **log_context: Any,
    ):
        self.material_id = material_id
        self.material_code = material_code
        label = material_code or material_id
        detail = (
            f"Material {label} has yield percentage {yield_percentage}; "
            "correct the material before calculating costs"
        )
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            log_level="warning",
            material_id=material_id,
            material_code=material_code,
            yield_percentage=yield_percentage,
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """500; logged at error level."""

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """A commit failed and was rolled back."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error while trying to {operation}. Please try again."
        super().__init__(detail, operation=operation, **log_context)
