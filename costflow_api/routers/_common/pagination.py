"""
Standardized Pagination for all list endpoints.

Usage:
    from costflow_api.routers._common.pagination import Pagination, get_pagination

    @router.get("/suppliers")
    def list_suppliers(
        pagination: Pagination = Depends(get_pagination),
        db: Session = Depends(get_db),
    ):
        items, total = SupplierService(db).list_suppliers(
            limit=pagination.limit, offset=pagination.offset
        )
        return PaginatedResponse(items=items, pagination=pagination, total=total).to_dict()
"""

from dataclasses import dataclass
from typing import Any

from fastapi import Query

from costflow_shared.config.settings import settings


@dataclass
class Pagination:
    """
    Pagination parameters with validation.

    Attributes:
        limit: Maximum items per page (1 to max_limit)
        offset: Number of items to skip
        max_limit: Maximum allowed limit
    """

    limit: int
    offset: int
    max_limit: int = settings.max_page_size

    def __post_init__(self):
        self.limit = min(max(1, self.limit), self.max_limit)
        self.offset = max(0, self.offset)

    @property
    def page(self) -> int:
        """Current page number (1-indexed)."""
        return (self.offset // self.limit) + 1

    def to_dict(self, total: int | None = None) -> dict[str, Any]:
        """
        Pagination metadata for a response.

        Args:
            total: Total count of matching items (optional)
        """
        result = {
            "limit": self.limit,
            "offset": self.offset,
            "page": self.page,
        }

        if total is not None:
            result["total"] = total
            result["pages"] = (total + self.limit - 1) // self.limit
            result["has_next"] = self.offset + self.limit < total
            result["has_prev"] = self.offset > 0

        return result


def get_pagination(
    limit: int = Query(
        default=settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Maximum number of items to return",
    ),
    offset: int = Query(
        default=0,
        ge=0,
        description="Number of items to skip",
    ),
) -> Pagination:
    """FastAPI dependency for pagination."""
    return Pagination(limit=limit, offset=offset)


@dataclass
class PaginatedResponse:
    """Wrapper for paginated responses."""

    items: list[Any]
    pagination: Pagination
    total: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": self.items,
            "pagination": self.pagination.to_dict(self.total),
        }
