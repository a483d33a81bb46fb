"""
Repository Pattern for database access.

Provides a clean abstraction layer between business logic and data access.

Usage:
    from costflow_api.services.crud.repository import BaseRepository

    material_repo = BaseRepository(RawMaterial, db)

    materials = material_repo.find_all(
        filters=[RawMaterial.category == "Meat"],
        order_by=RawMaterial.name,
        limit=20,
        offset=0,
    )
    material = material_repo.find_by_id(42)
    total = material_repo.count(filters=[RawMaterial.category == "Meat"])

    # Current snapshot: newest effective_date, ties broken by highest id
    standard = cost_repo.find_latest(
        CostStandard.effective_date,
        filters=[CostStandard.menu_item_id == 7],
    )
"""

from __future__ import annotations

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import select, func, or_, exists as sql_exists
from sqlalchemy.orm import Session
from sqlalchemy.sql import ColumnElement, Select

from costflow_api.models import Base
from costflow_shared.utils.validators import escape_like_pattern

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Query and session helpers for one model.

    `filters` arguments are SQLAlchemy boolean expressions combined with AND.
    `is_active` filters on the active flag when the model has one;
    None means both active and inactive rows.
    """

    def __init__(self, model: type[ModelT], session: Session):
        self._model = model
        self._session = session

    def _base_query(self) -> Select:
        return select(self._model)

    def _apply_filters(
        self,
        query: Select,
        filters: Sequence[ColumnElement[bool]] | None,
        is_active: bool | None,
    ) -> Select:
        if filters:
            query = query.where(*filters)
        if is_active is not None and hasattr(self._model, "is_active"):
            query = query.where(self._model.is_active.is_(is_active))
        return query

    def _apply_options(self, query: Select, options: list[Any] | None) -> Select:
        """Apply eager loading options."""
        if options:
            query = query.options(*options)
        return query

    def find_by_id(
        self,
        entity_id: int,
        *,
        options: list[Any] | None = None,
    ) -> ModelT | None:
        """
        Find entity by primary key, active or not.

        Returns:
            Entity or None if not found.
        """
        query = self._base_query().where(self._model.id == entity_id)
        query = self._apply_options(query, options)
        return self._session.scalar(query)

    def find_all(
        self,
        *,
        filters: Sequence[ColumnElement[bool]] | None = None,
        is_active: bool | None = None,
        options: list[Any] | None = None,
        limit: int | None = None,
        offset: int | None = None,
        order_by: Any | Sequence[Any] | None = None,
    ) -> Sequence[ModelT]:
        """
        Find entities matching all filters.

        Args:
            filters: Boolean expressions combined with AND.
            is_active: Restrict to active (True) or inactive (False) rows.
            options: SQLAlchemy loader options.
            limit: Maximum number of results.
            offset: Number of results to skip.
            order_by: Column, expression or list of them.

        Returns:
            Sequence of entities.
        """
        query = self._apply_filters(self._base_query(), filters, is_active)
        query = self._apply_options(query, options)

        if order_by is not None:
            if isinstance(order_by, (list, tuple)):
                query = query.order_by(*order_by)
            else:
                query = query.order_by(order_by)
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        return self._session.scalars(query).all()

    def find_latest(
        self,
        date_column: Any,
        *,
        filters: Sequence[ColumnElement[bool]] | None = None,
        options: list[Any] | None = None,
    ) -> ModelT | None:
        """
        Newest row by date_column; rows sharing a date resolve to the highest id.
        """
        query = self._apply_filters(self._base_query(), filters, None)
        query = self._apply_options(query, options)
        query = query.order_by(date_column.desc(), self._model.id.desc()).limit(1)
        return self._session.scalar(query)

    def find_one_by(self, *filters: ColumnElement[bool]) -> ModelT | None:
        """First row matching the filters, lowest id first."""
        query = self._apply_filters(self._base_query(), filters, None)
        query = query.order_by(self._model.id).limit(1)
        return self._session.scalar(query)

    def count(
        self,
        *,
        filters: Sequence[ColumnElement[bool]] | None = None,
        is_active: bool | None = None,
    ) -> int:
        """Count entities matching all filters."""
        query = select(func.count()).select_from(self._model)
        query = self._apply_filters(query, filters, is_active)
        return self._session.scalar(query) or 0

    def exists(self, entity_id: int) -> bool:
        """Check if entity exists by ID."""
        query = select(sql_exists().where(self._model.id == entity_id))
        return self._session.scalar(query) or False

    def distinct_values(self, column: Any, *, is_active: bool | None = True) -> list[Any]:
        """Sorted distinct non-null values of a column."""
        query = select(column).where(column.is_not(None)).distinct()
        query = self._apply_filters(query, None, is_active)
        values = self._session.scalars(query).all()
        return sorted(v for v in values if v)

    def add(self, entity: ModelT) -> ModelT:
        """Add entity to session (not committed)."""
        self._session.add(entity)
        return entity

    def add_all(self, entities: Sequence[ModelT]) -> Sequence[ModelT]:
        """Add multiple entities to session (not committed)."""
        self._session.add_all(entities)
        return entities

    def delete(self, entity: ModelT) -> None:
        """Delete entity from session (not committed)."""
        self._session.delete(entity)


def search_filter(term: str | None, *columns: Any) -> ColumnElement[bool] | None:
    """
    Case-insensitive substring match across columns, or None for an empty term.

    Usage:
        cond = search_filter(search, RawMaterial.name, RawMaterial.code)
    """
    if not term:
        return None
    pattern = f"%{escape_like_pattern(term)}%"
    return or_(*(column.ilike(pattern, escape="\\") for column in columns))


def date_range_filters(
    column: Any,
    start: Any | None = None,
    end: Any | None = None,
) -> list[ColumnElement[bool]]:
    """Inclusive [start, end] bounds on a date column; missing bounds are open."""
    filters = []
    if start is not None:
        filters.append(column >= start)
    if end is not None:
        filters.append(column <= end)
    return filters
