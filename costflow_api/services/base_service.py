"""
Service base classes.

Routers stay thin and call a service per request. Services own the
business rules and the commit; repositories build the queries; pydantic
output schemas are what leaves the service.

Usage:
    from costflow_api.services.base_service import BaseCRUDService

    class SupplierService(BaseCRUDService[Supplier, SupplierOutput]):
        def __init__(self, db: Session):
            super().__init__(
                db=db,
                model=Supplier,
                output_schema=SupplierOutput,
                entity_name="Supplier",
                dependent_column=RawMaterial.supplier_id,
            )
"""

from __future__ import annotations

from abc import ABC
from typing import Any, Generic, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from costflow_api.models import Base
from costflow_api.services.crud.repository import BaseRepository
from costflow_api.services.crud.soft_delete import DeleteOutcome, deactivate_or_delete
from costflow_shared.config.logging import get_logger
from costflow_shared.infrastructure.db import safe_commit
from costflow_shared.utils.exceptions import DatabaseError, DuplicateEntityError, NotFoundError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
OutputT = TypeVar("OutputT", bound=BaseModel)


class BaseService(ABC, Generic[ModelT]):
    """Session, repository and commit handling shared by every domain service."""

    def __init__(self, db: Session, model: Type[ModelT]):
        self._db = db
        self._model = model
        self._repo = BaseRepository(model, db)

    def _commit(self, operation: str, **log_context: Any) -> None:
        """Commit the unit of work, mapping storage failures to DatabaseError."""
        try:
            safe_commit(self._db)
        except SQLAlchemyError as e:
            logger.error(f"Failed to {operation}", error=str(e), **log_context)
            raise DatabaseError(operation, **log_context) from e


class BaseCRUDService(BaseService[ModelT], Generic[ModelT, OutputT]):
    """
    Create, read, update and delete for one master-data entity.

    Subclasses configure:
    - code_field: unique business key checked before create/update
    - dependent_column: foreign key that makes delete deactivate instead of remove
    """

    def __init__(
        self,
        db: Session,
        model: Type[ModelT],
        output_schema: Type[OutputT],
        entity_name: str,
        *,
        code_field: str | None = None,
        dependent_column: Any | None = None,
    ):
        super().__init__(db, model)
        self._output_schema = output_schema
        self._entity_name = entity_name
        self._code_field = code_field
        self._dependent_column = dependent_column

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_entity(self, entity_id: int, *, options: list[Any] | None = None) -> ModelT:
        """ORM row by id; NotFoundError when missing."""
        entity = self._repo.find_by_id(entity_id, options=options)
        if entity is None:
            raise NotFoundError(self._entity_name, entity_id)
        return entity

    def get_by_id(self, entity_id: int) -> OutputT:
        return self.to_output(self.get_entity(entity_id))

    def list_page(
        self,
        *,
        filters: Sequence[Any] | None = None,
        is_active: bool | None = None,
        limit: int | None = None,
        offset: int | None = None,
        order_by: Any | None = None,
        options: list[Any] | None = None,
    ) -> tuple[list[OutputT], int]:
        """
        One page of entities plus the total matching count.
        """
        entities = self._repo.find_all(
            filters=filters,
            is_active=is_active,
            limit=limit,
            offset=offset,
            order_by=order_by,
            options=options,
        )
        total = self._repo.count(filters=filters, is_active=is_active)
        return [self.to_output(e) for e in entities], total

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(self, data: dict[str, Any]) -> OutputT:
        """
        Create new entity.

        Raises:
            InvalidInputError: If data is invalid.
            DuplicateEntityError: If the business code is taken.
            DatabaseError: If creation fails.
        """
        self._validate_create(data)
        self._check_unique_code(data)

        entity = self._model(**data)
        self._repo.add(entity)
        self._commit(f"create {self._entity_name.lower()}")
        self._db.refresh(entity)

        logger.info(f"{self._entity_name} created", entity_id=entity.id)
        return self.to_output(entity)

    def update(self, entity_id: int, data: dict[str, Any]) -> OutputT:
        """
        Update existing entity with the provided fields.

        Raises:
            NotFoundError: If entity not found.
            InvalidInputError: If data is invalid.
            DuplicateEntityError: If the new business code is taken.
            DatabaseError: If update fails.
        """
        entity = self.get_entity(entity_id)

        self._validate_update(entity, data)
        self._check_unique_code(data, exclude_id=entity_id)

        for field_name, value in data.items():
            if hasattr(entity, field_name):
                setattr(entity, field_name, value)

        self._commit(f"update {self._entity_name.lower()}", entity_id=entity_id)
        self._db.refresh(entity)

        self._after_update(entity, data)
        return self.to_output(entity)

    def delete(self, entity_id: int) -> DeleteOutcome:
        """
        Remove entity: deactivated when referenced, deleted otherwise.

        Raises:
            NotFoundError: If entity not found.
        """
        entity = self.get_entity(entity_id)

        if self._dependent_column is not None:
            return deactivate_or_delete(self._db, entity, self._dependent_column)

        self._repo.delete(entity)
        self._commit(f"delete {self._entity_name.lower()}", entity_id=entity_id)
        logger.info(f"{self._entity_name} deleted", entity_id=entity_id)
        return "deleted"

    # =========================================================================
    # Transformation
    # =========================================================================

    def to_output(self, entity: ModelT) -> OutputT:
        return self._output_schema.model_validate(entity)

    # =========================================================================
    # Hooks
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> None:
        """Raises InvalidInputError if data is invalid."""
        pass

    def _validate_update(self, entity: ModelT, data: dict[str, Any]) -> None:
        """Raises InvalidInputError if data is invalid."""
        pass

    def _after_update(self, entity: ModelT, changes: dict[str, Any]) -> None:
        pass

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _check_unique_code(self, data: dict[str, Any], exclude_id: int | None = None) -> None:
        if self._code_field is None or not data.get(self._code_field):
            return
        column = getattr(self._model, self._code_field)
        filters = [column == data[self._code_field]]
        if exclude_id is not None:
            filters.append(self._model.id != exclude_id)
        if self._repo.count(filters=filters) > 0:
            raise DuplicateEntityError(self._entity_name, data[self._code_field])
