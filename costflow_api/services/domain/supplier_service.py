"""
Supplier Service.

Usage:
    from costflow_api.services.domain import SupplierService

    service = SupplierService(db)
    items, total = service.list_suppliers(search="farm", limit=20, offset=0)
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from costflow_api.models import RawMaterial, Supplier
from costflow_api.services.base_service import BaseCRUDService
from costflow_api.services.crud.repository import search_filter
from costflow_api.services.validation import validate_supplier
from costflow_shared.utils.schemas import SupplierOutput


class SupplierService(BaseCRUDService[Supplier, SupplierOutput]):
    """
    Business rules:
    - Suppliers still referenced by materials are deactivated, not deleted
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Supplier,
            output_schema=SupplierOutput,
            entity_name="Supplier",
            dependent_column=RawMaterial.supplier_id,
        )

    def list_suppliers(
        self,
        *,
        search: str | None = None,
        is_active: bool | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> tuple[list[SupplierOutput], int]:
        filters = []
        cond = search_filter(search, Supplier.name, Supplier.contact_person)
        if cond is not None:
            filters.append(cond)
        return self.list_page(
            filters=filters,
            is_active=is_active,
            limit=limit,
            offset=offset,
            order_by=Supplier.name,
        )

    def _validate_create(self, data: dict[str, Any]) -> None:
        validate_supplier(data)

    def _validate_update(self, entity: Supplier, data: dict[str, Any]) -> None:
        validate_supplier(data)
