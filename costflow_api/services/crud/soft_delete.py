"""
Delete policy shared by entities that other records may still reference.

An entity with dependents is deactivated (is_active = False) so history
stays intact; an entity nobody references is removed.
"""

from __future__ import annotations

from typing import Any, Literal, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from costflow_api.models import AuditMixin
from costflow_shared.config.logging import get_logger
from costflow_shared.infrastructure.db import safe_commit

logger = get_logger(__name__)

T = TypeVar("T", bound=AuditMixin)

DeleteOutcome = Literal["deactivated", "deleted"]


def count_dependents(db: Session, dependent_column: Any, entity_id: int) -> int:
    """Count rows whose foreign key column points at entity_id."""
    query = select(func.count()).where(dependent_column == entity_id)
    return db.scalar(query) or 0


def deactivate_or_delete(
    db: Session,
    entity: T,
    dependent_column: Any,
) -> DeleteOutcome:
    """
    Deactivate the entity if any row references it, otherwise delete it.

    Idempotent: deactivating an already inactive entity is a no-op update.

    Args:
        db: Database session
        entity: Entity to remove (must inherit from AuditMixin)
        dependent_column: Foreign key column of the dependent table

    Returns:
        "deactivated" or "deleted"

    Raises:
        Exception: Re-raises any exception after rollback
    """
    entity_id = entity.id
    dependents = count_dependents(db, dependent_column, entity_id)

    if dependents > 0:
        entity.deactivate()
        outcome: DeleteOutcome = "deactivated"
    else:
        db.delete(entity)
        outcome = "deleted"

    safe_commit(db)

    logger.info(
        f"{entity.__class__.__name__} {outcome}",
        entity_id=entity_id,
        dependents=dependents,
    )
    return outcome
