"""
Business settings router.
One-time initialization plus read/update of the labor rate and business profile.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from costflow_api.services.domain import SettingsService
from costflow_shared.infrastructure.db import get_db
from costflow_shared.utils.schemas import (
    BusinessSettingsInit,
    BusinessSettingsOutput,
    BusinessSettingsUpdate,
    SettingsStatusOutput,
)


router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/status", response_model=SettingsStatusOutput)
def get_status(db: Session = Depends(get_db)) -> SettingsStatusOutput:
    """Whether the application has been initialized."""
    return SettingsService(db).status()


@router.post("/init", response_model=BusinessSettingsOutput, status_code=status.HTTP_201_CREATED)
def initialize(
    body: BusinessSettingsInit,
    db: Session = Depends(get_db),
) -> BusinessSettingsOutput:
    """Create the business settings. Fails once the application is initialized."""
    return SettingsService(db).initialize(body.model_dump())


@router.get("", response_model=BusinessSettingsOutput)
def get_settings(db: Session = Depends(get_db)) -> BusinessSettingsOutput:
    return SettingsService(db).get()


@router.put("", response_model=BusinessSettingsOutput)
def update_settings(
    body: BusinessSettingsUpdate,
    db: Session = Depends(get_db),
) -> BusinessSettingsOutput:
    return SettingsService(db).update(body.model_dump(exclude_unset=True))
