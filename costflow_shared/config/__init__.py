"""
Configuration module: Settings, logging, constants.
"""

from costflow_shared.config.settings import settings, DATABASE_URL
from costflow_shared.config.logging import get_logger, setup_logging
from costflow_shared.config.constants import (
    AllocationMethod,
    VarianceClass,
    VarianceType,
    Limits,
)

__all__ = [
    # settings
    "settings",
    "DATABASE_URL",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "AllocationMethod",
    "VarianceClass",
    "VarianceType",
    "Limits",
]
