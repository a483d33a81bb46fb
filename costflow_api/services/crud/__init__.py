"""
CRUD building blocks: repository and delete policy.
"""

from .repository import BaseRepository, date_range_filters, search_filter
from .soft_delete import count_dependents, deactivate_or_delete

__all__ = [
    "BaseRepository",
    "date_range_filters",
    "search_filter",
    "count_dependents",
    "deactivate_or_delete",
]
