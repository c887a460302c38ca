"""Pydantic models for persisted data and UI-facing views.

Internal domain logic should use entities from the entities package.
"""

from .composites import CompositePost, CompositeProfile, UserSummary
from .persisted import PersistedCacheTable, PersistedEntry, raw_table_adapter, table_adapter
from .views import EntityView

__all__ = [
    "CompositePost",
    "CompositeProfile",
    "UserSummary",
    "PersistedCacheTable",
    "PersistedEntry",
    "raw_table_adapter",
    "table_adapter",
    "EntityView",
]
