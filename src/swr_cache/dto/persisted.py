"""Persisted cache table format.

A whole keyed cache is stored as one JSON object under a single storage slot:

    {"<cache key>": {"value": <json>, "timestamp": <unix millis>}, ...}

Rows are validated one at a time, and values against the owning cache's value
type, so a single bad row can be dropped without discarding the table.
"""

from typing import Any

from pydantic import BaseModel, Field, TypeAdapter


class PersistedEntry(BaseModel):
    """One row of a persisted cache table."""

    value: Any = Field(..., description="JSON-mode dump of the cached value")
    timestamp: int = Field(..., description="Write time in Unix milliseconds", ge=0)


PersistedCacheTable = dict[str, PersistedEntry]

table_adapter: TypeAdapter[PersistedCacheTable] = TypeAdapter(PersistedCacheTable)

# Loading only checks the outer shape; rows are validated one by one.
raw_table_adapter: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])
