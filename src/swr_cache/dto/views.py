"""View DTOs handed to UI code."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EntityView(BaseModel):
    """Everything an entity view exposes to the UI.

    UI code never sees TTLs, storage slots or join internals.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: Any = Field(None, description="Displayed value, from cache or live sources")
    is_loading: bool = Field(..., description="No value to display yet and sources still pending")
    not_found: bool = Field(False, description="Root source resolved to absent and nothing is cached")
