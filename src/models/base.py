"""Shared Pydantic base model for Cyclewise input schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CyclewiseBase(BaseModel):
    """Base model with shared config for all Cyclewise schemas."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
