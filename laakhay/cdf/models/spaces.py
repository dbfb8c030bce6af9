"""Data modeling space DTOs.

Spaces are keyed by their name (`{"space": "my_space"}`) rather than by an
Identity.
"""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, model_validator

from .base import CdfModel


class SpaceId(CdfModel):
    model_config = ConfigDict(frozen=True)

    space: str

    @model_validator(mode="before")
    @classmethod
    def _from_str(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"space": data}
        return data


class SpaceCreate(CdfModel):
    space: str
    description: str | None = None
    name: str | None = None


class Space(CdfModel):
    space: str
    description: str | None = None
    name: str | None = None
    created_time: int
    last_updated_time: int
    is_global: bool = False
