"""Label DTOs."""

from __future__ import annotations

from .base import CdfModel
from .identity import Identity


class Label(CdfModel):
    external_id: str
    name: str
    description: str | None = None
    data_set_id: int | None = None
    created_time: int


class AddLabel(CdfModel):
    external_id: str
    name: str
    description: str | None = None
    data_set_id: int | None = None


class LabelFilter(CdfModel):
    name: str | None = None
    external_id_prefix: str | None = None
    data_set_ids: list[Identity] | None = None
