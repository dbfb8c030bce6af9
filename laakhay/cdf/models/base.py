"""Base model and wire serialization helpers.

All DTOs use snake_case in Python and camelCase on the wire. Outgoing bodies
never contain nulls: an absent field means "not specified", which is what
patch semantics rely on.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CdfModel(BaseModel):
    """Base class for request and response DTOs."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Dump to the JSON-compatible wire form."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def to_payload(value: Any) -> Any:
    """Convert models (or containers of models) to their JSON wire form."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, (list, tuple)):
        return [to_payload(v) for v in value]
    if isinstance(value, dict):
        return {k: to_payload(v) for k, v in value.items() if v is not None}
    return value


def param_value(value: Any) -> str:
    """Encode one query parameter value the way the API expects (lowercase booleans, JSON containers)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(", ", ": "))
    return str(value)


def to_params(query: Any) -> list[tuple[str, str]]:
    """Flatten a query object into URL query tuples.

    Objects may define their own `to_params()`; models are dumped by alias
    with None fields dropped.

    Examples:
        >>> to_params({"limit": 10, "includeMetadata": True})
        [('limit', '10'), ('includeMetadata', 'true')]
    """
    if query is None:
        return []
    custom = getattr(query, "to_params", None)
    if callable(custom):
        return list(custom())
    data = to_payload(query)
    return [(key, param_value(value)) for key, value in data.items()]
