"""Data modeling spaces.

Spaces namespace instances, views and containers; external ids only need to
be unique within a space.
"""

from __future__ import annotations

from ..models.filters import LimitCursorQuery
from ..models.spaces import Space, SpaceCreate, SpaceId
from .base import Resource
from .capabilities import Create, DeleteWithResponse, List, Retrieve


class SpacesResource(Resource):
    base_path = "models/spaces"

    create = Create(SpaceCreate, Space)
    list = List(LimitCursorQuery, Space)
    retrieve = Retrieve(SpaceId, Space)
    delete = DeleteWithResponse(SpaceId, SpaceId)
