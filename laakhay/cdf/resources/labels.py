"""Labels resource."""

from __future__ import annotations

from ..models.identity import CogniteExternalId
from ..models.labels import AddLabel, Label, LabelFilter
from .base import Resource
from .capabilities import Create, Delete, FilterItems


class LabelsResource(Resource):
    base_path = "labels"

    create = Create(AddLabel, Label)
    filter = FilterItems(LabelFilter, Label)
    delete = Delete(CogniteExternalId)
