"""Assets resource.

Assets represent objects or groups of objects from the physical world,
organized in hierarchies.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..models.assets import (
    AddAsset,
    Asset,
    AssetFilter,
    AssetQuery,
    AssetSearch,
    DeleteAssetsRequest,
    FilterAssetsRequest,
    PatchAssetItem,
    RetrieveAssetsRequest,
)
from ..models.identity import Identity
from ..models.items import ItemsWithCursor
from .base import Resource
from .capabilities import (
    Create,
    DeleteWithRequest,
    FilterWithRequest,
    List,
    RetrieveWithRequest,
    Search,
    Update,
    Upsert,
)


class AssetsResource(Resource):
    base_path = "assets"

    list = List(AssetQuery, Asset)
    create = Create(AddAsset, Asset)
    search = Search(AssetFilter, AssetSearch, Asset)
    update = Update(PatchAssetItem, Asset)
    upsert = Upsert()
    delete = DeleteWithRequest(DeleteAssetsRequest)
    filter = FilterWithRequest(FilterAssetsRequest, Asset)
    retrieve_with_request = RetrieveWithRequest(RetrieveAssetsRequest, ItemsWithCursor[Asset])

    async def retrieve(
        self,
        ids: Sequence[Identity | int | str],
        ignore_unknown_ids: bool = False,
        aggregated_properties: Sequence[str] | None = None,
    ) -> list[Asset]:
        """Retrieve assets by identity.

        Fails with NotFoundError or BadRequestError listing the missing
        identities unless `ignore_unknown_ids` is set.
        """
        request = RetrieveAssetsRequest(
            items=[Identity.from_value(i) for i in ids],
            ignore_unknown_ids=ignore_unknown_ids,
            aggregated_properties=list(aggregated_properties) if aggregated_properties else None,
        )
        response = await self.retrieve_with_request(request)
        return response.items
