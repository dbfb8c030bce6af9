"""Files resource: metadata, upload and download links, and raw content."""

from __future__ import annotations

from collections.abc import Sequence

from ..core.exceptions import NotFoundError
from ..models.files import (
    AddFile,
    FileDownloadUrl,
    FileFilter,
    FileMetadata,
    FileSearch,
    PatchFileItem,
)
from ..models.filters import PartitionedFilter
from ..models.identity import Identity
from .base import Resource
from .capabilities import (
    Delete,
    FilterWithRequest,
    RetrieveWithIgnoreUnknownIds,
    Search,
    Update,
    post_items,
)


class FilesResource(Resource):
    base_path = "files"

    filter = FilterWithRequest(PartitionedFilter[FileFilter], FileMetadata)
    search = Search(FileFilter, FileSearch, FileMetadata)
    retrieve = RetrieveWithIgnoreUnknownIds(Identity, FileMetadata)
    update = Update(PatchFileItem, FileMetadata)
    delete = Delete(Identity)

    async def upload(self, item: AddFile, overwrite: bool = False) -> FileMetadata:
        """Create file metadata; the result carries the `upload_url` for the content.

        With `overwrite` an existing file with the same external id is replaced
        instead of failing with a conflict.
        """
        return await self.api_client.post(
            self.path(),
            item,
            FileMetadata,
            params={"overwrite": overwrite},
            idempotent=overwrite,
        )

    async def upload_blob(self, url: str, data: bytes, mime_type: str | None = None) -> None:
        """PUT raw content to an upload URL returned by `upload`."""
        await self.api_client.put_blob(url, data, mime_type)

    async def download_link(self, ids: Sequence[Identity | int | str]) -> list[FileDownloadUrl]:
        return await post_items(
            self.api_client,
            self.path("downloadlink"),
            [Identity.from_value(i) for i in ids],
            FileDownloadUrl,
        )

    async def download(self, url: str) -> bytes:
        return await self.api_client.get_raw(url)

    async def download_file(self, id: Identity | int | str) -> bytes:
        """Fetch a download link for one file and return its content."""
        identity = Identity.from_value(id)
        links = await self.download_link([identity])
        if not links:
            raise NotFoundError(f"No download link returned for {identity}", code=404)
        return await self.download(links[0].download_url)
