"""File metadata DTOs."""

from __future__ import annotations

from .base import CdfModel
from .common import LabelsFilter, Range
from .identity import CogniteExternalId, Identity, identity_of, matches_identity
from .patch import Patch, UpdateList, UpdateMap, UpdateSetNull, set_list, set_map, set_null


class FileMetadata(CdfModel):
    id: int
    name: str
    external_id: str | None = None
    directory: str | None = None
    source: str | None = None
    mime_type: str | None = None
    metadata: dict[str, str] | None = None
    asset_ids: list[int] | None = None
    data_set_id: int | None = None
    source_created_time: int | None = None
    source_modified_time: int | None = None
    security_categories: list[int] | None = None
    labels: list[CogniteExternalId] | None = None
    uploaded: bool = False
    uploaded_time: int | None = None
    created_time: int
    last_updated_time: int
    upload_url: str | None = None

    @property
    def identity(self) -> Identity:
        return identity_of(self.id, self.external_id)


class AddFile(CdfModel):
    name: str
    external_id: str | None = None
    directory: str | None = None
    source: str | None = None
    mime_type: str | None = None
    metadata: dict[str, str] | None = None
    asset_ids: list[int] | None = None
    data_set_id: int | None = None
    source_created_time: int | None = None
    source_modified_time: int | None = None
    security_categories: list[int] | None = None
    labels: list[CogniteExternalId] | None = None

    def matches(self, identity: Identity) -> bool:
        return matches_identity(identity, None, self.external_id)

    def to_patch(self, ignore_nulls: bool) -> PatchFile:
        return PatchFile(
            external_id=set_null(self.external_id, ignore_nulls),
            directory=set_null(self.directory, ignore_nulls),
            source=set_null(self.source, ignore_nulls),
            mime_type=set_null(self.mime_type, ignore_nulls),
            metadata=set_map(self.metadata, ignore_nulls),
            asset_ids=set_list(self.asset_ids, ignore_nulls),
            source_created_time=set_null(self.source_created_time, ignore_nulls),
            source_modified_time=set_null(self.source_modified_time, ignore_nulls),
            data_set_id=set_null(self.data_set_id, ignore_nulls),
            security_categories=set_list(self.security_categories, ignore_nulls),
            labels=set_list(self.labels, ignore_nulls),
        )


class PatchFile(CdfModel):
    external_id: UpdateSetNull[str] | None = None
    directory: UpdateSetNull[str] | None = None
    source: UpdateSetNull[str] | None = None
    mime_type: UpdateSetNull[str] | None = None
    metadata: UpdateMap[str, str] | None = None
    asset_ids: UpdateList[int, int] | None = None
    source_created_time: UpdateSetNull[int] | None = None
    source_modified_time: UpdateSetNull[int] | None = None
    data_set_id: UpdateSetNull[int] | None = None
    security_categories: UpdateList[int, int] | None = None
    labels: UpdateList[CogniteExternalId, CogniteExternalId] | None = None


PatchFileItem = Patch[PatchFile]


class FileFilter(CdfModel):
    name: str | None = None
    directory_prefix: str | None = None
    mime_type: str | None = None
    metadata: dict[str, str] | None = None
    asset_ids: list[int] | None = None
    asset_external_ids: list[str] | None = None
    data_set_ids: list[Identity] | None = None
    asset_subtree_ids: list[Identity] | None = None
    source: str | None = None
    created_time: Range[int] | None = None
    last_updated_time: Range[int] | None = None
    uploaded_time: Range[int] | None = None
    external_id_prefix: str | None = None
    uploaded: bool | None = None
    labels: LabelsFilter | None = None


class FileSearch(CdfModel):
    name: str | None = None


class FileDownloadUrl(CdfModel):
    """Temporary download link for one file.

    The API returns the identity flattened next to `downloadUrl`; both the
    internal and the external id may be present, so they are kept as plain
    fields here.
    """

    id: int | None = None
    external_id: str | None = None
    download_url: str

    @property
    def identity(self) -> Identity:
        return identity_of(self.id, self.external_id)
