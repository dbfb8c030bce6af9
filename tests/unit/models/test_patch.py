"""Unit tests for patch instructions."""

from __future__ import annotations

from laakhay.cdf.models import (
    AddAsset,
    CogniteExternalId,
    Identity,
    Patch,
    UpdateList,
    UpdateMap,
    UpdateSet,
    UpdateSetNull,
)
from laakhay.cdf.models.assets import PatchAsset


class TestUpdateShapes:
    """Test each update instruction's wire form."""

    def test_set(self):
        assert UpdateSet.of("x").to_payload() == {"set": "x"}

    def test_set_null(self):
        assert UpdateSetNull.of(3).to_payload() == {"set": 3}
        assert UpdateSetNull.clear().to_payload() == {"setNull": True}
        assert UpdateSetNull.from_optional(None).to_payload() == {"setNull": True}

    def test_list(self):
        assert UpdateList(add=[1], remove=[2]).to_payload() == {"add": [1], "remove": [2]}
        assert UpdateList.replace(None).to_payload() == {"set": []}

    def test_map(self):
        assert UpdateMap(add={"k": "v"}, remove=["old"]).to_payload() == {
            "add": {"k": "v"},
            "remove": ["old"],
        }


class TestPatch:
    """Test Patch flattening and no-change fields."""

    def test_flattens_identity_and_skips_unchanged_fields(self):
        patch = Patch[PatchAsset](
            id=Identity.of_id(1),
            update=PatchAsset(name=UpdateSet.of("pump"), description=UpdateSetNull.clear()),
        )
        assert patch.to_payload() == {
            "id": 1,
            "update": {"name": {"set": "pump"}, "description": {"setNull": True}},
        }

    def test_external_id_key(self):
        patch = Patch[PatchAsset](id=Identity.of_external_id("p"), update=PatchAsset())
        assert patch.to_payload() == {"externalId": "p", "update": {}}


class TestIntoPatch:
    """Test create items converted to updates."""

    def test_ignore_nulls_leaves_missing_fields_unchanged(self):
        item = AddAsset(name="pump", external_id="p1", metadata={"a": "b"})
        update = item.to_patch(ignore_nulls=True).to_payload()
        assert update == {
            "externalId": {"set": "p1"},
            "name": {"set": "pump"},
            "metadata": {"set": {"a": "b"}},
        }

    def test_without_ignore_nulls_clears_missing_fields(self):
        item = AddAsset(name="pump", external_id="p1", labels=[CogniteExternalId(external_id="l")])
        update = item.to_patch(ignore_nulls=False).to_payload()
        assert update["description"] == {"setNull": True}
        assert update["metadata"] == {"set": {}}
        assert update["labels"] == {"set": [{"externalId": "l"}]}
        assert "parentId" not in update
