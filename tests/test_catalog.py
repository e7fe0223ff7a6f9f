"""
Tests for item records and the item catalog.
"""

import logging

import pytest

from village_editor.catalog import (
    CatalogRecordError,
    ItemCatalog,
    item_from_record,
    load_item,
)
from village_editor.models import Item, ItemKind

GRANARY_RECORD = """\
id = 4
name = "Granary"
description = "Stores food."
kind = "building"
thumbnail-resource = "/items/thumbnails/granary.png"
tile-width = 4
tile-height = 4
tile-offset-x = 1
tile-offset-y = 1
"""


def write_record(directory, filename, text):
    path = directory / filename
    path.write_text(text, encoding="utf-8")
    return path


class TestItemRecords:
    """Test turning a record into an Item."""

    def test_full_record(self, tmp_path):
        item = load_item(write_record(tmp_path, "granary.toml", GRANARY_RECORD))
        assert item.id == 4
        assert item.name == "Granary"
        assert item.kind == ItemKind.BUILDING
        assert item.size == (4, 4)
        assert item.tile_offset_x == 1
        assert item.thumbnail_resource == "/items/thumbnails/granary.png"
        assert item.tile_resource is None

    def test_defaults(self):
        item = item_from_record({"id": 5, "name": "Thing"})
        assert item.kind == ItemKind.BUILDING
        assert item.size == (1, 1)
        assert item.tile_impassable_rect == (0, 0, 0, 0)

    def test_impassable_rect(self):
        item = item_from_record(
            {
                "id": 1,
                "name": "Hut",
                "tile-width": 3,
                "tile-height": 3,
                "tile-impassable-rect-w": 3,
                "tile-impassable-rect-h": 2,
            }
        )
        assert item.tile_impassable_rect == (0, 0, 3, 2)

    def test_unknown_key(self):
        with pytest.raises(CatalogRecordError, match="unknown key"):
            item_from_record({"name": "Thing", "colour": "red"})

    def test_wrong_type(self):
        with pytest.raises(CatalogRecordError, match="tile-width"):
            item_from_record({"tile-width": "3"})

    def test_bool_is_not_an_int(self):
        with pytest.raises(CatalogRecordError):
            item_from_record({"tile-height": True})

    def test_bad_kind(self):
        with pytest.raises(CatalogRecordError, match="kind"):
            item_from_record({"kind": "castle"})

    @pytest.mark.parametrize("key", ["tile-width", "tile-height"])
    def test_empty_footprint(self, key):
        with pytest.raises(CatalogRecordError):
            item_from_record({key: 0})

    def test_missing_id(self):
        """Saved maps refer to items by id, so every record needs one."""
        with pytest.raises(CatalogRecordError, match="id"):
            item_from_record({"name": "Well", "kind": "building"})

    @pytest.mark.parametrize("item_id", [0, -3])
    def test_id_must_be_positive(self, item_id):
        with pytest.raises(CatalogRecordError, match="id"):
            item_from_record({"id": item_id, "name": "Well"})

    def test_invalid_toml(self, tmp_path):
        path = write_record(tmp_path, "broken.toml", "name = \n")
        with pytest.raises(CatalogRecordError):
            load_item(path)


class TestItemCatalog:
    """Test catalog loading and lookup."""

    def test_load_directory_skips_bad_records(self, tmp_path, caplog):
        write_record(tmp_path, "granary.toml", GRANARY_RECORD)
        write_record(tmp_path, "bad.toml", 'name = "Bad"\nfoo = 1\n')
        write_record(tmp_path, "notes.txt", "not a record")

        catalog = ItemCatalog()
        with caplog.at_level(logging.ERROR, logger="village_editor.catalog"):
            loaded = catalog.load_directory(tmp_path)

        assert loaded == 1
        assert len(catalog) == 1
        assert catalog[0].name == "Granary"
        assert "bad.toml" in caplog.text

    def test_records_without_id_skipped(self, tmp_path, caplog):
        write_record(tmp_path, "granary.toml", GRANARY_RECORD)
        write_record(tmp_path, "well.toml", 'name = "Well"\n')
        write_record(tmp_path, "pit.toml", 'name = "Pit"\n')

        catalog = ItemCatalog()
        with caplog.at_level(logging.WARNING, logger="village_editor.catalog"):
            catalog.load_directory(tmp_path)

        assert [item.name for item in catalog] == ["Granary"]
        assert "well.toml" in caplog.text
        assert "replaces" not in caplog.text

    def test_missing_directory(self, tmp_path):
        assert ItemCatalog().load_directory(tmp_path / "nope") == 0

    def test_query_id(self, catalog, wall):
        assert catalog.query_id(25) is wall
        assert catalog.query_id(999) is None
        assert catalog.query_id(0) is None
        assert catalog.query_id(-1) is None

    def test_find_and_by_kind(self, catalog, hut, moat):
        assert catalog.find("Item A") is hut
        assert catalog.find("Nothing") is None
        assert catalog.by_kind(ItemKind.MOAT) == [moat]

    def test_duplicate_id_replaces(self, catalog, caplog):
        newer = Item(id=25, name="Low Wall", kind=ItemKind.WALL)
        with caplog.at_level(logging.WARNING, logger="village_editor.catalog"):
            catalog.add(newer)
        assert catalog.query_id(25) is newer
        assert "Low Wall" in caplog.text

    def test_copy_is_independent(self, catalog):
        dup = catalog.copy()
        dup.add(Item(id=99, name="Extra"))
        assert len(dup) == len(catalog) + 1
        assert catalog.query_id(99) is None

    def test_bundled_items(self):
        catalog = ItemCatalog.default()
        assert len(catalog) == 8
        hut = catalog.query_id(1)
        assert hut.name == "Woodcutter's Hut"
        assert hut.size == (3, 3)
        assert hut.tile_impassable_rect == (0, 0, 3, 2)
        assert [item.id for item in catalog.by_kind(ItemKind.UNIT)] == [40]
