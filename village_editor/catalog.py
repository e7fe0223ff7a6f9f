"""
Item catalog for the Village Editor.
Loads declarative item records (one TOML file per item) into Item objects.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

import toml

from .models import Item, ItemKind

logger = logging.getLogger(__name__)

BUNDLED_ITEMS_DIR = Path(__file__).parent / "data" / "items"

# Record key -> (Item attribute, expected type)
RECORD_KEYS = {
    "id": ("id", int),
    "name": ("name", str),
    "description": ("description", str),
    "thumbnail-resource": ("thumbnail_resource", str),
    "section-icon-resource": ("section_icon_resource", str),
    "tile-resource": ("tile_resource", str),
    "kind": ("kind", str),
    "tile-width": ("tile_width", int),
    "tile-height": ("tile_height", int),
    "tile-offset-x": ("tile_offset_x", int),
    "tile-offset-y": ("tile_offset_y", int),
    "tile-impassable-rect-x": (None, int),
    "tile-impassable-rect-y": (None, int),
    "tile-impassable-rect-w": (None, int),
    "tile-impassable-rect-h": (None, int),
}

IMPASSABLE_RECT_KEYS = (
    "tile-impassable-rect-x",
    "tile-impassable-rect-y",
    "tile-impassable-rect-w",
    "tile-impassable-rect-h",
)


class CatalogRecordError(ValueError):
    """An item record could not be turned into an Item."""


def item_from_record(record: Dict[str, Any]) -> Item:
    """Build an Item from a parsed record. Any unknown key is an error."""
    kwargs: Dict[str, Any] = {}

    for key, value in record.items():
        if key not in RECORD_KEYS:
            raise CatalogRecordError(f"unknown key '{key}'")
        attr, expected = RECORD_KEYS[key]
        # bool is an int subclass, but `tile-width = true` is still a mistake
        if not isinstance(value, expected) or isinstance(value, bool):
            raise CatalogRecordError(
                f"key '{key}' needs a value of type {expected.__name__}, "
                f"got {type(value).__name__}"
            )
        if attr is not None:
            kwargs[attr] = value

    if "kind" in kwargs:
        try:
            kwargs["kind"] = ItemKind(kwargs["kind"])
        except ValueError:
            raise CatalogRecordError(
                f"key 'kind' does not accept the value '{kwargs['kind']}'"
            ) from None

    for key in ("tile-width", "tile-height"):
        if key in record and record[key] < 1:
            raise CatalogRecordError(f"key '{key}' must be at least 1")

    # Strokes refer to their item by id in saved maps
    if "id" not in record:
        raise CatalogRecordError("missing key 'id'")
    if record["id"] <= 0:
        raise CatalogRecordError("key 'id' must be positive")

    kwargs["tile_impassable_rect"] = tuple(
        record.get(key, 0) for key in IMPASSABLE_RECT_KEYS
    )
    return Item(**kwargs)


def load_item(path: Union[str, Path]) -> Item:
    """Parse a single item record file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            record = toml.load(f)
    except toml.TomlDecodeError as e:
        raise CatalogRecordError(f"invalid TOML: {e}") from e
    return item_from_record(record)


class ItemCatalog:
    """Registry of placeable items, in load order and by numeric id."""

    def __init__(self, items: Optional[List[Item]] = None):
        self._items: List[Item] = []
        self._id_map: Dict[int, Item] = {}
        for item in items or ():
            self.add(item)

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "ItemCatalog":
        catalog = cls()
        catalog.load_directory(directory)
        return catalog

    @classmethod
    def default(cls) -> "ItemCatalog":
        """The item records shipped with the package."""
        return cls.from_directory(BUNDLED_ITEMS_DIR)

    def add(self, item: Item):
        self._items.append(item)
        if item.id in self._id_map:
            logger.warning(
                "Item id %d (%s) replaces %s", item.id, item.name, self._id_map[item.id].name
            )
        self._id_map[item.id] = item

    def load_directory(self, directory: Union[str, Path]) -> int:
        """Load every `*.toml` record in `directory`, skipping bad ones.

        Returns the number of items loaded.
        """
        directory = Path(directory)
        if not directory.is_dir():
            logger.error("Item directory %s does not exist", directory)
            return 0

        loaded = 0
        for path in sorted(directory.glob("*.toml")):
            try:
                item = load_item(path)
            except (CatalogRecordError, ValueError, OSError) as e:
                logger.error("Could not load item record at %s: %s", path, e)
                continue
            self.add(item)
            loaded += 1

        logger.debug("Loaded %d items from %s", loaded, directory)
        return loaded

    def query_id(self, item_id: int) -> Optional[Item]:
        if item_id <= 0:
            return None
        return self._id_map.get(item_id)

    def find(self, name: str) -> Optional[Item]:
        for item in self._items:
            if item.name == name:
                return item
        return None

    def by_kind(self, kind: ItemKind) -> List[Item]:
        return [item for item in self._items if item.kind == kind]

    def copy(self) -> "ItemCatalog":
        dup = ItemCatalog()
        dup._items = list(self._items)
        dup._id_map = dict(self._id_map)
        return dup

    def __getitem__(self, index: int) -> Item:
        return self._items[index]

    def __iter__(self) -> Iterator[Item]:
        return iter(tuple(self._items))

    def __len__(self) -> int:
        return len(self._items)
