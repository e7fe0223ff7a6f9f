"""
Native project files for the Village Editor.
Maps are stored as TOML: name, size and the committed strokes in order.
"""

import logging
import os
from typing import Optional

import toml

from .catalog import ItemCatalog
from .stroke import Stroke
from .tile_map import Map

logger = logging.getLogger(__name__)


def map_to_dict(map: Map) -> dict:
    return {
        "name": map.name,
        "width": map.width,
        "height": map.height,
        "strokes": [
            {
                "item": stroke.item.id,
                "instances": [[x, y] for x, y in stroke.instances],
            }
            for stroke in map.snapshot()
        ],
    }


def map_from_dict(data: dict, catalog: ItemCatalog) -> Map:
    map = Map(
        data.get("name", "Untitled"),
        data.get("width", 98),
        data.get("height", 98),
    )
    for index, entry in enumerate(data.get("strokes", [])):
        if not isinstance(entry, dict):
            logger.warning("Skipping stroke %d: expected a table, got %r", index, entry)
            continue
        item_id = entry.get("item", 0)
        item = catalog.query_id(item_id) if isinstance(item_id, int) else None
        if item is None:
            logger.warning("Skipping stroke %d: unknown item id %s", index, item_id)
            continue
        stroke = Stroke(item)
        try:
            for x, y in entry.get("instances", []):
                stroke.add_instance((x, y))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping stroke %d: bad instances: %s", index, e)
            continue
        map.append_stroke(stroke)
    return map


def save_map(map: Map, path: str) -> bool:
    """Write the committed strokes of `map`. Redo memory is not saved."""
    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write("# Village Editor map\n\n")
            toml.dump(map_to_dict(map), f)
        return True
    except OSError as e:
        logger.error("Error saving map file %s: %s", path, e)
        return False


def load_map(path: str, catalog: ItemCatalog) -> Optional[Map]:
    if not os.path.exists(path):
        logger.error("Map file %s does not exist", path)
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = toml.load(f)
        return map_from_dict(data, catalog)
    except toml.TomlDecodeError as e:
        logger.error("Error parsing TOML file %s: %s", path, e)
        return None
    except (OSError, TypeError, ValueError) as e:
        logger.error("Error loading map file %s: %s", path, e)
        return None
