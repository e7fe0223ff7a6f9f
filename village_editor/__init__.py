"""
Village Editor - stroke-based map editing for castle-building RTS missions.
"""

from .models import Item, ItemKind, StrokeInstance
from .stroke import Stroke, rects_intersect
from .tile_map import Map, StrokeList
from .map_handle import MapHandle
from .catalog import ItemCatalog, CatalogRecordError
from .brushes import Brushable, SquareBrush, ImageMaskBrush
from .config import EditorConfig
from .editor import MapEditor

__version__ = "0.1.0"

__all__ = [
    "Item",
    "ItemKind",
    "StrokeInstance",
    "Stroke",
    "rects_intersect",
    "Map",
    "StrokeList",
    "MapHandle",
    "ItemCatalog",
    "CatalogRecordError",
    "Brushable",
    "SquareBrush",
    "ImageMaskBrush",
    "EditorConfig",
    "MapEditor",
]
