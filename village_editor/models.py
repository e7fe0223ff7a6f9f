"""
Core models and data structures for the Village Editor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Tuple


class ItemKind(Enum):
    BUILDING = "building"
    UNIT = "unit"
    WALL = "wall"
    MOAT = "moat"


class StrokeInstance(NamedTuple):
    """A tile position within a stroke."""

    x: int
    y: int


@dataclass(eq=False)
class Item:
    """A placeable catalog entry.

    Items compare by identity: two records with the same fields are still
    different brushes, and strokes hold on to the exact object they were
    painted with.
    """

    id: int = 0
    name: str = ""
    description: str = ""
    thumbnail_resource: Optional[str] = None
    section_icon_resource: Optional[str] = None
    tile_resource: Optional[str] = None
    kind: ItemKind = ItemKind.BUILDING
    tile_width: int = 1
    tile_height: int = 1
    # Applied when converting to and from the game's file format
    tile_offset_x: int = 0
    tile_offset_y: int = 0
    # x, y, w, h inside the footprint of a building
    tile_impassable_rect: Tuple[int, int, int, int] = (0, 0, 0, 0)

    def __post_init__(self):
        if self.tile_width < 1 or self.tile_height < 1:
            raise ValueError(
                f"Item '{self.name}' needs a footprint of at least 1x1, "
                f"got {self.tile_width}x{self.tile_height}"
            )

    @property
    def size(self) -> Tuple[int, int]:
        return self.tile_width, self.tile_height

    def __repr__(self) -> str:
        return f"Item(id={self.id}, name={self.name!r}, kind={self.kind.value})"
