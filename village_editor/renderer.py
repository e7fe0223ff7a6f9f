"""
Terminal preview of a map grid using rich.
"""

from typing import List, Optional, Tuple

import numpy as np
from rich.text import Text

from .models import Item, ItemKind

EMPTY_GLYPH = "·"
EMPTY_STYLE = "rgb(60,60,70)"

KIND_GLYPHS = {
    ItemKind.BUILDING: "#",
    ItemKind.UNIT: "u",
    ItemKind.WALL: "█",
    ItemKind.MOAT: "~",
}


def item_color(item: Item) -> Tuple[int, int, int]:
    """A stable, reasonably bright colour per item id."""
    seed = (item.id * 2654435761) & 0xFFFFFF
    r, g, b = (seed >> 16) & 0xFF, (seed >> 8) & 0xFF, seed & 0xFF
    return tuple(96 + c * 159 // 255 for c in (r, g, b))


def render_cell(item: Optional[Item]) -> Tuple[str, str]:
    if item is None:
        return EMPTY_GLYPH, EMPTY_STYLE
    r, g, b = item_color(item)
    return KIND_GLYPHS.get(item.kind, "?"), f"rgb({r},{g},{b})"


def render_grid(grid: np.ndarray) -> List[Text]:
    """One rich Text per grid row, one glyph per tile."""
    rows = []
    for y in range(grid.shape[0]):
        line = Text()
        for x in range(grid.shape[1]):
            glyph, style = render_cell(grid[y, x])
            line.append(glyph, style=style)
        rows.append(line)
    return rows
