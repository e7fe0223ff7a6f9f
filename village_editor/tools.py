"""
Drawing algorithms for the Village Editor.
"""

from typing import Iterator, Tuple

import numpy as np


def line_points(x0: int, y0: int, x1: int, y1: int) -> Iterator[Tuple[int, int]]:
    """Every tile on the line from (x0, y0) to (x1, y1), both ends included."""
    dx, dy = abs(x1 - x0), -abs(y1 - y0)
    sx, sy = (1 if x0 < x1 else -1), (1 if y0 < y1 else -1)
    err = dx + dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def footprint_in_bounds(
    x: int, y: int, width: int, height: int, map_width: int, map_height: int
) -> bool:
    return x >= 0 and y >= 0 and x + width <= map_width and y + height <= map_height


def footprint_is_free(grid: np.ndarray, x: int, y: int, width: int, height: int) -> bool:
    """True when no tile under the footprint holds an item."""
    region = grid[y : y + height, x : x + width]
    return all(cell is None for cell in region.flat)


def brush_points(
    mask: np.ndarray, cx: int, cy: int, map_width: int, map_height: int
) -> Iterator[Tuple[int, int]]:
    """Tiles covered by `mask` centred on (cx, cy), clipped to the map."""
    h, w = mask.shape
    bx, by = cx - w // 2, cy - h // 2
    for my, mx in zip(*np.nonzero(mask)):
        x, y = bx + int(mx), by + int(my)
        if 0 <= x < map_width and 0 <= y < map_height:
            yield x, y
