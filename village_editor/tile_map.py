"""
Map data for the Village Editor.
A fixed-size tile grid plus the ordered timeline of committed strokes.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .models import Item, ItemKind
from .signals import Signal
from .stroke import Stroke

logger = logging.getLogger(__name__)

MIN_DIMENSION = 16
MAX_DIMENSION = 16384
# The playable area of the game's maps
DEFAULT_DIMENSION = 98


def clamp_dimension(value: int) -> int:
    return max(MIN_DIMENSION, min(MAX_DIMENSION, int(value)))


class StrokeList:
    """Ordered, observable sequence of strokes.

    Every mutation goes through `splice` and is reported to
    `items_changed` as (position, removed, added).
    """

    def __init__(self, strokes: Iterable[Stroke] = ()):
        self._strokes: List[Stroke] = list(strokes)
        self.items_changed = Signal()

    def splice(
        self, position: int, removed: int, additions: Iterable[Stroke] = ()
    ) -> List[Stroke]:
        """Replace `removed` strokes at `position` with `additions`.

        Returns the strokes that were taken out.
        """
        if not 0 <= position <= len(self._strokes):
            raise IndexError(
                f"Splice position {position} outside 0..{len(self._strokes)}"
            )
        additions = list(additions)
        end = min(position + max(0, removed), len(self._strokes))
        taken = self._strokes[position:end]
        self._strokes[position:end] = additions
        if taken or additions:
            self.items_changed.emit(position, len(taken), len(additions))
        return taken

    def append(self, stroke: Stroke):
        self.splice(len(self._strokes), 0, [stroke])

    def extend(self, strokes: Iterable[Stroke]):
        self.splice(len(self._strokes), 0, strokes)

    def clear(self) -> List[Stroke]:
        return self.splice(0, len(self._strokes))

    def index(self, stroke: Stroke) -> int:
        for i, existing in enumerate(self._strokes):
            if existing is stroke:
                return i
        raise ValueError(f"{stroke!r} is not in the list")

    def __getitem__(self, index):
        if isinstance(index, slice):
            return tuple(self._strokes[index])
        return self._strokes[index]

    def __len__(self) -> int:
        return len(self._strokes)

    def __iter__(self) -> Iterator[Stroke]:
        return iter(tuple(self._strokes))

    def __contains__(self, stroke) -> bool:
        return any(existing is stroke for existing in self._strokes)


class Map:
    """A named tile grid and its committed strokes (the timeline).

    The grid is derived by replaying strokes in commit order; later
    strokes overwrite earlier ones where their footprints meet.
    """

    def __init__(
        self,
        name: str = "Untitled",
        width: int = DEFAULT_DIMENSION,
        height: int = DEFAULT_DIMENSION,
    ):
        self.name = name
        self._width = clamp_dimension(width)
        self._height = clamp_dimension(height)

        self.strokes = StrokeList()
        self.strokes.items_changed.connect(self._strokes_changed)
        self.grid_changed = Signal()

        self._grid: Optional[np.ndarray] = None
        # Lowest stroke index appended since the grid was last brought up to date
        self._last_append_position: Optional[int] = None

    @property
    def width(self) -> int:
        return self._width

    @width.setter
    def width(self, value: int):
        self._width = clamp_dimension(value)
        self._invalidate()

    @property
    def height(self) -> int:
        return self._height

    @height.setter
    def height(self, value: int):
        self._height = clamp_dimension(value)
        self._invalidate()

    @property
    def size(self) -> Tuple[int, int]:
        return self._width, self._height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def append_stroke(self, stroke: Stroke):
        if stroke is None:
            raise ValueError("Cannot append an empty stroke reference")
        self.strokes.append(stroke)

    def snapshot(self) -> Tuple[Stroke, ...]:
        """An immutable copy of the committed timeline."""
        return tuple(self.strokes)

    def _invalidate(self):
        self._grid = None
        self._last_append_position = None
        self.grid_changed.emit()

    def _strokes_changed(self, position: int, removed: int, added: int):
        if removed > 0 or position < len(self.strokes) - added:
            # Something other than an append, replay everything
            self._grid = None
            self._last_append_position = None
        elif self._grid is not None:
            if self._last_append_position is None:
                self._last_append_position = position
            else:
                self._last_append_position = min(position, self._last_append_position)
        self.grid_changed.emit()

    def _new_grid(self) -> np.ndarray:
        return np.full((self._height, self._width), None, dtype=object)

    def _stamp(self, grid: np.ndarray, stroke: Stroke):
        item = stroke.item
        if item.kind == ItemKind.UNIT:
            # Units have no layer of their own yet
            return
        w, h = stroke.tile_width, stroke.tile_height
        for x, y in stroke.instances:
            if x < 0 or y < 0 or x + w > self._width or y + h > self._height:
                continue
            grid[y : y + h, x : x + w] = item

    def rasterize(self) -> np.ndarray:
        """Replay every committed stroke into a fresh height x width grid."""
        grid = self._new_grid()
        for stroke in self.strokes:
            self._stamp(grid, stroke)
        return grid

    @property
    def grid(self) -> np.ndarray:
        """Cached raster, only re-stamping strokes appended since last time.

        The returned array is read-only and goes stale on the next change.
        """
        if self._grid is None:
            logger.debug("Rebuilding grid for %r", self)
            self._grid = self.rasterize()
            self._last_append_position = None
        elif self._last_append_position is not None:
            self._grid.flags.writeable = True
            for stroke in self.strokes[self._last_append_position :]:
                self._stamp(self._grid, stroke)
            self._last_append_position = None
        self._grid.flags.writeable = False
        return self._grid

    def item_at(self, x: int, y: int) -> Optional[Item]:
        if not self.in_bounds(x, y):
            return None
        return self.grid[y, x]

    def __repr__(self) -> str:
        return (
            f"Map(name={self.name!r}, size={self._width}x{self._height}, "
            f"strokes={len(self.strokes)})"
        )
