"""
Strokes: one item painted over a set of non-overlapping tile positions.
"""

from typing import Iterator, Tuple, Union

from .models import Item, StrokeInstance

Rect = Tuple[int, int, int, int]


def rects_intersect(a: Rect, b: Rect) -> bool:
    """Axis-aligned intersection test for (x, y, w, h) rectangles.

    Empty rectangles never intersect anything.
    """
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    if aw <= 0 or ah <= 0 or bw <= 0 or bh <= 0:
        return False
    return ax < bx + bw and bx < ax + aw and ay < by + bh and by < ay + ah


class Stroke:
    """An atomic placement of a single item over many tiles.

    The footprint size is read from the item once, when the stroke is
    created. Later changes to the item's size do not resize the stroke,
    although the stroke keeps referring to the live item for everything
    else (name, kind, id).
    """

    def __init__(self, item: Item):
        if item is None:
            raise ValueError("A stroke needs an item")
        self._item = item
        self._tile_width = item.tile_width
        self._tile_height = item.tile_height
        self._instances = []

    @property
    def item(self) -> Item:
        return self._item

    @property
    def tile_width(self) -> int:
        return self._tile_width

    @property
    def tile_height(self) -> int:
        return self._tile_height

    @property
    def instances(self) -> Tuple[StrokeInstance, ...]:
        return tuple(self._instances)

    def footprint(self, pos: Union[StrokeInstance, Tuple[int, int]]) -> Rect:
        x, y = pos
        return x, y, self._tile_width, self._tile_height

    def footprints(self) -> Iterator[Rect]:
        for instance in self._instances:
            yield self.footprint(instance)

    def add_instance(self, pos: Union[StrokeInstance, Tuple[int, int]]) -> bool:
        """Append a position unless its footprint overlaps one already stored.

        Returns False (and stores nothing) on overlap so that a drag can
        keep feeding every hovered tile without special-casing repeats.
        """
        instance = StrokeInstance(int(pos[0]), int(pos[1]))
        rect = self.footprint(instance)
        for existing in self._instances:
            if rects_intersect(rect, self.footprint(existing)):
                return False
        self._instances.append(instance)
        return True

    def __len__(self) -> int:
        return len(self._instances)

    def __iter__(self) -> Iterator[StrokeInstance]:
        return iter(tuple(self._instances))

    def __repr__(self) -> str:
        return f"Stroke(item={self._item.name!r}, instances={len(self._instances)})"
