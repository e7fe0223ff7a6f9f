"""
Village Editor - gesture handling.

Turns pointer input on the map view into strokes: a draw gesture builds a
candidate stroke from the hovered tiles and commits it to the map when the
gesture ends. Pan and zoom gestures move the view.
"""

import logging
import math
from typing import Optional, Tuple

from .brushes import Brushable, SquareBrush
from .config import EditorConfig
from .map_handle import MapHandle
from .models import Item
from .signals import Signal
from .stroke import Stroke
from .tile_map import Map
from . import tools

logger = logging.getLogger(__name__)

# Scroll wheel zoom speed, relative to the current zoom
SCROLL_ZOOM_FACTOR = -0.06


class MapEditor:
    """Brush engine and view state for one map handle.

    Signals:
        hover_changed: (hover) tile under the pointer, or None
        drawing_changed: (drawing) when a stroke starts or stops
    """

    def __init__(
        self, handle: Optional[MapHandle] = None, config: Optional[EditorConfig] = None
    ):
        self.config = config or EditorConfig()
        self.handle = handle or MapHandle(insert_mode=self.config.insert_mode)

        self.selected_item: Optional[Item] = None
        self.brush: Optional[Brushable] = None
        self.line_mode = False

        self.zoom = self.config.clamp_zoom(self.config.zoom_default)
        self.border_gap = self.config.border_gap
        self.scroll_x = 0.0
        self.scroll_y = 0.0

        self.pointer: Tuple[float, float] = (0.0, 0.0)
        self.hover: Optional[Tuple[int, int]] = None

        self.current_stroke: Optional[Stroke] = None
        self.brush_stroke: Optional[Stroke] = None
        self._line_origin: Optional[Tuple[int, int]] = None

        self._panning = False
        self._pan_start = (0.0, 0.0)
        self._zoom_start = self.zoom

        self.hover_changed = Signal()
        self.drawing_changed = Signal()

    @property
    def map(self) -> Optional[Map]:
        return self.handle.map

    @property
    def drawing(self) -> bool:
        return self.current_stroke is not None

    @property
    def tile_size(self) -> float:
        return self.config.base_tile_size * self.zoom

    # -- pointer ------------------------------------------------------------

    def pointer_to_tile(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        """Map a widget-space pointer position to a tile, or None if off the map."""
        if self.map is None:
            return None
        tile_size = self.tile_size
        map_offset = self.border_gap * tile_size
        tx = math.floor((x + self.scroll_x - map_offset) / tile_size)
        ty = math.floor((y + self.scroll_y - map_offset) / tile_size)
        if not self.map.in_bounds(tx, ty):
            return None
        return tx, ty

    def tile_to_pointer(self, tx: int, ty: int) -> Tuple[float, float]:
        """Widget-space centre of a tile."""
        tile_size = self.tile_size
        map_offset = self.border_gap * tile_size
        return (
            map_offset + (tx + 0.5) * tile_size - self.scroll_x,
            map_offset + (ty + 0.5) * tile_size - self.scroll_y,
        )

    def update_motion(self, x: float, y: float):
        self.pointer = (x, y)
        if self._panning:
            return
        self._set_hover(self.pointer_to_tile(x, y))

    def leave(self):
        self._set_hover(None)

    def _set_hover(self, hover: Optional[Tuple[int, int]]):
        if hover != self.hover:
            self.hover = hover
            self.hover_changed.emit(hover)

    # -- drawing ------------------------------------------------------------

    def draw_begin(self, x: float, y: float) -> bool:
        """Start a stroke with the selected item. Ignored without one."""
        if self.map is None or self.selected_item is None or self._panning:
            return False

        self.update_motion(x, y)
        self.current_stroke = Stroke(self.selected_item)
        self.brush_stroke = None
        self._line_origin = self.hover

        self._feed_hover()

        self.handle.lock_hinted = True
        self.drawing_changed.emit(True)
        return True

    def draw_update(self, x: float, y: float):
        if self.current_stroke is None:
            return
        self.update_motion(x, y)
        self._feed_hover()

    def draw_end(self) -> Optional[Stroke]:
        """Commit the stroke being drawn. Returns the stroke appended, if any."""
        if self.current_stroke is None:
            self.handle.lock_hinted = False
            return None

        committed = None
        if len(self.current_stroke) > 0:
            if self.brush_stroke is not None and len(self.brush_stroke) > 0:
                committed = self.brush_stroke
            else:
                committed = self.current_stroke
            self._finish_stroke()
            self.map.append_stroke(committed)
            self._count_usage(committed.item)
        else:
            self._finish_stroke()

        self.drawing_changed.emit(False)
        return committed

    def draw_cancel(self):
        """Throw away the stroke being drawn."""
        if self.current_stroke is None:
            return
        self._finish_stroke()
        self.drawing_changed.emit(False)

    def _finish_stroke(self):
        self.current_stroke = None
        self.brush_stroke = None
        self._line_origin = None
        self.handle.lock_hinted = False

    def _count_usage(self, item: Item):
        frequencies = self.config.item_frequencies
        frequencies[item.name] = frequencies.get(item.name, 0) + 1

    def _feed_hover(self):
        if self.hover is None or self.current_stroke is None:
            return

        map = self.map
        grid = self.handle.grid
        stroke = self.current_stroke
        item = stroke.item
        tw, th = stroke.tile_width, stroke.tile_height

        if self.line_mode:
            if self._line_origin is None:
                self._line_origin = self.hover
            start = self._line_origin
            # A line is redrawn from its origin on every update
            stroke = self.current_stroke = Stroke(item)
            if self.brush_stroke is not None:
                self.brush_stroke = Stroke(item)
        elif len(stroke) == 0:
            start = self.hover
        else:
            start = stroke.instances[-1]

        mask = None
        if self.brush is not None and tw == 1 and th == 1:
            mask = self.brush.mask()
            if self.brush_stroke is None:
                self.brush_stroke = Stroke(item)

        hx, hy = self.hover
        for cx, cy in tools.line_points(start[0], start[1], hx, hy):
            if not tools.footprint_in_bounds(cx, cy, tw, th, map.width, map.height):
                continue
            if not tools.footprint_is_free(grid, cx, cy, tw, th):
                continue
            stroke.add_instance((cx, cy))

            if mask is not None:
                for bx, by in tools.brush_points(mask, cx, cy, map.width, map.height):
                    if grid[by, bx] is None:
                        self.brush_stroke.add_instance((bx, by))

    def use_square_brush(self, size: int) -> SquareBrush:
        self.brush = SquareBrush(size, self.config.square_brush_max)
        return self.brush

    # -- view ---------------------------------------------------------------

    def set_zoom(self, zoom: float):
        self.zoom = self.config.clamp_zoom(zoom)
        self.update_motion(*self.pointer)

    def scroll(self, dy: float) -> bool:
        """Scroll wheel zoom. Ignored while another gesture is running."""
        if self._panning or self.drawing:
            return False
        self.set_zoom(self.zoom + dy * SCROLL_ZOOM_FACTOR * self.zoom)
        return True

    def zoom_begin(self):
        # Pinching takes over from drawing
        self.draw_cancel()
        self._zoom_start = self.zoom

    def zoom_scale_changed(self, scale_delta: float):
        self.set_zoom(self._zoom_start + scale_delta * self.zoom)

    def pan_begin(self):
        self._panning = True
        self._pan_start = (self.scroll_x, self.scroll_y)

    def pan_update(self, offset_x: float, offset_y: float):
        if not self._panning:
            return
        self.scroll_x = self._pan_start[0] - offset_x
        self.scroll_y = self._pan_start[1] - offset_y

    def pan_end(self):
        self._panning = False
        self.update_motion(*self.pointer)
