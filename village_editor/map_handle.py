"""
Edit history for the Village Editor.

A MapHandle splits a map's timeline at a single cursor. Strokes before the
cursor live on the map (the active sequence); strokes after it are held in
memory, ready to be redone. Moving the cursor moves strokes between the two
without ever copying or dropping them.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from .signals import Signal
from .stroke import Stroke
from .tile_map import Map

logger = logging.getLogger(__name__)


class MapHandle:
    """Cursor-based undo/redo over one map's strokes.

    Signals:
        cursor_changed: (cursor) after the cursor moves
        model_changed: (position, removed, added) when the merged
            active-then-memory view changes, in merged coordinates
        insert_mode_changed: (insert_mode)
        lock_hint_changed: (lock_hinted)
        grid_changed: () when the map's raster goes stale
    """

    def __init__(self, map: Optional[Map] = None, insert_mode: bool = False):
        self._map: Optional[Map] = None
        self._memory = []
        self._cursor = 0
        self._insert_mode = insert_mode
        self._lock_hinted = False

        self.cursor_changed = Signal()
        self.model_changed = Signal()
        self.insert_mode_changed = Signal()
        self.lock_hint_changed = Signal()
        self.grid_changed = Signal()

        if map is not None:
            self.attach(map)

    # -- map ownership ------------------------------------------------------

    @property
    def map(self) -> Optional[Map]:
        return self._map

    def attach(self, map: Optional[Map]):
        """Start tracking `map`, forgetting any previous map and its memory.

        Passing None detaches.
        """
        old_len = len(self)

        if self._map is not None:
            self._map.strokes.items_changed.disconnect(self._strokes_changed)
            self._map.grid_changed.disconnect(self._map_grid_changed)

        self._memory.clear()
        self._map = map

        if map is not None:
            self._cursor = len(map.strokes)
            map.strokes.items_changed.connect(self._strokes_changed)
            map.grid_changed.connect(self._map_grid_changed)
        else:
            self._cursor = 0

        new_len = len(self)
        if old_len or new_len:
            self.model_changed.emit(0, old_len, new_len)
        self.grid_changed.emit()
        self.cursor_changed.emit(self._cursor)

    def detach(self):
        self.attach(None)

    # -- read model ---------------------------------------------------------

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def active(self) -> Tuple[Stroke, ...]:
        if self._map is None:
            return ()
        return self._map.snapshot()

    @property
    def memory(self) -> Tuple[Stroke, ...]:
        return tuple(self._memory)

    @property
    def strokes(self) -> Tuple[Stroke, ...]:
        """The merged view: active strokes followed by memory."""
        return self.active + self.memory

    def __len__(self) -> int:
        if self._map is None:
            return 0
        return len(self._map.strokes) + len(self._memory)

    def __getitem__(self, index: int) -> Stroke:
        return self.strokes[index]

    @property
    def grid(self) -> Optional[np.ndarray]:
        if self._map is None:
            return None
        return self._map.grid

    @property
    def can_undo(self) -> bool:
        return self._map is not None and self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._map is not None and self._cursor < len(self)

    # -- flags --------------------------------------------------------------

    @property
    def insert_mode(self) -> bool:
        """When True, new strokes no longer discard the redo memory."""
        return self._insert_mode

    @insert_mode.setter
    def insert_mode(self, value: bool):
        value = bool(value)
        if value != self._insert_mode:
            self._insert_mode = value
            self.insert_mode_changed.emit(value)

    @property
    def lock_hinted(self) -> bool:
        """Advisory flag telling other holders not to scrub right now."""
        return self._lock_hinted

    @lock_hinted.setter
    def lock_hinted(self, value: bool):
        value = bool(value)
        if value != self._lock_hinted:
            self._lock_hinted = value
            self.lock_hint_changed.emit(value)

    # -- cursor movement ----------------------------------------------------

    def set_cursor(self, new_cursor: int):
        """Move the split point, clamped to [0, len(active) + len(memory)].

        Moving back takes strokes off the end of the map and puts them, in
        order, at the front of memory. Moving forward does the reverse.
        """
        if self._map is None:
            return

        strokes = self._map.strokes
        new_cursor = max(0, min(int(new_cursor), len(strokes) + len(self._memory)))
        if new_cursor == self._cursor:
            return

        with strokes.items_changed.blocked(self._strokes_changed):
            if new_cursor < self._cursor:
                moved = strokes.splice(new_cursor, self._cursor - new_cursor)
                self._memory[0:0] = moved
            else:
                count = new_cursor - self._cursor
                moved = self._memory[:count]
                del self._memory[:count]
                strokes.splice(len(strokes), 0, moved)

        logger.debug(
            "Cursor %d -> %d (%d active, %d in memory)",
            self._cursor,
            new_cursor,
            len(strokes),
            len(self._memory),
        )
        self._cursor = new_cursor
        self.cursor_changed.emit(new_cursor)

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        self.set_cursor(self._cursor - 1)
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        self.set_cursor(self._cursor + 1)
        return True

    def clear_all(self):
        """Drop every stroke, on the map and in memory."""
        if self._map is None:
            return

        old_len = len(self)
        with self._map.strokes.items_changed.blocked(self._strokes_changed):
            self._map.strokes.clear()
        self._memory.clear()

        if old_len:
            self.model_changed.emit(0, old_len, 0)
        if self._cursor != 0:
            self._cursor = 0
            self.cursor_changed.emit(0)

    # -- observation --------------------------------------------------------

    def _strokes_changed(self, position: int, removed: int, added: int):
        # Memory always sits after the map's strokes, so map positions are
        # already merged-view positions
        self.model_changed.emit(position, removed, added)

        strokes = self._map.strokes
        if not self._insert_mode and added > 0 and self._memory:
            discarded = len(self._memory)
            self._memory.clear()
            logger.debug("Discarded %d strokes of redo memory", discarded)
            self.model_changed.emit(len(strokes), discarded, 0)

        new_cursor = len(strokes)
        if new_cursor != self._cursor:
            self._cursor = new_cursor
            self.cursor_changed.emit(new_cursor)

    def _map_grid_changed(self):
        self.grid_changed.emit()

    def __repr__(self) -> str:
        return (
            f"MapHandle(cursor={self._cursor}, active={len(self) - len(self._memory)}, "
            f"memory={len(self._memory)}, insert_mode={self._insert_mode})"
        )
