"""
Lightweight change notification for the editor's data model.
Callbacks are plain callables fired in connection order.
"""

from collections import Counter
from contextlib import contextmanager
from typing import Callable, List


class Signal:
    """A list of callbacks that can be emitted and temporarily blocked."""

    __slots__ = ["callbacks", "_blocked"]

    def __init__(self):
        self.callbacks: List[Callable] = []
        self._blocked: Counter = Counter()

    def connect(self, callback: Callable) -> Callable:
        self.callbacks.append(callback)
        return callback

    def disconnect(self, callback: Callable) -> bool:
        if callback in self.callbacks:
            self.callbacks.remove(callback)
            return True
        return False

    def emit(self, *args):
        # Copy so callbacks may disconnect themselves while being fired
        for callback in list(self.callbacks):
            if self._blocked[callback] > 0:
                continue
            callback(*args)

    @contextmanager
    def blocked(self, callback: Callable):
        """Suppress one callback for the duration of the block."""
        self._blocked[callback] += 1
        try:
            yield
        finally:
            self._blocked[callback] -= 1
            if self._blocked[callback] <= 0:
                del self._blocked[callback]

    def __len__(self) -> int:
        return len(self.callbacks)
