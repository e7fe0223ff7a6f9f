"""
Pytest configuration and shared fixtures for Village Editor tests.
"""

import pytest

from village_editor.catalog import ItemCatalog
from village_editor.config import EditorConfig
from village_editor.editor import MapEditor
from village_editor.map_handle import MapHandle
from village_editor.models import Item, ItemKind
from village_editor.stroke import Stroke
from village_editor.tile_map import Map


@pytest.fixture
def hut():
    """A 2x2 building."""
    return Item(id=10, name="Item A", kind=ItemKind.BUILDING, tile_width=2, tile_height=2)


@pytest.fixture
def wall():
    """A single-tile wall segment."""
    return Item(id=25, name="High Wall", kind=ItemKind.WALL)


@pytest.fixture
def moat():
    return Item(id=30, name="Moat", kind=ItemKind.MOAT)


@pytest.fixture
def archer():
    return Item(id=40, name="Archer", kind=ItemKind.UNIT)


@pytest.fixture
def catalog(hut, wall, moat, archer):
    return ItemCatalog([hut, wall, moat, archer])


@pytest.fixture
def tile_map():
    """An empty 32x32 map."""
    return Map("test", 32, 32)


@pytest.fixture
def make_stroke():
    """Build a stroke of `item` at the given positions."""

    def _make(item, *positions):
        stroke = Stroke(item)
        for pos in positions:
            stroke.add_instance(pos)
        return stroke

    return _make


@pytest.fixture
def filled_map(tile_map, wall, make_stroke):
    """A map with five single-instance wall strokes along the top row."""
    for x in range(5):
        tile_map.append_stroke(make_stroke(wall, (x, 0)))
    return tile_map


@pytest.fixture
def handle(tile_map):
    return MapHandle(tile_map)


@pytest.fixture
def config():
    return EditorConfig()


@pytest.fixture
def editor(handle, config):
    return MapEditor(handle, config)


class Recorder:
    """Collects the arguments of every emission of a signal."""

    def __init__(self, signal):
        self.calls = []
        signal.connect(self)

    def __call__(self, *args):
        self.calls.append(args)

    def __len__(self):
        return len(self.calls)


@pytest.fixture
def record():
    return Recorder
