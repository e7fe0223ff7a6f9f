"""
Tests for strokes and footprint overlap.
"""

import pytest

from village_editor.models import Item, StrokeInstance
from village_editor.stroke import Stroke, rects_intersect


class TestRectsIntersect:
    """Test the rectangle overlap helper."""

    def test_overlapping(self):
        assert rects_intersect((0, 0, 2, 2), (1, 1, 2, 2))

    def test_touching_edges_do_not_intersect(self):
        """Adjacent footprints share an edge but no tile."""
        assert not rects_intersect((0, 0, 2, 2), (2, 0, 2, 2))
        assert not rects_intersect((0, 0, 2, 2), (0, 2, 2, 2))

    def test_contained(self):
        assert rects_intersect((0, 0, 5, 5), (2, 2, 1, 1))

    def test_empty_rect_never_intersects(self):
        assert not rects_intersect((0, 0, 0, 3), (0, 0, 3, 3))
        assert not rects_intersect((0, 0, 3, 3), (1, 1, 2, -1))


class TestStrokeCreation:
    """Test stroke construction."""

    def test_requires_item(self):
        with pytest.raises(ValueError):
            Stroke(None)

    def test_new_stroke_is_empty(self, hut):
        stroke = Stroke(hut)
        assert len(stroke) == 0
        assert stroke.instances == ()
        assert stroke.item is hut

    def test_size_snapshot_at_creation(self, hut):
        """Changing the item afterwards does not resize existing strokes."""
        stroke = Stroke(hut)
        hut.tile_width = 5
        hut.tile_height = 4

        assert stroke.tile_width == 2
        assert stroke.tile_height == 2
        assert Stroke(hut).tile_width == 5

    def test_item_reference_stays_live(self, hut):
        stroke = Stroke(hut)
        hut.name = "Renamed"
        assert stroke.item.name == "Renamed"


class TestAddInstance:
    """Test the no-overlap invariant of add_instance."""

    def test_first_instance_accepted(self, hut):
        stroke = Stroke(hut)
        assert stroke.add_instance((3, 4))
        assert stroke.instances == (StrokeInstance(3, 4),)

    def test_overlap_rejected(self, hut):
        """Scenario: second footprint overlaps the first."""
        stroke = Stroke(hut)
        assert stroke.add_instance((0, 0))
        assert not stroke.add_instance((1, 1))
        assert len(stroke) == 1

    def test_adjacent_accepted(self, hut):
        stroke = Stroke(hut)
        assert stroke.add_instance((0, 0))
        assert stroke.add_instance((2, 0))
        assert stroke.add_instance((0, 2))
        assert len(stroke) == 3

    def test_single_tile_duplicate_rejected(self, wall):
        stroke = Stroke(wall)
        assert stroke.add_instance((5, 5))
        assert not stroke.add_instance((5, 5))
        assert stroke.add_instance((5, 6))

    def test_no_footprints_overlap_after_dense_feed(self):
        """Feeding every tile of an area never produces overlapping footprints."""
        item = Item(id=7, name="Big", tile_width=3, tile_height=2)
        stroke = Stroke(item)
        for y in range(12):
            for x in range(12):
                stroke.add_instance((x, y))

        footprints = list(stroke.footprints())
        assert len(footprints) > 1
        for i, a in enumerate(footprints):
            for b in footprints[i + 1 :]:
                assert not rects_intersect(a, b), f"{a} overlaps {b}"

    def test_instances_are_a_copy(self, wall):
        stroke = Stroke(wall)
        stroke.add_instance((0, 0))
        instances = stroke.instances
        stroke.add_instance((1, 0))
        assert len(instances) == 1

    def test_instances_are_named(self, wall):
        stroke = Stroke(wall)
        stroke.add_instance((4, 9))
        instance = stroke.instances[0]
        assert instance.x == 4
        assert instance.y == 9
