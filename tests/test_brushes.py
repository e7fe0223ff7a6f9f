"""
Tests for brush shapes.
"""

import numpy as np
import pytest
from PIL import Image

from village_editor.brushes import BrushLoadError, ImageMaskBrush, SquareBrush


class TestSquareBrush:
    """Test the adjustable square brush."""

    def test_mask(self):
        brush = SquareBrush(3)
        mask = brush.mask()
        assert mask.shape == (3, 3)
        assert mask.all()
        assert brush.adjustable
        assert brush.file is None

    def test_size_clamped(self):
        brush = SquareBrush(50, max_size=10)
        assert brush.size == 10
        brush.size = 0
        assert brush.size == 1


class TestImageMaskBrush:
    """Test brushes read from image files."""

    def test_alpha_mask(self, tmp_path):
        image = Image.new("RGBA", (5, 3), (255, 0, 0, 0))
        image.putpixel((0, 0), (255, 0, 0, 255))
        image.putpixel((4, 2), (0, 0, 0, 10))
        path = tmp_path / "splat.png"
        image.save(path)

        brush = ImageMaskBrush.from_file(path)
        mask = brush.mask()
        assert brush.name == "splat"
        assert brush.file == str(path)
        assert mask.shape == (3, 5)
        assert mask[0, 0] and mask[2, 4]
        assert mask.sum() == 2
        assert brush.thumbnail is not None
        assert not brush.adjustable

    def test_luminance_mask(self, tmp_path):
        image = Image.new("L", (4, 4), 0)
        image.putpixel((1, 2), 200)
        path = tmp_path / "dot.png"
        image.save(path)

        mask = ImageMaskBrush.from_file(path, name="Dot").mask()
        assert mask.sum() == 1
        assert mask[2, 1]

    def test_mask_is_a_copy(self):
        brush = ImageMaskBrush("x", np.ones((2, 2), dtype=bool))
        brush.mask()[0, 0] = False
        assert brush.mask().all()

    def test_bad_mask(self):
        with pytest.raises(ValueError):
            ImageMaskBrush("x", np.ones(3, dtype=bool))

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "brush.png"
        path.write_bytes(b"not an image")
        with pytest.raises(BrushLoadError):
            ImageMaskBrush.from_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(BrushLoadError):
            ImageMaskBrush.from_file(tmp_path / "missing.png")
