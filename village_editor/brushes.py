"""
Brush shapes for painting single-tile items.
A brush is a boolean mask stamped around every point of a stroke.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

THUMBNAIL_SIZE = (64, 64)


class BrushLoadError(Exception):
    """A brush image could not be read."""


class Brushable(ABC):
    """Something the editor can paint with."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    def file(self) -> Optional[str]:
        return None

    @abstractmethod
    def mask(self) -> np.ndarray:
        """A (height, width) boolean array, True where the brush paints."""

    @property
    def adjustable(self) -> bool:
        return False

    @property
    def thumbnail(self) -> Optional[Image.Image]:
        return None


class SquareBrush(Brushable):
    def __init__(self, size: int = 1, max_size: int = 10):
        self.max_size = max(1, max_size)
        self._size = 1
        self.size = size

    @property
    def name(self) -> str:
        return "Square Brush"

    @property
    def adjustable(self) -> bool:
        return True

    @property
    def size(self) -> int:
        return self._size

    @size.setter
    def size(self, value: int):
        self._size = max(1, min(self.max_size, int(value)))

    def mask(self) -> np.ndarray:
        return np.ones((self._size, self._size), dtype=bool)


class ImageMaskBrush(Brushable):
    """A fixed-size brush read from an image file."""

    def __init__(
        self,
        name: str,
        mask: np.ndarray,
        file: Optional[str] = None,
        thumbnail: Optional[Image.Image] = None,
    ):
        mask = np.asarray(mask, dtype=bool)
        if mask.ndim != 2 or mask.size == 0:
            raise ValueError(f"Brush mask must be a non-empty 2D array, got {mask.shape}")
        self._name = name
        self._mask = mask
        self._file = file
        self._thumbnail = thumbnail

    @classmethod
    def from_file(
        cls, path: Union[str, Path], name: Optional[str] = None
    ) -> "ImageMaskBrush":
        """Opaque (or, without alpha, non-black) pixels become the mask."""
        path = Path(path)
        try:
            with Image.open(path) as image:
                image.load()
                if "A" in image.getbands():
                    channel = image.getchannel("A")
                else:
                    channel = image.convert("L")
                mask = np.asarray(channel) > 0

                thumbnail = image.convert("RGBA")
                thumbnail.thumbnail(THUMBNAIL_SIZE)
        except (OSError, UnidentifiedImageError) as e:
            raise BrushLoadError(f"Could not load brush image {path}: {e}") from e

        return cls(name or path.stem, mask, file=str(path), thumbnail=thumbnail)

    @property
    def name(self) -> str:
        return self._name

    @property
    def file(self) -> Optional[str]:
        return self._file

    def mask(self) -> np.ndarray:
        return self._mask.copy()

    @property
    def thumbnail(self) -> Optional[Image.Image]:
        return self._thumbnail
