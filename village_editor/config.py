"""
Configuration settings for the Village Editor.
"""

import logging
import os
from typing import Dict, Optional

import toml
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "village_editor.toml"


class EditorConfig(BaseModel):
    """Settings shared by the editor, the catalog loader and map I/O."""

    # AIV conversion (sourcehold)
    python_exe: Optional[str] = None
    module_dir: Optional[str] = None

    # Item records, defaults to the ones bundled with the package
    catalog_dir: Optional[str] = None

    # History
    insert_mode: bool = False

    # View
    base_tile_size: float = 16.0
    zoom_min: float = 0.5
    zoom_max: float = 7.5
    zoom_default: float = 1.0
    border_gap: int = 2

    # Brushes
    square_brush_max: int = 10

    # Item name -> number of committed strokes. Counted in memory by the
    # editor, kept across sessions by whoever owns the config calling
    # save_to_toml.
    item_frequencies: Dict[str, int] = {}

    model_config = ConfigDict(extra="allow")

    def clamp_zoom(self, zoom: float) -> float:
        return max(self.zoom_min, min(self.zoom_max, zoom))

    @classmethod
    def load_from_toml(cls, path: str = DEFAULT_CONFIG_PATH) -> "EditorConfig":
        """Load configuration from a TOML file."""
        if not os.path.exists(path):
            logger.warning("Config file %s not found. Using defaults.", path)
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = toml.load(f)

            config = cls(**data.get("editor", {}))
            config.item_frequencies = dict(data.get("item_frequencies", {}))
            return config
        except Exception as e:
            logger.error("Error loading config %s: %s", path, e)
            return cls()

    def save_to_toml(self, path: str = DEFAULT_CONFIG_PATH) -> bool:
        settings = self.model_dump(exclude={"item_frequencies"}, exclude_none=True)
        data = {"editor": settings, "item_frequencies": dict(self.item_frequencies)}
        try:
            os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                toml.dump(data, f)
            return True
        except OSError as e:
            logger.error("Error saving config %s: %s", path, e)
            return False
