"""
AIV import and export.

The game's map files are converted to and from an intermediate JSON
document by the `sourcehold` Python module, run as a subprocess. This
module builds maps from that document and writes it back out.
"""

import json
import logging
import subprocess
import tempfile
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .catalog import ItemCatalog
from .stroke import Stroke
from .tile_map import Map

logger = logging.getLogger(__name__)

# Tile offsets in the document are packed as y * 100 + x. This is a fixed
# detail of the file format, independent of the editor's map size limits.
AIV_OFFSET_STRIDE = 100

PathLike = Union[str, Path]


class MapError(Exception):
    """Base class for map import/export failures."""


class ConverterFailedError(MapError):
    """The conversion process could not run or exited with an error."""


class InvalidStructureError(MapError):
    """The intermediate JSON document is unreadable or malformed."""


class OperationCancelledError(MapError):
    """The operation was cancelled before it started."""


class AivFrame(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    item_type: int = Field(alias="itemType")
    tile_position_offsets: List[int] = Field(alias="tilePositionOfsets")
    should_pause: bool = Field(default=False, alias="shouldPause")


class AivDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    frames: List[AivFrame]
    misc_items: List[Any] = Field(default_factory=list, alias="miscItems")
    pause_delay_amount: int = Field(default=0, alias="pauseDelayAmount")


def pack_offset(x: int, y: int) -> int:
    return y * AIV_OFFSET_STRIDE + x


def unpack_offset(offset: int) -> Tuple[int, int]:
    y, x = divmod(offset, AIV_OFFSET_STRIDE)
    return x, y


class Cancellable:
    """Cooperative cancellation flag shared with a background operation."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise OperationCancelledError("Operation was cancelled")


class Converter:
    """Runs `sourcehold convert aiv` with a configured interpreter."""

    def __init__(self, python_exe: str, module_dir: Optional[str] = None):
        if not python_exe:
            raise ValueError("A python interpreter with sourcehold is required")
        self.python_exe = python_exe
        self.module_dir = module_dir

    def command(self, input_path: PathLike, output_path: PathLike) -> List[str]:
        return [
            self.python_exe,
            "-m",
            "sourcehold",
            "convert",
            "aiv",
            "--input",
            str(input_path),
            "--output",
            str(output_path),
        ]

    def run(self, input_path: PathLike, output_path: PathLike):
        cmd = self.command(input_path, output_path)
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd, cwd=self.module_dir, capture_output=True, text=True
            )
        except OSError as e:
            raise ConverterFailedError(f"Could not start {self.python_exe}: {e}") from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            logger.error("sourcehold exited with status %d", result.returncode)
            raise ConverterFailedError(
                f"sourcehold exited with status {result.returncode}: {detail}"
            )


def read_document(path: PathLike) -> AivDocument:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidStructureError(f"Could not read {path}: {e}") from e

    try:
        return AivDocument.model_validate(data)
    except ValidationError as e:
        raise InvalidStructureError(f"Unexpected JSON structure in {path}: {e}") from e


def write_document(document: AivDocument, path: PathLike):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document.model_dump(by_alias=True), f, indent=2)


def map_from_document(document: AivDocument, catalog: ItemCatalog, name: str) -> Map:
    """Build a map with one stroke per frame.

    Frames naming an item the catalog does not know are skipped.
    """
    map = Map(name)
    for index, frame in enumerate(document.frames):
        item = catalog.query_id(frame.item_type)
        if item is None:
            logger.warning(
                "Skipping frame %d: unknown item type %d", index, frame.item_type
            )
            continue

        stroke = Stroke(item)
        for offset in frame.tile_position_offsets:
            x, y = unpack_offset(offset)
            stroke.add_instance((x - item.tile_offset_x, y - item.tile_offset_y))
        map.append_stroke(stroke)
    return map


def document_from_strokes(strokes: Iterable[Stroke]) -> AivDocument:
    frames = []
    for stroke in strokes:
        item = stroke.item
        frames.append(
            AivFrame(
                item_type=item.id,
                tile_position_offsets=[
                    pack_offset(x + item.tile_offset_x, y + item.tile_offset_y)
                    for x, y in stroke.instances
                ],
                should_pause=False,
            )
        )
    return AivDocument(frames=frames, misc_items=[], pause_delay_amount=0)


def load_map(
    path: PathLike,
    catalog: ItemCatalog,
    converter: Converter,
    cancellable: Optional[Cancellable] = None,
) -> Map:
    """Convert an AIV file and build a new Map from it."""
    if cancellable is not None:
        cancellable.raise_if_cancelled()

    path = Path(path)
    with tempfile.TemporaryDirectory(prefix="village-editor-") as tmp:
        json_path = Path(tmp) / f"{path.stem}.json"
        converter.run(path, json_path)
        document = read_document(json_path)

    map = map_from_document(document, catalog, path.stem)
    logger.info("Loaded %s with %d strokes", path, len(map.strokes))
    return map


def save_map(
    source: Union[Map, Iterable[Stroke]],
    path: PathLike,
    converter: Converter,
    cancellable: Optional[Cancellable] = None,
) -> bool:
    """Write a map (or a snapshot of its strokes) to an AIV file."""
    if cancellable is not None:
        cancellable.raise_if_cancelled()

    strokes = source.snapshot() if isinstance(source, Map) else tuple(source)
    document = document_from_strokes(strokes)

    path = Path(path)
    with tempfile.TemporaryDirectory(prefix="village-editor-") as tmp:
        json_path = Path(tmp) / f"{path.stem}.json"
        write_document(document, json_path)
        converter.run(json_path, path)

    logger.info("Saved %d strokes to %s", len(strokes), path)
    return True


class MapIO:
    """Runs AIV import/export on a worker thread.

    Each call returns a Future that settles once, with either the result or
    the MapError that ended it. `callback`, when given, receives the future
    on the worker thread.
    """

    def __init__(
        self,
        catalog: ItemCatalog,
        converter: Converter,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.catalog = catalog
        self.converter = converter
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="map-io"
        )

    def load_async(
        self,
        path: PathLike,
        callback: Optional[Callable[[Future], None]] = None,
        cancellable: Optional[Cancellable] = None,
    ) -> Future:
        future = self._executor.submit(
            load_map, path, self.catalog, self.converter, cancellable
        )
        if callback is not None:
            future.add_done_callback(callback)
        return future

    def save_async(
        self,
        map: Map,
        path: PathLike,
        callback: Optional[Callable[[Future], None]] = None,
        cancellable: Optional[Cancellable] = None,
    ) -> Future:
        # Snapshot now, on the caller's thread, so later edits don't leak in
        snapshot = map.snapshot()
        future = self._executor.submit(
            save_map, snapshot, path, self.converter, cancellable
        )
        if callback is not None:
            future.add_done_callback(callback)
        return future

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)
