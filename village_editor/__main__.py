#!/usr/bin/env python3
"""
Village Editor command line.
Inspect maps and convert between AIV files and the editor's TOML maps.
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.table import Table

from . import aiv, storage
from .catalog import ItemCatalog
from .config import DEFAULT_CONFIG_PATH, EditorConfig
from .log import setup_logging
from .map_handle import MapHandle
from .renderer import render_grid
from .tile_map import Map

logger = logging.getLogger(__name__)


def load_catalog(config: EditorConfig) -> ItemCatalog:
    if config.catalog_dir:
        return ItemCatalog.from_directory(config.catalog_dir)
    return ItemCatalog.default()


def get_converter(config: EditorConfig) -> Optional[aiv.Converter]:
    if not config.python_exe:
        logger.error(
            "AIV conversion needs a python installation with the sourcehold "
            "module. Set python_exe under [editor] in %s.",
            DEFAULT_CONFIG_PATH,
        )
        return None
    return aiv.Converter(config.python_exe, config.module_dir)


def open_map(path: str, catalog: ItemCatalog, config: EditorConfig) -> Optional[Map]:
    if path.lower().endswith(".aiv"):
        converter = get_converter(config)
        if converter is None:
            return None
        try:
            return aiv.load_map(path, catalog, converter)
        except aiv.MapError as e:
            logger.error("Could not parse %s: %s", path, e)
            return None
    return storage.load_map(path, catalog)


def cmd_catalog(args, config: EditorConfig, console: Console) -> int:
    catalog = load_catalog(config)
    table = Table(title=f"Items ({len(catalog)})")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Size", justify="center")
    table.add_column("Used", justify="right")
    for item in catalog:
        table.add_row(
            str(item.id),
            item.name,
            item.kind.value,
            f"{item.tile_width}x{item.tile_height}",
            str(config.item_frequencies.get(item.name, 0)),
        )
    console.print(table)
    return 0


def cmd_info(args, config: EditorConfig, console: Console) -> int:
    map = open_map(args.file, load_catalog(config), config)
    if map is None:
        return 1

    handle = MapHandle(map, insert_mode=config.insert_mode)
    if args.cursor is not None:
        handle.set_cursor(args.cursor)

    table = Table(title=f"{map.name} ({map.width}x{map.height})")
    table.add_column("#", justify="right")
    table.add_column("Item")
    table.add_column("Kind")
    table.add_column("Instances", justify="right")
    table.add_column("State")
    for i, stroke in enumerate(handle.strokes):
        state = "active" if i < handle.cursor else "[dim]memory[/dim]"
        table.add_row(
            str(i), stroke.item.name, stroke.item.kind.value, str(len(stroke)), state
        )
    console.print(table)
    console.print(f"Cursor: {handle.cursor} / {len(handle)}")
    return 0


def cmd_preview(args, config: EditorConfig, console: Console) -> int:
    map = open_map(args.file, load_catalog(config), config)
    if map is None:
        return 1

    handle = MapHandle(map, insert_mode=config.insert_mode)
    if args.cursor is not None:
        handle.set_cursor(args.cursor)

    for row in render_grid(handle.grid):
        console.print(row, no_wrap=True, overflow="crop")
    return 0


def cmd_import(args, config: EditorConfig, console: Console) -> int:
    converter = get_converter(config)
    if converter is None:
        return 1
    try:
        map = aiv.load_map(args.input, load_catalog(config), converter)
    except aiv.MapError as e:
        logger.error("Could not import %s: %s", args.input, e)
        return 1
    if not storage.save_map(map, args.output):
        return 1
    console.print(f"Imported {len(map.strokes)} strokes into {args.output}")
    return 0


def cmd_export(args, config: EditorConfig, console: Console) -> int:
    converter = get_converter(config)
    if converter is None:
        return 1
    map = storage.load_map(args.input, load_catalog(config))
    if map is None:
        return 1
    try:
        aiv.save_map(map, args.output, converter)
    except aiv.MapError as e:
        logger.error("Could not export %s: %s", args.output, e)
        return 1
    console.print(f"Exported {len(map.strokes)} strokes to {args.output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="village-editor", description="Stroke-based map editor tools"
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("catalog", help="List the placeable items")
    p.set_defaults(func=cmd_catalog)

    p = sub.add_parser("info", help="Show the stroke timeline of a map")
    p.add_argument("file")
    p.add_argument("--cursor", type=int, help="Move the history cursor first")
    p.set_defaults(func=cmd_info)

    p = sub.add_parser("preview", help="Draw a map in the terminal")
    p.add_argument("file")
    p.add_argument("--cursor", type=int, help="Move the history cursor first")
    p.set_defaults(func=cmd_preview)

    p = sub.add_parser("import", help="Convert an AIV file to a TOML map")
    p.add_argument("input")
    p.add_argument("output")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("export", help="Convert a TOML map to an AIV file")
    p.add_argument("input")
    p.add_argument("output")
    p.set_defaults(func=cmd_export)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    config = EditorConfig.load_from_toml(args.config)
    console = Console()

    try:
        return args.func(args, config, console)
    except KeyboardInterrupt:
        console.print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
