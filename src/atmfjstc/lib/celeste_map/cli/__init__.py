"""
Command-line tool for inspecting Celeste map files.

Usage::

    celeste-map-info [--json] [--tree] [--verbose] FILE [FILE ...]

For each file, the tool prints a short summary (package name, number of elements and rooms, overall size). Files that
fail to decode are reported and skipped, and the tool moves on to the next file. The exit code is 1 if any file
failed, 0 otherwise.
"""

import json
import logging
import dataclasses

from typing import Optional, Sequence
from argparse import ArgumentParser, Namespace
from pathlib import Path

import colorama

from atmfjstc.lib.celeste_map import decode_map, Map, Attribute, AttributeType, MapFormatError
from atmfjstc.lib.celeste_map.statistics import bounding_box, room_details
from atmfjstc.lib.celeste_map.cli.console import console
from atmfjstc.lib.celeste_map.cli.errors import DescriptiveError, pretty_unhandled


logger = logging.getLogger(__name__)


MAX_SHOWN_STRING_LENGTH = 40


@pretty_unhandled()
def main(argv: Optional[Sequence[str]] = None) -> int:
    colorama.just_fix_windows_console()

    args = _parse_args(argv)

    init_console_friendly_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.json:
        console.pipe_mode()
    else:
        console.normal_mode()

    reports = []
    n_failed = 0

    for path in args.files:
        data = _read_map_file(path)

        try:
            map_ = decode_map(data)
        except MapFormatError as e:
            n_failed += 1
            console.print_error(f"{path}: {e}")
            reports.append(dict(file=path, error=str(e)))
            continue

        logger.debug(f"Decoded {path}")

        if args.json:
            reports.append(_map_report(path, map_))
        else:
            console.print_info(_map_summary(path, map_))
            if args.tree:
                print(render_tree(map_))

    if args.json:
        print(json.dumps(reports, indent=2))
    elif n_failed > 0:
        console.print_warning(f"{n_failed} of {len(args.files)} maps could not be decoded")
    else:
        console.print_success(f"Decoded {len(args.files)} maps")

    return 1 if n_failed > 0 else 0


def init_console_friendly_logging(level: int = logging.INFO):
    """
    Initializes logging appropriate for running the tool in the console: a timestamp and the level name are attached
    to each message.
    """
    logging.basicConfig(
        level=level,
        style='{',
        format='[{asctime}] {levelname}: {message}',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def render_tree(map_: Map) -> str:
    """
    Renders the element tree of a map as indented text, one element per line, showing its attributes.
    """
    lines = []

    for element, depth in map_.iter_elements():
        attrs = ''.join(f" {name}={format_attribute(value)}" for name, value in element.attributes)
        lines.append(f"{'  ' * depth}{element.name}{attrs}")

    return '\n'.join(lines)


def format_attribute(attr: Attribute) -> str:
    if attr.type == AttributeType.STRING:
        text = attr.as_string()
        if len(text) > MAX_SHOWN_STRING_LENGTH:
            return repr(text[:MAX_SHOWN_STRING_LENGTH]) + '...'

        return repr(text)

    if attr.type == AttributeType.BOOL:
        return 'true' if attr.as_bool() else 'false'

    return str(attr.value)


def _parse_args(argv: Optional[Sequence[str]]) -> Namespace:
    parser = ArgumentParser(prog='celeste-map-info', description="Decode Celeste map (.bin) files and summarize them")

    parser.add_argument('files', metavar='FILE', nargs='+', help="map files to decode")
    parser.add_argument('--json', action='store_true', help="print the room details of each map as JSON")
    parser.add_argument('--tree', action='store_true', help="also print the element tree of each map")
    parser.add_argument('-v', '--verbose', action='store_true', help="show debug messages")

    return parser.parse_args(argv)


def _read_map_file(path: str) -> bytes:
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise DescriptiveError(f"Cannot read map file '{path}'") from e

    logger.debug(f"Read {len(data)} bytes from {path}")

    return data


def _map_summary(path: str, map_: Map) -> str:
    n_elements = sum(1 for _ in map_.iter_elements())
    rooms = room_details(map_)
    bounds = bounding_box(map_)

    parts = [f"package '{map_.package_name}'", f"{n_elements} elements"]

    if rooms is not None:
        parts.append(f"{len(rooms)} rooms")
        parts.append(f"{sum(room.solid_tile_count() for room in rooms)} solid tiles")
    if bounds is not None:
        parts.append(f"bounds {bounds.width}x{bounds.height} at ({bounds.x}, {bounds.y})")

    return f"{path}: {', '.join(parts)}"


def _map_report(path: str, map_: Map) -> dict:
    rooms = room_details(map_)
    bounds = bounding_box(map_)

    return dict(
        file=path,
        package_name=map_.package_name,
        bounding_box=dataclasses.asdict(bounds) if bounds is not None else None,
        rooms=[dataclasses.asdict(room) for room in rooms] if rooms is not None else None,
    )
