"""
Summary information extracted from decoded maps, e.g. for building a catalog of maps or drawing an overview of them.

Everything here works on the `Element` query functions only. Maps that lack the expected structure are not an error:
the functions simply return None.
"""

from dataclasses import dataclass
from typing import Optional, List, Tuple

from atmfjstc.lib.celeste_map.model import Map, Element


@dataclass(frozen=True)
class BoundingBox:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class RoomDetails:
    """
    The position and size of a room (a.k.a. level) in a map, along with its solid tiles.

    The `tiles` are stored as in the file: one line of text per row of tiles, one character per tile, with ``'0'``
    meaning an empty tile.
    """

    name: str
    x: int
    y: int
    width: int
    height: int
    tiles: str

    def solid_tile_count(self) -> int:
        return sum(1 for char in self.tiles if char not in "0\r\n")


def room_details(map_: Map) -> Optional[List[RoomDetails]]:
    """
    Gets the details of all the rooms in a map, in the order they occur in the file.

    Returns None if the map has no ``levels`` element, or if some room lacks integer ``x``, ``y``, ``width`` or
    ``height`` attributes. A room without a ``solids`` element is reported as having no tiles.
    """

    rooms = map_.root.get_child('levels')
    if rooms is None:
        return None

    result = []

    for room in rooms.children:
        geometry = _room_geometry(room)
        if geometry is None:
            return None

        name = room.get_attribute('name')

        result.append(RoomDetails(
            (name.as_string() if name is not None else None) or '',
            *geometry,
            tiles=_room_tiles(room),
        ))

    return result


def bounding_box(map_: Map) -> Optional[BoundingBox]:
    """
    Computes the smallest rectangle enclosing all the rooms in a map.

    Returns None if the map has no rooms, or if some room lacks integer ``x``, ``y``, ``width`` or ``height``
    attributes.
    """

    rooms = map_.root.get_child('levels')
    if rooms is None:
        return None

    bounds = None

    for room in rooms.children:
        geometry = _room_geometry(room)
        if geometry is None:
            return None

        x, y, width, height = geometry

        if bounds is None:
            bounds = (x, y, x + width, y + height)
        else:
            bounds = (min(bounds[0], x), min(bounds[1], y), max(bounds[2], x + width), max(bounds[3], y + height))

    if bounds is None:
        return None

    left, top, right, bottom = bounds

    return BoundingBox(left, top, right - left, bottom - top)


def _room_geometry(room: Element) -> Optional[Tuple[int, int, int, int]]:
    values = []

    for attr_name in ('x', 'y', 'width', 'height'):
        attr = room.get_attribute(attr_name)
        value = attr.as_integer() if attr is not None else None
        if value is None:
            return None

        values.append(value)

    return tuple(values)


def _room_tiles(room: Element) -> str:
    solids = room.get_child('solids')
    if solids is None:
        return ''

    text = solids.get_attribute('innerText')

    return (text.as_string() if text is not None else None) or ''
