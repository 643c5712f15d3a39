"""
Helpers for assembling map file contents in tests.
"""

import struct

from typing import Sequence


MAGIC = b'\x0bCELESTE MAP'


def varlen(value: int) -> bytes:
    out = bytearray()

    while True:
        group = value & 0x7F
        value >>= 7

        if value == 0:
            out.append(group)
            return bytes(out)

        out.append(group | 0x80)


def inline_string(text: str) -> bytes:
    data = text.encode('utf-8')
    return varlen(len(data)) + data


def i16(value: int) -> bytes:
    return struct.pack('<h', value)


def i32(value: int) -> bytes:
    return struct.pack('<i', value)


def i64(value: int) -> bytes:
    return struct.pack('<q', value)


def attribute(name_index: int, tag: int, payload: bytes) -> bytes:
    return i16(name_index) + bytes([tag]) + payload


def element(name_index: int, attributes: Sequence[bytes] = (), children: Sequence[bytes] = ()) -> bytes:
    return i16(name_index) + bytes([len(attributes)]) + b''.join(attributes) + i16(len(children)) + b''.join(children)


def map_file(package_name: str, table: Sequence[str], root: bytes) -> bytes:
    return MAGIC + inline_string(package_name) + i16(len(table)) + b''.join(inline_string(s) for s in table) + root


SAMPLE_TABLE = [
    'Map', 'levels', 'level', 'name', 'x', 'y', 'width', 'height', 'solids', 'innerText', 'lvl_a-00', 'Filler',
]

(
    IDX_MAP, IDX_LEVELS, IDX_LEVEL, IDX_NAME, IDX_X, IDX_Y, IDX_WIDTH, IDX_HEIGHT, IDX_SOLIDS, IDX_INNER_TEXT,
    IDX_A00, IDX_FILLER,
) = range(len(SAMPLE_TABLE))

SAMPLE_TILES_RLE = i16(10) + bytes([3, ord('0'), 3, ord('1'), 1, ord('\n'), 1, ord('0'), 1, ord('1')])
SAMPLE_TILES = "000111\n01"

SAMPLE_ROOM_1 = element(
    IDX_LEVEL,
    [
        attribute(IDX_NAME, 5, i16(IDX_A00)),
        attribute(IDX_X, 3, i32(0)),
        attribute(IDX_Y, 3, i32(0)),
        attribute(IDX_WIDTH, 3, i32(320)),
        attribute(IDX_HEIGHT, 3, i32(184)),
    ],
    [
        element(IDX_SOLIDS, [attribute(IDX_INNER_TEXT, 7, SAMPLE_TILES_RLE)]),
    ]
)

SAMPLE_ROOM_2 = element(
    IDX_LEVEL,
    [
        attribute(IDX_NAME, 6, inline_string('lvl_b-01')),
        attribute(IDX_X, 2, i16(-40)),
        attribute(IDX_Y, 1, bytes([200])),
        attribute(IDX_WIDTH, 8, i64(40)),
        attribute(IDX_HEIGHT, 3, i32(16)),
    ]
)

SAMPLE_MAP = map_file(
    'Celeste/1-ForsakenCity',
    SAMPLE_TABLE,
    element(IDX_MAP, [], [
        element(IDX_LEVELS, [], [SAMPLE_ROOM_1, SAMPLE_ROOM_2]),
        element(IDX_FILLER),
    ])
)
