"""
Decoding of typed attribute values.

Each value is preceded by a one-byte type tag that selects how the following bytes are to be interpreted. Note that
there are three encodings for strings (a string table reference, an inline string and a run-length encoded string),
all of which decode to a plain `AttributeType.STRING` value.
"""

from enum import IntEnum
from typing import Optional, Callable, Dict

from atmfjstc.lib.celeste_map.ByteCursor import ByteCursor
from atmfjstc.lib.celeste_map.string_table import StringTable
from atmfjstc.lib.celeste_map.model import Attribute
from atmfjstc.lib.celeste_map.errors import MapFormatError, NegativeLengthError, OddLengthError, \
    UnknownAttributeTypeError


class AttributeTag(IntEnum):
    BOOL = 0
    BYTE = 1
    SHORT = 2
    INT = 3
    FLOAT = 4
    STRING_REF = 5
    STRING = 6
    STRING_RLE = 7
    LONG = 8
    DOUBLE = 9


def decode_attribute(cursor: ByteCursor, table: StringTable, meaning: Optional[str] = None) -> Attribute:
    """
    Decodes a type tag and the attribute value that follows it.

    Args:
        cursor: The cursor to read from.
        table: The string table, for resolving string references.
        meaning: An indication as to what attribute is being read (e.g. "attribute 'x'"). It is used in the text of
            any exceptions that may be thrown.

    Returns:
        The decoded `Attribute`.

    Raises:
        UnknownAttributeTypeError: If the type tag is not one of those in `AttributeTag`.
        MapFormatError: Other subclasses, if the value itself is malformed or truncated.
    """

    position = cursor.tell()

    tag = cursor.read_u8(f"type of {meaning or 'attribute'}")

    decoder = _DECODERS_BY_TAG.get(tag)
    if decoder is None:
        cursor.seek(position)
        raise UnknownAttributeTypeError(position, tag, meaning)

    return decoder(cursor, table, meaning or 'attribute')


def decode_rle_string(cursor: ByteCursor, meaning: Optional[str] = None) -> str:
    """
    Decodes a run-length encoded string.

    The string is stored as a signed 16-bit byte length, followed by (repeat count, character code) byte pairs. Each
    character code is a single-byte (Latin-1) character.

    Raises:
        NegativeLengthError: If the length is negative.
        OddLengthError: If the length is not a whole number of pairs.
    """

    position = cursor.tell()

    length = cursor.read_i16_le(f"length of {meaning or 'RLE string'}")
    if length < 0:
        cursor.seek(position)
        raise NegativeLengthError(position, length, meaning)
    if length % 2 != 0:
        cursor.seek(position)
        raise OddLengthError(position, length, meaning)

    try:
        data = cursor.read_amount(length, meaning)
    except MapFormatError:
        cursor.seek(position)
        raise

    return ''.join(chr(char_code) * count for count, char_code in zip(data[0::2], data[1::2]))


_AttributeDecoder = Callable[[ByteCursor, StringTable, str], Attribute]

_DECODERS_BY_TAG: Dict[int, _AttributeDecoder] = {
    AttributeTag.BOOL: lambda cursor, _table, meaning: Attribute.from_bool(cursor.read_u8(meaning) != 0),
    AttributeTag.BYTE: lambda cursor, _table, meaning: Attribute.from_byte(cursor.read_u8(meaning)),
    AttributeTag.SHORT: lambda cursor, _table, meaning: Attribute.from_short(cursor.read_i16_le(meaning)),
    AttributeTag.INT: lambda cursor, _table, meaning: Attribute.from_int(cursor.read_i32_le(meaning)),
    AttributeTag.FLOAT: lambda cursor, _table, meaning: Attribute.from_float(cursor.read_f32_le(meaning)),
    AttributeTag.STRING_REF:
        lambda cursor, table, meaning: Attribute.from_string(table.read_reference(cursor, meaning)),
    AttributeTag.STRING:
        lambda cursor, _table, meaning: Attribute.from_string(cursor.read_length_prefixed_utf8(meaning)),
    AttributeTag.STRING_RLE:
        lambda cursor, _table, meaning: Attribute.from_string(decode_rle_string(cursor, meaning)),
    AttributeTag.LONG: lambda cursor, _table, meaning: Attribute.from_long(cursor.read_i64_le(meaning)),
    AttributeTag.DOUBLE: lambda cursor, _table, meaning: Attribute.from_double(cursor.read_f64_le(meaning)),
}
