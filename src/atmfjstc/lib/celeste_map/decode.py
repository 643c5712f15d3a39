from atmfjstc.lib.celeste_map.ByteCursor import ByteCursor, BufferLike
from atmfjstc.lib.celeste_map.string_table import read_string_table
from atmfjstc.lib.celeste_map.elements import decode_element
from atmfjstc.lib.celeste_map.model import Map


CELESTE_MAP_MAGIC = b'\x0bCELESTE MAP'
"""The header of every map file: the literal "CELESTE MAP", preceded by its length."""


def decode_map(data: BufferLike) -> Map:
    """
    Decodes a complete map file.

    The file consists of the magic header, the package name (an inline string), the string table and a single root
    element. The data must be consumed exactly; nothing may follow the root element.

    Decoding is a pure function of the input: the buffer is not modified or retained, and concurrent calls on
    different buffers need no coordination.

    Args:
        data: The contents of a ``.bin`` map file.

    Returns:
        The decoded `Map`.

    Raises:
        MapFormatError: If the data is not a well-formed map. The first problem encountered aborts the decoding; no
            partial map is ever returned.
    """

    cursor = ByteCursor(data)

    cursor.expect_magic(CELESTE_MAP_MAGIC, "map header")

    package_name = cursor.read_length_prefixed_utf8("package name")
    table = read_string_table(cursor)
    root = decode_element(cursor, table)

    cursor.expect_end("root element")

    return Map(package_name, root)
