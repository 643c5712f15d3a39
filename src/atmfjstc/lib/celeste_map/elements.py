"""
Decoding of the element tree.

Map files come from untrusted downloads, so the nesting depth is only bounded by the size of the file. The decoder
therefore keeps its own stack of partially decoded elements instead of recursing, so that a hostile file cannot
exhaust the interpreter stack.
"""

from typing import List, Tuple

from atmfjstc.lib.celeste_map.ByteCursor import ByteCursor
from atmfjstc.lib.celeste_map.string_table import StringTable
from atmfjstc.lib.celeste_map.attributes import decode_attribute
from atmfjstc.lib.celeste_map.model import Element
from atmfjstc.lib.celeste_map.errors import NegativeChildCountError


def decode_element(cursor: ByteCursor, table: StringTable) -> Element:
    """
    Decodes an element along with all of its descendants.

    An element is stored as:

    - The name, as a 16-bit string table index
    - The attribute count, as an unsigned byte
    - For each attribute, the name as a string table index, followed by the tagged value
    - The child count, as a signed 16-bit int
    - The children, each encoded in the same way

    Raises:
        NegativeChildCountError: If an element declares a negative number of children.
        MapFormatError: Other subclasses, for any malformed or truncated data inside the tree.
    """

    root, n_children = _decode_element_head(cursor, table)

    # Each entry holds an element and the number of its children that are yet to be decoded
    pending: List[List] = [[root, n_children]]

    while len(pending) > 0:
        top = pending[-1]
        parent, n_remaining = top

        if n_remaining == 0:
            pending.pop()
            continue

        top[1] = n_remaining - 1

        child, n_children = _decode_element_head(cursor, table)
        parent.children.append(child)

        pending.append([child, n_children])

    return root


def _decode_element_head(cursor: ByteCursor, table: StringTable) -> Tuple[Element, int]:
    element = Element(table.read_reference(cursor, "element name"))

    n_attributes = cursor.read_u8(f"attribute count of element '{element.name}'")

    for _ in range(n_attributes):
        attr_name = table.read_reference(cursor, f"attribute name in element '{element.name}'")
        value = decode_attribute(cursor, table, f"attribute '{attr_name}' of element '{element.name}'")

        element.attributes.append((attr_name, value))

    position = cursor.tell()

    n_children = cursor.read_i16_le(f"child count of element '{element.name}'")
    if n_children < 0:
        raise NegativeChildCountError(position, n_children, f"element '{element.name}'")

    return element, n_children
