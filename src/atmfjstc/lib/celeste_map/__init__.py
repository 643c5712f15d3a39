"""
Decoder for Celeste map files (the ``.bin`` files in the "BinaryPacker" tree format).

The main entry point is `decode_map`, which turns the contents of a map file into a `Map`, i.e. a tree of named
`Element`'s carrying typed `Attribute`'s. Malformed data causes a `MapFormatError` (or rather, one of its more specific
subclasses) to be raised.

Map files are typically extracted from third-party mod archives, so the decoder treats its input as untrusted: every
read is bounds-checked, and deeply nested trees are handled without recursion.
"""

from atmfjstc.lib.celeste_map.decode import decode_map, CELESTE_MAP_MAGIC
from atmfjstc.lib.celeste_map.model import Map, Element, Attribute, AttributeType
from atmfjstc.lib.celeste_map.errors import MapFormatError


__version__ = '1.0.0'
