"""
Exceptions raised when a buffer does not hold a well-formed Celeste map.

All of them derive from `MapFormatError`, so callers that just want to skip a bad file only need to catch that. The
intermediate classes group the failures by kind (structure, length encoding, truncation, text encoding, unknown
values), for callers that want to report statistics on what went wrong.
"""

from typing import Optional


class MapFormatError(Exception):
    """
    Base class for all exceptions signaling that the data does not match the map format.

    Attributes:
        position: The offset in the buffer where the offending item starts.
        meaning: A description of the item that was being read (e.g. "package name"), if available.
    """

    position: int
    meaning: Optional[str]

    def __init__(self, position: int, meaning: Optional[str], message: str):
        self.position = position
        self.meaning = meaning

        super().__init__(f"At position {position}, {message}")


def _for_meaning(meaning: Optional[str]) -> str:
    return f' for {meaning}' if meaning is not None else ''


class MapStructureError(MapFormatError):
    """
    Raised when the overall layout of the file is wrong (i.e. it is not a map, or it has junk at the end).
    """


class BadMagicError(MapStructureError):
    expected_magic: bytes
    found_magic: bytes

    def __init__(self, position: int, expected_magic: bytes, found_magic: bytes, meaning: Optional[str] = None):
        self.expected_magic = expected_magic
        self.found_magic = found_magic

        super().__init__(
            position, meaning,
            f"expected {meaning or 'magic'} 0x{expected_magic.hex()}, but found 0x{found_magic.hex()}"
        )


class TrailingBytesError(MapStructureError):
    n_trailing: int

    def __init__(self, position: int, n_trailing: int, meaning: Optional[str] = None):
        self.n_trailing = n_trailing

        super().__init__(
            position, meaning,
            f"expected the data to end{f' after {meaning}' if meaning is not None else ''}, but {n_trailing} "
            f"more bytes follow"
        )


class MapLengthEncodingError(MapFormatError):
    """
    Raised when a length, count or index read from the data is out of range or otherwise unusable.
    """


class LengthTooLongError(MapLengthEncodingError):
    max_groups: int

    def __init__(self, position: int, max_groups: int, meaning: Optional[str] = None):
        self.max_groups = max_groups

        super().__init__(
            position, meaning,
            f"variable-length integer{_for_meaning(meaning)} continues past {max_groups} bytes, possibly due to "
            f"corrupt data"
        )


class NegativeTableSizeError(MapLengthEncodingError):
    size: int

    def __init__(self, position: int, size: int, meaning: Optional[str] = None):
        self.size = size

        super().__init__(position, meaning, f"string table size is negative ({size})")


class NegativeChildCountError(MapLengthEncodingError):
    count: int

    def __init__(self, position: int, count: int, meaning: Optional[str] = None):
        self.count = count

        super().__init__(position, meaning, f"child count{_for_meaning(meaning)} is negative ({count})")


class NegativeLengthError(MapLengthEncodingError):
    length: int

    def __init__(self, position: int, length: int, meaning: Optional[str] = None):
        self.length = length

        super().__init__(position, meaning, f"length{_for_meaning(meaning)} is negative ({length})")


class OddLengthError(MapLengthEncodingError):
    length: int

    def __init__(self, position: int, length: int, meaning: Optional[str] = None):
        self.length = length

        super().__init__(
            position, meaning,
            f"run-length encoded data{_for_meaning(meaning)} has odd length ({length}), expected (count, char) pairs"
        )


class BadTableIndexError(MapLengthEncodingError):
    index: int
    table_size: int

    def __init__(self, position: int, index: int, table_size: int, meaning: Optional[str] = None):
        self.index = index
        self.table_size = table_size

        super().__init__(
            position, meaning,
            f"string table index{_for_meaning(meaning)} is {index}, but the table has {table_size} entries"
        )


class UnexpectedEndError(MapFormatError):
    """
    Raised when the data ends before an item is complete. A truncated map always produces this error.
    """

    expected_length: int
    actual_length: int

    def __init__(self, position: int, expected_length: int, actual_length: int, meaning: Optional[str] = None):
        self.expected_length = expected_length
        self.actual_length = actual_length

        super().__init__(
            position, meaning,
            f"expected {expected_length} bytes{_for_meaning(meaning)}, but "
            + (f"only {actual_length} were found" if actual_length > 0 else "the data ends")
        )


class InvalidUtf8Error(MapFormatError):
    raw_data: bytes

    def __init__(self, position: int, raw_data: bytes, meaning: Optional[str] = None):
        self.raw_data = raw_data

        super().__init__(position, meaning, f"string{_for_meaning(meaning)} is not valid UTF-8")


class UnknownAttributeTypeError(MapFormatError):
    tag: int

    def __init__(self, position: int, tag: int, meaning: Optional[str] = None):
        self.tag = tag

        super().__init__(position, meaning, f"unknown type tag {tag}{_for_meaning(meaning)}")
