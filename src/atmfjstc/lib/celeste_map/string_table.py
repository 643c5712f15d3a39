from typing import Sequence, Iterator, Optional, Tuple, overload

from atmfjstc.lib.celeste_map.ByteCursor import ByteCursor
from atmfjstc.lib.celeste_map.errors import NegativeTableSizeError, BadTableIndexError


class StringTable(Sequence[str]):
    """
    The table of interned strings that follows the header of a map file.

    Element names, attribute names and some attribute values refer to the strings here by their 0-based index. The
    entries are kept exactly as decoded, with no deduplication.
    """

    _entries: Tuple[str, ...]

    def __init__(self, entries: Sequence[str] = ()):
        self._entries = tuple(entries)

    @staticmethod
    def decode(cursor: ByteCursor, size: int) -> 'StringTable':
        """
        Decodes `size` strings from the cursor. Each is a UTF-8 string prefixed by its variable-length byte length.

        Raises:
            NegativeTableSizeError: If `size` is negative.
        """
        if size < 0:
            raise NegativeTableSizeError(cursor.tell(), size, "string table")

        return StringTable(
            [cursor.read_length_prefixed_utf8(f"string table entry #{index}") for index in range(size)]
        )

    def read_reference(self, cursor: ByteCursor, meaning: Optional[str] = None) -> str:
        """
        Reads a 16-bit string index from the cursor and returns the string it refers to.

        Raises:
            BadTableIndexError: If the index is negative or past the end of the table. The position is not advanced.
        """
        position = cursor.tell()

        index = cursor.read_i16_le(f"index of {meaning or 'string'}")
        if not (0 <= index < len(self._entries)):
            cursor.seek(position)
            raise BadTableIndexError(position, index, len(self._entries), meaning)

        return self._entries[index]

    @overload
    def __getitem__(self, index: int) -> str:
        ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[str]:
        ...

    def __getitem__(self, index):
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __eq__(self, other) -> bool:
        if isinstance(other, StringTable):
            return self._entries == other._entries

        return NotImplemented

    def __repr__(self) -> str:
        return f"StringTable({list(self._entries)!r})"


def read_string_table(cursor: ByteCursor) -> StringTable:
    """
    Reads the signed 16-bit string table size, followed by the table itself.
    """
    position = cursor.tell()

    size = cursor.read_i16_le("string table size")
    if size < 0:
        raise NegativeTableSizeError(position, size, "string table")

    return StringTable.decode(cursor, size)
