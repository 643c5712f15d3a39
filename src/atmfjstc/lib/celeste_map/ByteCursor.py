"""
This module contains the `ByteCursor` class, a bounds-checked sequential reader over an in-memory buffer that offers
functions for extracting the little-endian ints, floats and strings used in Celeste maps.
"""

import struct

from typing import Union, Optional, Tuple

from atmfjstc.lib.celeste_map.errors import MapFormatError, UnexpectedEndError, LengthTooLongError, \
    InvalidUtf8Error, BadMagicError, TrailingBytesError


BufferLike = Union[bytes, bytearray, memoryview]


class ByteCursor:
    """
    This class wraps an immutable byte buffer and offers functions for extracting binary-encoded ints, floats and
    strings from it, in sequence.

    Every read is all-or-nothing: if there is not enough data (or the data is malformed), an exception derived from
    `MapFormatError` is raised and the position stays where it was before the read.

    The buffer is never modified or copied. The cursor should not outlive the call that created it.
    """

    MAX_VARLEN_GROUPS = 5

    _data: memoryview
    _position: int

    def __init__(self, data: BufferLike):
        self._data = _parse_main_input_arg(data)
        self._position = 0

    def seek(self, position: int) -> 'ByteCursor':
        if not (0 <= position <= len(self._data)):
            raise ValueError(f"Position {position} is outside the buffer (size: {len(self._data)})")

        self._position = position

        return self

    def tell(self) -> int:
        return self._position

    def bytes_remaining(self) -> int:
        return len(self._data) - self._position

    def at_end(self) -> bool:
        return self._position == len(self._data)

    def read_amount(self, n_bytes: int, meaning: Optional[str] = None) -> bytes:
        """
        Reads exactly `n_bytes` from the buffer.

        Args:
            n_bytes: The amount of bytes to read.
            meaning: An indication as to the meaning of the data being read (e.g. "package name"). It is used in the
                text of any exceptions that may be thrown.

        Returns:
            The data, as a `bytes` object `n_bytes` in length.

        Raises:
            UnexpectedEndError: If fewer than `n_bytes` remain in the buffer. The position is not advanced.
        """

        if n_bytes < 0:
            raise ValueError("The number of bytes to read cannot be negative")

        available = self.bytes_remaining()
        if available < n_bytes:
            raise UnexpectedEndError(self._position, n_bytes, available, meaning)

        data = self._data[self._position:self._position + n_bytes].tobytes()
        self._position += n_bytes

        return data

    def expect_magic(self, magic: bytes, meaning: Optional[str] = None):
        """
        Verifies that a specific bytes sequence ("magic") follows in the buffer.

        The bytes that are available are checked first, so data that is clearly of the wrong type is reported as
        such even if it is shorter than the magic.

        Raises:
            BadMagicError: If the bytes found do not match the expected ones.
            UnexpectedEndError: If the data ends before the magic is complete, but matches as far as it goes.
        """

        meaning = meaning or "magic"

        found = self._data[self._position:self._position + len(magic)].tobytes()

        if found != magic[:len(found)]:
            raise BadMagicError(self._position, magic, found, meaning)
        if len(found) < len(magic):
            raise UnexpectedEndError(self._position, len(magic), len(found), meaning)

        self._position += len(magic)

    def expect_end(self, meaning: Optional[str] = None):
        """
        Verifies that the whole buffer has been consumed.

        Raises:
            TrailingBytesError: If there are any bytes left.
        """
        if not self.at_end():
            raise TrailingBytesError(self._position, self.bytes_remaining(), meaning)

    def read_struct(self, struct_format: str, meaning: Optional[str] = None) -> tuple:
        """
        Reads structured data from the buffer.

        Args:
            struct_format: The format of the structured data, as per the Python `struct` package. Little-endian
                byte order is assumed unless the format starts with an explicit specifier.
            meaning: An indication as to the meaning of the data being read (e.g. "child count"). It is used in the
                text of any exceptions that may be thrown.

        Returns:
           The data in the structure, as a tuple.

        Raises:
            UnexpectedEndError: If the buffer ends before a complete structure could be read.
        """

        if struct_format == '':
            return ()
        if struct_format[0] not in '@=<>!':
            struct_format = '<' + struct_format

        meaning = meaning or f"struct ({struct_format})"

        return struct.unpack(struct_format, self.read_amount(struct.calcsize(struct_format), meaning))

    def read_u8(self, meaning: Optional[str] = None) -> int:
        return self.read_struct('B', meaning or 'byte')[0]

    def read_i16_le(self, meaning: Optional[str] = None) -> int:
        return self.read_struct('h', meaning or 'short')[0]

    def read_i32_le(self, meaning: Optional[str] = None) -> int:
        return self.read_struct('i', meaning or 'int')[0]

    def read_i64_le(self, meaning: Optional[str] = None) -> int:
        return self.read_struct('q', meaning or 'long')[0]

    def read_f32_le(self, meaning: Optional[str] = None) -> float:
        return self.read_struct('f', meaning or 'float')[0]

    def read_f64_le(self, meaning: Optional[str] = None) -> float:
        return self.read_struct('d', meaning or 'double')[0]

    def read_varlen_length(self, meaning: Optional[str] = None) -> int:
        """
        Reads an unsigned integer encoded in groups of 7 bits, least significant group first.

        Each byte contributes its low 7 bits. A set high bit means that another byte follows. At most
        `MAX_VARLEN_GROUPS` bytes are accepted (i.e. values of up to 35 bits).

        Raises:
            LengthTooLongError: If the integer has not ended after `MAX_VARLEN_GROUPS` bytes.
            UnexpectedEndError: If the buffer ends in the middle of the integer.
        """

        value, n_bytes = _decode_varlen(self._data, self._position, self.MAX_VARLEN_GROUPS, meaning)
        self._position += n_bytes

        return value

    def read_exact_utf8(self, n_bytes: int, meaning: Optional[str] = None) -> str:
        """
        Reads exactly `n_bytes` and decodes them as UTF-8 text.

        Raises:
            UnexpectedEndError: If fewer than `n_bytes` remain in the buffer.
            InvalidUtf8Error: If the data is not valid UTF-8. The position is not advanced.
        """

        original_pos = self._position

        data = self.read_amount(n_bytes, meaning or 'string')

        try:
            return data.decode('utf-8')
        except UnicodeDecodeError as e:
            self._position = original_pos
            raise InvalidUtf8Error(original_pos, data, meaning) from e

    def read_length_prefixed_utf8(self, meaning: Optional[str] = None) -> str:
        """
        Reads a UTF-8 string whose byte length precedes it as a variable-length integer.

        Either the whole string is read, or the position is not advanced at all.
        """

        original_pos = self._position

        length = self.read_varlen_length(f"length of {meaning or 'string'}")

        try:
            return self.read_exact_utf8(length, meaning)
        except MapFormatError:
            self._position = original_pos
            raise


def _decode_varlen(data: memoryview, position: int, max_groups: int, meaning: Optional[str]) -> Tuple[int, int]:
    value = 0

    for index in range(max_groups):
        if position + index >= len(data):
            raise UnexpectedEndError(position, index + 1, index, meaning)

        byte = data[position + index]
        value |= (byte & 0x7F) << (7 * index)

        if byte & 0x80 == 0:
            return value, index + 1

    raise LengthTooLongError(position, max_groups, meaning)


def _parse_main_input_arg(input_: BufferLike) -> memoryview:
    if isinstance(input_, memoryview):
        if input_.ndim != 1 or input_.format != 'B':
            input_ = input_.cast('B')

        return input_.toreadonly()

    if not isinstance(input_, (bytes, bytearray)):
        raise TypeError("Input to ByteCursor must be a bytes-like buffer (bytes, bytearray or memoryview)")

    return memoryview(input_).toreadonly()
