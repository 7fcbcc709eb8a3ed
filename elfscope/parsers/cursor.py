"""
Bounds-Checked Byte Cursor
============================

:class:`ByteCursor` tracks a read position over an immutable byte buffer
and decodes fixed-width unsigned integers in an explicitly declared byte
order.  The platform's native order is never used.

Every multi-byte read is checked against the buffer length before any
byte is touched; a short buffer raises
:class:`~elfscope.core.errors.OutOfBoundsError` instead of an
``IndexError`` or :class:`struct.error` from deep inside a decoder.
"""

from __future__ import annotations

import struct

from elfscope.core.errors import OutOfBoundsError
from elfscope.core.models import ByteOrder, WordClass


# Width in bytes -> struct format character (unsigned)
_UINT_FORMATS: dict[int, str] = {
    1: "B",
    2: "H",
    4: "I",
    8: "Q",
}


class ByteCursor:
    """Sequential reader over a byte buffer.

    Usage::

        cursor = ByteCursor(data, ByteOrder.LITTLE)
        magic = cursor.read_bytes(4)
        cursor.order = ByteOrder.BIG
        e_type = cursor.read_u16()
    """

    __slots__ = ("_data", "_position", "_order")

    def __init__(self, data: bytes, order: ByteOrder, position: int = 0) -> None:
        """Initialise the cursor.

        Args:
            data: Buffer to read from.  It is never modified.
            order: Byte order used for every multi-byte read.
            position: Starting offset.
        """
        self._data: bytes = data
        self._order: ByteOrder = order
        self._position: int = 0
        self.seek(position)

    # ------------------------------------------------------------------ #
    #  Position / order
    # ------------------------------------------------------------------ #

    @property
    def position(self) -> int:
        """Current read offset."""
        return self._position

    @property
    def remaining(self) -> int:
        """Bytes left between the current position and the buffer end."""
        return max(len(self._data) - self._position, 0)

    @property
    def order(self) -> ByteOrder:
        return self._order

    @order.setter
    def order(self, value: ByteOrder) -> None:
        self._order = value

    def seek(self, position: int) -> None:
        """Move to an absolute *position*.

        Seeking past the end is allowed; the next read then fails.
        """
        if position < 0:
            raise OutOfBoundsError(position, 0, len(self._data))
        self._position = position

    def skip(self, count: int) -> None:
        """Advance by *count* bytes without decoding them."""
        self._require(count)
        self._position += count

    # ------------------------------------------------------------------ #
    #  Reads
    # ------------------------------------------------------------------ #

    def read_bytes(self, count: int) -> bytes:
        """Return the next *count* raw bytes."""
        self._require(count)
        start = self._position
        self._position += count
        return self._data[start:self._position]

    def read_uint(self, width: int) -> int:
        """Read an unsigned integer of *width* bytes (1, 2, 4 or 8)."""
        fmt = _UINT_FORMATS.get(width)
        if fmt is None:
            raise ValueError(f"Unsupported integer width: {width}")
        self._require(width)
        (value,) = struct.unpack_from(
            self._order.struct_prefix + fmt, self._data, self._position
        )
        self._position += width
        return value

    def read_u8(self) -> int:
        return self.read_uint(1)

    def read_u16(self) -> int:
        return self.read_uint(2)

    def read_u32(self) -> int:
        return self.read_uint(4)

    def read_u64(self) -> int:
        return self.read_uint(8)

    def read_word(self, word_class: WordClass) -> int:
        """Read an address/offset-sized field: 4 bytes on ELF32, 8 on ELF64."""
        return self.read_uint(word_class.word_size)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    def _require(self, width: int) -> None:
        if self._position + width > len(self._data):
            raise OutOfBoundsError(self._position, width, len(self._data))
