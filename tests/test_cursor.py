"""Tests for the bounds-checked byte cursor."""

import pytest

from elfscope.core.errors import OutOfBoundsError
from elfscope.core.models import ByteOrder, WordClass
from elfscope.parsers.cursor import ByteCursor


def test_reads_advance_position():
    cursor = ByteCursor(bytes(range(16)), ByteOrder.LITTLE)
    assert cursor.read_u8() == 0x00
    assert cursor.read_u16() == 0x0201
    assert cursor.read_u32() == 0x06050403
    assert cursor.position == 7
    assert cursor.remaining == 9


def test_byte_order_is_explicit():
    data = bytes([0x12, 0x34, 0x56, 0x78])
    assert ByteCursor(data, ByteOrder.LITTLE).read_u32() == 0x78563412
    assert ByteCursor(data, ByteOrder.BIG).read_u32() == 0x12345678


def test_order_can_switch_mid_stream():
    cursor = ByteCursor(b"\x01\x00\x00\x01", ByteOrder.LITTLE)
    assert cursor.read_u16() == 1
    cursor.order = ByteOrder.BIG
    assert cursor.read_u16() == 1


def test_read_word_follows_word_class():
    data = bytes([1, 0, 0, 0, 0, 0, 0, 0])
    assert ByteCursor(data, ByteOrder.LITTLE).read_word(WordClass.ELF32) == 1
    cursor = ByteCursor(data, ByteOrder.LITTLE)
    assert cursor.read_word(WordClass.ELF64) == 1
    assert cursor.position == 8


def test_u64_big_endian():
    data = bytes.fromhex("0000000000401000")
    assert ByteCursor(data, ByteOrder.BIG).read_u64() == 0x401000


def test_short_read_raises_out_of_bounds():
    cursor = ByteCursor(b"\x00\x01\x02", ByteOrder.LITTLE)
    with pytest.raises(OutOfBoundsError) as info:
        cursor.read_u32()
    assert info.value.offset == 0
    assert info.value.width == 4
    assert info.value.length == 3
    # A failed read leaves the position untouched
    assert cursor.position == 0


def test_seek_past_end_fails_on_next_read():
    cursor = ByteCursor(b"\x00" * 8, ByteOrder.LITTLE)
    cursor.seek(100)
    assert cursor.remaining == 0
    with pytest.raises(OutOfBoundsError):
        cursor.read_u8()


def test_negative_seek_rejected():
    cursor = ByteCursor(b"\x00" * 8, ByteOrder.LITTLE)
    with pytest.raises(OutOfBoundsError):
        cursor.seek(-1)


def test_skip_and_read_bytes_are_bounds_checked():
    cursor = ByteCursor(b"abcdef", ByteOrder.BIG)
    cursor.skip(2)
    assert cursor.read_bytes(3) == b"cde"
    with pytest.raises(OutOfBoundsError):
        cursor.skip(2)
    with pytest.raises(OutOfBoundsError):
        cursor.read_bytes(2)


def test_unsupported_width():
    with pytest.raises(ValueError):
        ByteCursor(b"\x00" * 8, ByteOrder.LITTLE).read_uint(3)
