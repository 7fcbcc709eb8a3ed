"""Tests for the ELF file header decoder."""

import struct

import pytest

from shared.config import DecoderConfig

from elfscope.core.errors import (
    ElfDecodeError,
    MalformedMagicError,
    OutOfBoundsError,
    TableGeometryError,
    UnsupportedAbiError,
    UnsupportedClassError,
    UnsupportedEncodingError,
    UnsupportedInstructionSetError,
    UnsupportedObjectTypeError,
)
from elfscope.core.models import ByteOrder, WordClass
from elfscope.parsers.header import HeaderDecoder, decode_header
from tests.elf_factory import pack_header, pack_ident

NO_BOUNDS = DecoderConfig(check_table_bounds=False)


def test_entry_point_is_the_qword_at_0x18():
    data = pack_header(64, "<", entry=0x0011223344556677)
    header = decode_header(data, NO_BOUNDS)
    (expected,) = struct.unpack_from("<Q", data, 0x18)
    assert header.entry_point == expected == 0x0011223344556677


def test_round_trip_elf64_le_executable():
    data = pack_header(
        64, "<",
        e_type=2, machine=0x3E, version=1, entry=0x401000,
        phoff=64, shoff=0x2000, flags=0, phnum=3, shnum=7, shstrndx=6,
        os_abi=3, abi_version=0,
    )
    header = decode_header(data, NO_BOUNDS)

    assert header.magic == b"\x7fELF"
    assert header.word_class is WordClass.ELF64
    assert header.byte_order is ByteOrder.LITTLE
    assert header.header_version == 1
    assert header.os_abi.name == "ELFOSABI_LINUX"
    assert header.abi_version == 0
    assert header.object_type.name == "ET_EXEC"
    assert header.instruction_set.name == "EM_X86_64"
    assert header.version == 1
    assert header.entry_point == 0x401000
    assert header.program_header_offset == 64
    assert header.section_header_offset == 0x2000
    assert header.flags == 0
    assert header.header_size == 64
    assert header.program_header_entry_size == 56
    assert header.program_header_entry_count == 3
    assert header.section_header_entry_size == 64
    assert header.section_header_entry_count == 7
    assert header.section_name_table_index == 6


def test_round_trip_elf32_be():
    data = pack_header(
        32, ">", e_type=1, machine=0x08, entry=0x80001000,
        flags=0x70001007, shoff=0x400, shnum=2,
    )
    header = decode_header(data, NO_BOUNDS)
    assert header.word_class is WordClass.ELF32
    assert header.byte_order is ByteOrder.BIG
    assert header.object_type.name == "ET_REL"
    assert header.instruction_set.name == "EM_MIPS"
    assert header.entry_point == 0x80001000
    assert header.flags == 0x70001007
    assert header.header_size == 52
    assert header.program_header_entry_size == 32
    assert header.section_header_entry_size == 40


def test_zero_magic_is_fatal():
    data = b"\x00\x00\x00\x00" + pack_header(64, "<")[4:]
    with pytest.raises(MalformedMagicError) as info:
        HeaderDecoder(data).decode()
    assert info.value.found == b"\x00\x00\x00\x00"


def test_image_shorter_than_magic():
    with pytest.raises(MalformedMagicError):
        decode_header(b"\x7fE")


@pytest.mark.parametrize("ei_class", [0, 3, 0xFF])
def test_bad_class_byte(ei_class):
    data = pack_header(64, "<", ei_class=ei_class)
    with pytest.raises(UnsupportedClassError) as info:
        decode_header(data)
    assert info.value.code == ei_class


def test_bad_data_encoding_byte():
    with pytest.raises(UnsupportedEncodingError):
        decode_header(pack_header(64, "<", ei_data=3))


def test_unknown_os_abi():
    with pytest.raises(UnsupportedAbiError) as info:
        decode_header(pack_header(64, "<", os_abi=0x05))
    assert info.value.code == 0x05


def test_unknown_object_type():
    with pytest.raises(UnsupportedObjectTypeError):
        decode_header(pack_header(64, "<", e_type=0x0005))


@pytest.mark.parametrize("e_type,name", [
    (0xFE00, "ET_LOOS"),
    (0xFE42, "ET_OS"),
    (0xFEFF, "ET_HIOS"),
    (0xFF00, "ET_LOPROC"),
    (0xFF80, "ET_PROC"),
    (0xFFFF, "ET_HIPROC"),
])
def test_reserved_object_type_ranges(e_type, name):
    header = decode_header(pack_header(64, "<", e_type=e_type), NO_BOUNDS)
    assert header.object_type.name == name
    assert header.object_type.code == e_type


def test_unknown_instruction_set():
    with pytest.raises(UnsupportedInstructionSetError) as info:
        decode_header(pack_header(64, "<", machine=0x7FFF))
    assert info.value.code == 0x7FFF


@pytest.mark.parametrize("machine", [0x0B, 0x0E, 0x18, 0x23])
def test_reserved_instruction_set_ranges(machine):
    header = decode_header(pack_header(64, "<", machine=machine), NO_BOUNDS)
    assert header.instruction_set.name == "EM_RESERVED"


def test_truncated_header_raises_out_of_bounds():
    data = pack_header(64, "<")[:40]
    with pytest.raises(OutOfBoundsError):
        decode_header(data)


def test_header_errors_share_a_base_class():
    with pytest.raises(ElfDecodeError):
        decode_header(b"MZ\x90\x00" + b"\x00" * 60)


def test_byte_order_changes_every_multibyte_field():
    # e_type 0xFEFF and 0xFFFE are both valid, and 0x0101 is a
    # byte-symmetric machine code, so both orders decode successfully.
    fields = dict(
        e_type=0xFEFF, machine=0x0101, version=0x01020304,
        entry=0x0102030405060708, phoff=0x1122, shoff=0x3344,
        flags=0x0A0B0C0D, ehsize=0x0040, phentsize=0x0038, phnum=0x0102,
        shentsize=0x0040, shnum=0x0304, shstrndx=0x0506,
    )
    little = pack_header(64, "<", **fields)
    big = pack_ident(64, ">") + little[16:]

    a = decode_header(little, NO_BOUNDS)
    b = decode_header(big, NO_BOUNDS)

    assert a.object_type.code == 0xFEFF and b.object_type.code == 0xFFFE
    for name in (
        "version", "entry_point", "program_header_offset",
        "section_header_offset", "flags", "header_size",
        "program_header_entry_size", "program_header_entry_count",
        "section_header_entry_size", "section_header_entry_count",
        "section_name_table_index",
    ):
        assert getattr(a, name) != getattr(b, name), name
    # single-byte fields are unaffected
    assert a.header_version == b.header_version
    assert a.abi_version == b.abi_version


def test_table_outside_image_is_rejected_by_default():
    data = pack_header(64, "<", phoff=64, phnum=4)
    with pytest.raises(TableGeometryError):
        decode_header(data)


def test_table_bounds_check_can_be_disabled():
    data = pack_header(64, "<", phoff=64, phnum=4)
    header = decode_header(data, NO_BOUNDS)
    assert header.program_table_span == (64, 64 + 4 * 56)


def test_padding_is_not_checked():
    data = bytearray(pack_header(64, "<"))
    data[9:16] = b"garbage"
    assert decode_header(bytes(data), NO_BOUNDS).entry_point == 0


def test_enum_values_carry_descriptions():
    header = decode_header(pack_header(64, "<", machine=0xB7), NO_BOUNDS)
    assert header.instruction_set.known
    assert header.instruction_set.code == 0xB7
    assert str(header.instruction_set) == "EM_AARCH64"
    assert header.instruction_set.description
