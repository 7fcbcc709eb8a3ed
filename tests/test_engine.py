"""Tests for the decode engine and the aggregate result model."""

import pytest
from pydantic import ValidationError

from shared.config import DecoderConfig, ElfscopeConfig

from elfscope.core.engine import ElfscopeEngine
from elfscope.core.errors import (
    ElfDecodeError,
    EmptyFileError,
    FileTooLargeError,
    MalformedMagicError,
    TableDecodeError,
)
from elfscope.core.models import ElfParts
from tests.elf_factory import sample_image


def test_decode_all_parts(engine, sample_any):
    binary = engine.decode(sample_any.data, ElfParts.ALL)

    assert binary.ok
    assert binary.size == len(sample_any.data)
    assert binary.header.entry_point == 0x401000
    assert [p.segment_type.name for p in binary.program_headers] == ["PT_PHDR", "PT_LOAD"]
    assert [s.name for s in binary.section_headers] == [
        "", ".text", ".data", ".bss", ".shstrtab",
    ]


@pytest.mark.parametrize("parts,has_program,has_sections", [
    (ElfParts.HEADER, False, False),
    (ElfParts.PROGRAM, True, False),
    (ElfParts.SECTIONS, False, True),
    (ElfParts.DATA, False, True),
    (ElfParts.ALL, True, True),
])
def test_parts_select_tables(engine, sample64, parts, has_program, has_sections):
    binary = engine.decode(sample64.data, parts)
    assert (binary.program_headers is not None) is has_program
    assert (binary.section_headers is not None) is has_sections


def test_header_failure_is_fatal(engine):
    with pytest.raises(MalformedMagicError):
        engine.decode(b"\x00" * 64)


def test_issues_are_collected_across_tables(quiet_logger, sample64):
    # Cut the image inside the section header table.
    data = sample64.data[:-10]
    config = ElfscopeConfig(decoder=DecoderConfig(check_table_bounds=False))
    lenient = ElfscopeEngine(config=config, logger=quiet_logger)
    binary = lenient.decode(data, ElfParts.ALL)

    assert not binary.ok
    assert len(binary.section_headers) == 4
    # .shstrtab was the dropped entry, so its names are unavailable too
    assert [(i.table, i.index) for i in binary.issues] == [("section", 4), ("names", 4)]
    assert all(s.name == "" for s in binary.section_headers)


def test_strict_mode_raises_on_issues(quiet_logger, sample64):
    config = ElfscopeConfig(
        decoder=DecoderConfig(check_table_bounds=False, strict=True)
    )
    strict = ElfscopeEngine(config=config, logger=quiet_logger)
    with pytest.raises(TableDecodeError) as info:
        strict.decode(sample64.data[:-10], ElfParts.SECTIONS)
    assert len(info.value.issues) == 2
    assert isinstance(info.value, ElfDecodeError)


def test_strict_mode_accepts_clean_images(quiet_logger, sample64):
    config = ElfscopeConfig(decoder=DecoderConfig(strict=True))
    assert ElfscopeEngine(config=config, logger=quiet_logger).decode(sample64.data).ok


def test_decode_file(engine, elf_file):
    binary = engine.decode_file(elf_file, ElfParts.SECTIONS)
    assert binary.path == str(elf_file.resolve())
    assert binary.section_by_name(".data") is not None
    assert binary.program_headers is None


def test_read_image_rejects_empty_files(engine, tmp_path):
    path = tmp_path / "empty"
    path.write_bytes(b"")
    with pytest.raises(EmptyFileError):
        engine.read_image(path)


def test_read_image_enforces_size_limit(quiet_logger, tmp_path):
    path = tmp_path / "big"
    path.write_bytes(b"\x7fELF" + b"\x00" * 200)
    config = ElfscopeConfig(decoder=DecoderConfig(max_file_size=100))
    with pytest.raises(FileTooLargeError) as info:
        ElfscopeEngine(config=config, logger=quiet_logger).read_image(path)
    assert info.value.size == 204
    assert info.value.limit == 100


def test_read_image_missing_file(engine, tmp_path):
    with pytest.raises(FileNotFoundError):
        engine.read_image(tmp_path / "nope")


def test_program_data_preview(engine, sample64):
    binary = engine.decode(sample64.data, ElfParts.DATA)
    previews = engine.program_data_preview(binary)

    assert [p.name for p in previews] == [".text", ".data"]
    text, data = previews
    assert text.data == bytes(range(16))
    assert text.size == 0x20
    assert text.offset == sample64.section_offsets[1]
    assert text.hex.startswith("00 01 02 03")
    assert data.data == b"hello, elf\x00"


def test_program_data_preview_limit(engine, sample64):
    binary = engine.decode(sample64.data, ElfParts.DATA)
    previews = engine.program_data_preview(binary, limit=4)
    assert [len(p.data) for p in previews] == [4, 4]


def test_section_lookup_helpers(engine):
    binary = engine.decode(sample_image(32, ">").data, ElfParts.SECTIONS)

    bss = binary.section_by_name(".bss")
    assert bss.size == 0x100
    assert binary.section_data(bss) == b""
    assert binary.section_by_name(".missing") is None
    assert [s.name for s in binary.sections_of_type("SHT_STRTAB")] == [".shstrtab"]
    text = binary.section_by_name(".text")
    assert binary.section_data(text) == bytes(range(0x20))


def test_section_data_is_clipped_to_image(engine, sample64):
    binary = engine.decode(sample64.data, ElfParts.SECTIONS)
    text = binary.section_by_name(".text")
    huge = text.model_copy(update={"size": 1 << 40})
    assert len(binary.section_data(huge)) == len(sample64.data) - text.offset


def test_result_is_immutable(engine, sample64):
    binary = engine.decode(sample64.data)
    with pytest.raises(ValidationError):
        binary.header.entry_point = 0
    with pytest.raises(ValidationError):
        binary.section_headers[0].name = "x"


def test_raw_bytes_are_not_serialised(engine, sample64):
    dumped = engine.decode(sample64.data).model_dump()
    assert "raw" not in dumped
