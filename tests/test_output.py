"""Tests for console rendering and JSON reports."""

import json

from shared.config import DecoderConfig, DisplayConfig, ElfscopeConfig
from shared.console import ElfscopeConsole

from elfscope.core.engine import ElfscopeEngine
from elfscope.core.models import ElfParts
from elfscope.output.console import ElfConsoleOutput
from elfscope.output.report import ElfReportGenerator
from tests.elf_factory import HEADER_SIZE, Segment, build_image


def _render(binary, previews=None, display=None):
    console = ElfscopeConsole(record=True, width=200)
    ElfConsoleOutput(console=console, display=display).display(binary, previews)
    return console.export_text()


def test_header_only_view(engine, sample64):
    text = _render(engine.decode(sample64.data, ElfParts.HEADER))
    assert "ELF Header" in text
    assert "7F 45 4C 46" in text
    assert "EM_X86_64" in text
    assert "0x401000" in text
    assert "Program Headers" not in text
    assert "Section Headers" not in text


def test_full_view(engine, sample64):
    binary = engine.decode(sample64.data, ElfParts.ALL)
    previews = engine.program_data_preview(binary)
    text = _render(binary, previews)

    assert "Program Headers (2)" in text
    assert "PT_PHDR" in text
    assert "Section Headers (5)" in text
    assert ".shstrtab" in text
    assert "SHT_NOBITS" in text
    assert "Program Data" in text
    assert "00 01 02 03" in text
    assert "Decode Issues" not in text


def test_unknown_codes_render_with_raw_value(engine):
    image = build_image(64, "<", segments=[Segment(p_type=0x99999999, p_flags=6)])
    text = _render(engine.decode(image.data, ElfParts.PROGRAM))
    assert "UNKNOWN(0x99999999)" in text
    assert "UNKNOWN(0x6)" in text


def test_raw_values_can_be_hidden(engine):
    image = build_image(64, "<", segments=[Segment(p_type=0x99999999)])
    text = _render(
        engine.decode(image.data, ElfParts.PROGRAM),
        display=DisplayConfig(show_unknown_codes=False),
    )
    assert "UNKNOWN" in text
    assert "0x99999999" not in text


def test_issues_are_listed(quiet_logger, sample64):
    lenient = ElfscopeEngine(
        config=ElfscopeConfig(decoder=DecoderConfig(check_table_bounds=False)),
        logger=quiet_logger,
    )
    text = _render(lenient.decode(sample64.data[:-10], ElfParts.SECTIONS))
    assert "Decode Issues (2)" in text
    assert "OutOfBoundsError" in text
    assert "StringTableError" in text


def test_json_report(engine, sample64, tmp_path):
    binary = engine.decode(sample64.data, ElfParts.ALL)
    previews = engine.program_data_preview(binary, limit=4)
    path = ElfReportGenerator().generate_json(binary, tmp_path / "out" / "r.json", previews)

    report = json.loads((tmp_path / "out" / "r.json").read_text())
    assert path.endswith("r.json")
    assert report["report_type"] == "elfscope_decode"
    assert report["header"]["magic"] == "7F 45 4C 46"
    assert report["header"]["word_class"] == "64-bit"
    assert report["header"]["byte_order"] == "little"
    assert report["header"]["instruction_set"]["name"] == "EM_X86_64"
    assert report["header"]["program_header_offset"] == HEADER_SIZE[64]
    assert [s["name"] for s in report["section_headers"]][1:3] == [".text", ".data"]
    assert report["data"][0] == {
        "name": ".text",
        "offset": sample64.section_offsets[1],
        "size": 0x20,
        "hex": "00 01 02 03",
    }
    assert "raw" not in report


def test_json_report_keeps_unrequested_tables_null(engine, sample64):
    report = ElfReportGenerator().build(engine.decode(sample64.data, ElfParts.HEADER))
    assert report["program_headers"] is None
    assert report["section_headers"] is None
    assert "data" not in report
