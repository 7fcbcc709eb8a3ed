"""
Elfscope Console Output
========================

Rich-powered terminal display for decoded ELF images: the file header as
a field/value table, the program and section header tables, any recorded
per-entry issues and the program-data dump.

Uses the ElfscopeConsole abstraction for consistent styling.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from shared.config import DisplayConfig
from shared.console import ElfscopeConsole

from elfscope.core.models import (
    DataPreview,
    DecodeIssue,
    ElfBinary,
    ElfHeader,
    EnumValue,
    ProgramHeaderEntry,
    SectionHeaderEntry,
)


def _hex(value: int) -> str:
    return f"0x{value:x}"


class ElfConsoleOutput:
    """Rich terminal display for :class:`ElfBinary` results.

    Usage::

        output = ElfConsoleOutput()
        output.display(binary)
    """

    def __init__(
        self,
        console: ElfscopeConsole | None = None,
        display: DisplayConfig | None = None,
    ) -> None:
        """Initialise the output renderer.

        Args:
            console: Optional ElfscopeConsole instance.  A new one is
                     created if not provided.
            display: Rendering options; defaults if not provided.
        """
        self._console: ElfscopeConsole = console or ElfscopeConsole()
        self._display: DisplayConfig = display or DisplayConfig()

    def display(
        self,
        binary: ElfBinary,
        previews: list[DataPreview] | None = None,
    ) -> None:
        """Display every decoded part of *binary*.

        Tables that were not requested (``None``) are skipped.
        """
        self.display_summary(binary)
        self.display_header(binary.header)

        if binary.program_headers is not None:
            self.display_program_headers(binary.program_headers)

        if binary.section_headers is not None:
            self.display_section_headers(binary.section_headers)

        if previews is not None:
            self.display_data(previews)

        if binary.issues:
            self.display_issues(binary.issues)

        self._console.divider()

    # ------------------------------------------------------------------ #
    #  Header
    # ------------------------------------------------------------------ #

    def display_summary(self, binary: ElfBinary) -> None:
        h = binary.header
        lines: list[str] = [
            f"[bold]File:[/bold]     {escape(binary.path)}",
            f"[bold]Size:[/bold]     {binary.size:,} bytes",
            f"[bold]Format:[/bold]   ELF {h.word_class.value}, {h.byte_order.value}-endian",
            f"[bold]Machine:[/bold]  {escape(self._enum(h.instruction_set))}",
            f"[bold]Entry:[/bold]    {_hex(h.entry_point)}",
        ]
        panel = Panel(
            "\n".join(lines),
            title="[bold bright_cyan]ELF Image[/bold bright_cyan]",
            border_style="bright_cyan",
            padding=(1, 2),
        )
        self._console.rich.print(panel)
        self._console.blank()

    def display_header(self, header: ElfHeader) -> None:
        """Render the file header as a two-column field/value table."""
        self._console.section("ELF Header")
        rows: list[tuple[str, str]] = [
            ("Magic", header.magic.hex(" ").upper()),
            ("Class", f"ELF{header.word_class.bits}"),
            ("Data", f"{header.byte_order.value}-endian"),
            ("Header version", str(header.header_version)),
            ("OS/ABI", self._enum(header.os_abi)),
            ("ABI version", str(header.abi_version)),
            ("Type", self._enum(header.object_type)),
            ("Machine", self._enum(header.instruction_set)),
            ("Version", _hex(header.version)),
            ("Entry point", _hex(header.entry_point)),
            ("Program headers offset", f"{header.program_header_offset} (bytes into file)"),
            ("Section headers offset", f"{header.section_header_offset} (bytes into file)"),
            ("Flags", _hex(header.flags)),
            ("Header size", f"{header.header_size} (bytes)"),
            ("Program header size", f"{header.program_header_entry_size} (bytes)"),
            ("Program header count", str(header.program_header_entry_count)),
            ("Section header size", f"{header.section_header_entry_size} (bytes)"),
            ("Section header count", str(header.section_header_entry_count)),
            ("Section name table index", str(header.section_name_table_index)),
        ]
        self._console.table(
            "",
            ["Field", "Value"],
            [(label, escape(value)) for label, value in rows],
            styles=["bold", ""],
        )
        self._console.blank()

    # ------------------------------------------------------------------ #
    #  Tables
    # ------------------------------------------------------------------ #

    def display_program_headers(self, entries: list[ProgramHeaderEntry]) -> None:
        self._console.section(f"Program Headers ({len(entries)})")
        if not entries:
            self._console.info("There are no program headers in this file.")
            self._console.blank()
            return

        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Type", style="bold")
        tbl.add_column("Flags")
        tbl.add_column("Offset", justify="right")
        tbl.add_column("VirtAddr", justify="right")
        tbl.add_column("PhysAddr", justify="right")
        tbl.add_column("FileSiz", justify="right")
        tbl.add_column("MemSiz", justify="right")
        tbl.add_column("Align", justify="right")

        for entry in entries:
            tbl.add_row(
                str(entry.index),
                self._enum_cell(entry.segment_type),
                self._enum_cell(entry.segment_flags),
                _hex(entry.offset),
                _hex(entry.virtual_address),
                _hex(entry.physical_address),
                _hex(entry.file_size),
                _hex(entry.memory_size),
                _hex(entry.alignment),
            )

        self._console.rich.print(tbl)
        self._console.blank()

    def display_section_headers(self, entries: list[SectionHeaderEntry]) -> None:
        self._console.section(f"Section Headers ({len(entries)})")
        if not entries:
            self._console.info("There are no sections in this file.")
            self._console.blank()
            return

        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Name", style="bold", min_width=12)
        tbl.add_column("Type")
        tbl.add_column("Flags")
        tbl.add_column("Address", justify="right")
        tbl.add_column("Offset", justify="right")
        tbl.add_column("Size", justify="right")
        tbl.add_column("Link", justify="right")
        tbl.add_column("Info", justify="right")
        tbl.add_column("Align", justify="right")
        tbl.add_column("EntSize", justify="right")

        for entry in entries:
            tbl.add_row(
                str(entry.index),
                escape(entry.name) or "[dim]<unnamed>[/dim]",
                self._enum_cell(entry.section_type),
                self._enum_cell(entry.section_flags),
                _hex(entry.virtual_address),
                _hex(entry.offset),
                _hex(entry.size),
                str(entry.link),
                str(entry.info),
                str(entry.address_alignment),
                _hex(entry.entry_size),
            )

        self._console.rich.print(tbl)
        self._console.blank()

    # ------------------------------------------------------------------ #
    #  Data dump
    # ------------------------------------------------------------------ #

    def display_data(self, previews: list[DataPreview]) -> None:
        """Hex dump of the leading bytes of each program-data section."""
        self._console.section("Program Data")
        if not previews:
            self._console.info("No SHT_PROGBITS sections to show.")
            self._console.blank()
            return

        width = max(self._display.hex_width, 1)
        for preview in previews:
            self._console.print(
                f"[elfscope.highlight]{escape(preview.name or '<unnamed>')}[/elfscope.highlight] "
                f"[elfscope.dim]offset {_hex(preview.offset)}, "
                f"size {preview.size:,} bytes[/elfscope.dim]"
            )
            if not preview.data:
                self._console.print("  [elfscope.dim](no file data)[/elfscope.dim]")
                continue
            for start in range(0, len(preview.data), width):
                chunk = preview.data[start:start + width]
                self._console.print(
                    f"  [elfscope.dim]{preview.offset + start:08x}[/elfscope.dim]  "
                    f"[elfscope.hex]{chunk.hex(' ').upper()}[/elfscope.hex]"
                )
        self._console.blank()

    # ------------------------------------------------------------------ #
    #  Issues
    # ------------------------------------------------------------------ #

    def display_issues(self, issues: list[DecodeIssue]) -> None:
        self._console.section(f"Decode Issues ({len(issues)})")
        self._console.table(
            "",
            ["Table", "Entry", "Offset", "Error", "Message"],
            [
                (
                    issue.table,
                    issue.index,
                    _hex(issue.offset),
                    issue.error,
                    escape(issue.message),
                )
                for issue in issues
            ],
            styles=["bold", "dim", "", "elfscope.warning", ""],
        )
        self._console.blank()

    # ------------------------------------------------------------------ #
    #  Enum rendering
    # ------------------------------------------------------------------ #

    def _enum(self, value: EnumValue) -> str:
        if value.known or self._display.show_unknown_codes:
            return str(value)
        return value.name

    def _enum_cell(self, value: EnumValue) -> str:
        text = escape(self._enum(value))
        if value.known:
            return text
        return f"[elfscope.unknown]{text}[/elfscope.unknown]"
