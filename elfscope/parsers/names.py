"""
Section Name Resolution
========================

Section headers only store ``sh_name``, a byte offset into the section-name
string table (the section whose index is ``e_shstrndx``).  The resolver
reads, for each entry, the NUL-terminated string starting at that offset.

Names are looked up by offset, never by position: string tables are not
required to list names in section order, and they may share suffixes
(``.rela.text`` and ``.text`` can point into the same bytes).

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2, "String Table".
"""

from __future__ import annotations

from typing import Optional

from shared.logger import ElfscopeLogger

from elfscope.core.errors import StringTableError
from elfscope.core.models import (
    DecodeIssue,
    ElfHeader,
    SectionHeaderEntry,
    TableResult,
)
from elfscope.parsers.tables import SHN_UNDEF


class NameResolver:
    """Attach names from the section-name string table to section entries.

    Usage::

        sections = SectionHeaderDecoder(raw, header).decode()
        named = NameResolver(raw, header).resolve(sections.entries)
        print([s.name for s in named.entries])
    """

    def __init__(
        self,
        data: bytes,
        header: ElfHeader,
        logger: ElfscopeLogger | None = None,
    ) -> None:
        self._data: bytes = data
        self._header: ElfHeader = header
        self._logger: ElfscopeLogger = logger or ElfscopeLogger.child(
            None, "parsers.names"
        )

    def resolve(
        self, entries: list[SectionHeaderEntry]
    ) -> TableResult[SectionHeaderEntry]:
        """Return copies of *entries* with ``name`` filled in.

        Every input entry is returned, in order.  Entries whose name cannot
        be read keep an empty name and produce a :class:`DecodeIssue`.
        """
        index = self._header.section_name_table_index
        if index == SHN_UNDEF:
            self._logger.debug("No section-name string table (e_shstrndx = 0)")
            return TableResult[SectionHeaderEntry](entries=list(entries))

        try:
            table_start, table = self._string_table(entries, index)
        except StringTableError as exc:
            self._logger.warning("Section names unavailable: %s", exc)
            issue = DecodeIssue.from_exception("names", index, exc)
            return TableResult[SectionHeaderEntry](entries=list(entries), issues=[issue])

        named: list[SectionHeaderEntry] = []
        issues: list[DecodeIssue] = []
        for entry in entries:
            try:
                named.append(entry.with_name(self._read_name(table, entry.name_offset)))
            except StringTableError as exc:
                self._logger.warning(
                    "Section %d has no readable name: %s", entry.index, exc
                )
                issues.append(
                    DecodeIssue.from_exception(
                        "names", entry.index, exc, table_start + entry.name_offset
                    )
                )
                named.append(entry)

        return TableResult[SectionHeaderEntry](entries=named, issues=issues)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    def _string_table(
        self, entries: list[SectionHeaderEntry], index: int
    ) -> tuple[int, bytes]:
        """Locate the string table section; return its file offset and bytes."""
        if index >= self._header.section_header_entry_count:
            raise StringTableError(
                f"string table index {index} is out of range "
                f"({self._header.section_header_entry_count} sections)"
            )

        table_entry: Optional[SectionHeaderEntry] = next(
            (e for e in entries if e.index == index), None
        )
        if table_entry is None:
            raise StringTableError(
                f"string table section {index} could not be decoded"
            )

        start, end = table_entry.offset, table_entry.offset + table_entry.size
        if end > len(self._data):
            raise StringTableError(
                f"string table [0x{start:x}, 0x{end:x}) extends past "
                f"image length 0x{len(self._data):x}"
            )
        return start, self._data[start:end]

    @staticmethod
    def _read_name(table: bytes, name_offset: int) -> str:
        if name_offset >= len(table):
            # An empty table with offset 0 is just an unnamed section.
            if name_offset == 0:
                return ""
            raise StringTableError(
                f"name offset 0x{name_offset:x} is past the end of the "
                f"string table (0x{len(table):x} bytes)"
            )
        end = table.find(b"\x00", name_offset)
        if end == -1:
            end = len(table)
        return table[name_offset:end].decode("utf-8", errors="replace")


def resolve_names(
    data: bytes,
    header: ElfHeader,
    entries: list[SectionHeaderEntry],
    logger: Optional[ElfscopeLogger] = None,
) -> TableResult[SectionHeaderEntry]:
    """Module-level convenience wrapper around :meth:`NameResolver.resolve`."""
    return NameResolver(data, header, logger=logger).resolve(entries)
