"""
Section Header Table Decoder
==============================

Decodes the ``e_shnum`` entries of the section header table.  Unlike the
program header, the field order is the same for both word classes; only
the width of the address-sized fields changes.  Each class still gets its
own explicit procedure so that the two layouts read side by side:

    Elf64_Shdr: name(4) type(4) flags(8) addr(8) offset(8) size(8)
                link(4) info(4) addralign(8) entsize(8)          = 64 bytes
    Elf32_Shdr: name(4) type(4) flags(4) addr(4) offset(4) size(4)
                link(4) info(4) addralign(4) entsize(4)          = 40 bytes

Section names are not resolved here; see
:class:`~elfscope.parsers.names.NameResolver`.

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2, Figure 1-8.
    - System V ABI, Edition 4.1, "Sections".
"""

from __future__ import annotations

from typing import Callable

from shared.logger import ElfscopeLogger

from elfscope.core.errors import ElfDecodeError, TableGeometryError
from elfscope.core.models import (
    DecodeIssue,
    ElfHeader,
    SectionHeaderEntry,
    TableResult,
    WordClass,
)
from elfscope.parsers.cursor import ByteCursor
from elfscope.parsers.tables import (
    ELF32_SHDR_SIZE,
    ELF64_SHDR_SIZE,
    SECTION_FLAGS,
    SECTION_TYPES,
)


class SectionHeaderDecoder:
    """Decoder for the section header table described by an :class:`ElfHeader`.

    Per-entry failures follow the same policy as the program header
    decoder: the entry is dropped, an issue is recorded, decoding goes on.
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
            None, "parsers.section"
        )

    def decode(self) -> TableResult[SectionHeaderEntry]:
        """Decode every section header entry (names left empty)."""
        h = self._header
        if h.word_class is WordClass.ELF64:
            decode_entry: Callable[[ByteCursor, int], SectionHeaderEntry] = self._decode_entry_64
            natural_size = ELF64_SHDR_SIZE
        else:
            decode_entry = self._decode_entry_32
            natural_size = ELF32_SHDR_SIZE

        stride = h.section_header_entry_size or natural_size
        cursor = ByteCursor(self._data, h.byte_order)
        entries: list[SectionHeaderEntry] = []
        issues: list[DecodeIssue] = []

        for index in range(h.section_header_entry_count):
            offset = h.section_header_offset + index * stride
            try:
                if stride < natural_size:
                    raise TableGeometryError(
                        f"section header entry size {stride} is smaller than "
                        f"the {h.word_class.value} layout ({natural_size} bytes)"
                    )
                cursor.seek(offset)
                entries.append(decode_entry(cursor, index))
            except ElfDecodeError as exc:
                self._logger.warning(
                    "Dropping section header entry %d at 0x%x: %s",
                    index, offset, exc,
                )
                issues.append(DecodeIssue.from_exception("section", index, exc, offset))

        self._logger.debug(
            "Decoded %d/%d section header entries",
            len(entries), h.section_header_entry_count,
        )
        return TableResult[SectionHeaderEntry](entries=entries, issues=issues)

    # ------------------------------------------------------------------ #
    #  Per-class layouts
    # ------------------------------------------------------------------ #

    @staticmethod
    def _decode_entry_64(cursor: ByteCursor, index: int) -> SectionHeaderEntry:
        return SectionHeaderEntry(
            index=index,
            name_offset=cursor.read_u32(),
            section_type=SECTION_TYPES.decode(cursor.read_u32()),
            section_flags=SECTION_FLAGS.decode(cursor.read_u64()),
            virtual_address=cursor.read_u64(),
            offset=cursor.read_u64(),
            size=cursor.read_u64(),
            link=cursor.read_u32(),
            info=cursor.read_u32(),
            address_alignment=cursor.read_u64(),
            entry_size=cursor.read_u64(),
        )

    @staticmethod
    def _decode_entry_32(cursor: ByteCursor, index: int) -> SectionHeaderEntry:
        return SectionHeaderEntry(
            index=index,
            name_offset=cursor.read_u32(),
            section_type=SECTION_TYPES.decode(cursor.read_u32()),
            section_flags=SECTION_FLAGS.decode(cursor.read_u32()),
            virtual_address=cursor.read_u32(),
            offset=cursor.read_u32(),
            size=cursor.read_u32(),
            link=cursor.read_u32(),
            info=cursor.read_u32(),
            address_alignment=cursor.read_u32(),
            entry_size=cursor.read_u32(),
        )
