"""
Program Header (Segment) Table Decoder
========================================

Decodes the ``e_phnum`` entries of the program header table.  The field
order of an entry differs between the two word classes -- ``p_flags``
moves for alignment reasons -- so each class has its own explicit decode
procedure:

    Elf64_Phdr: type(4) flags(4) offset(8) vaddr(8) paddr(8) filesz(8)
                memsz(8) align(8)                               = 56 bytes
    Elf32_Phdr: type(4) offset(4) vaddr(4) paddr(4) filesz(4) memsz(4)
                flags(4) align(4)                               = 32 bytes

Unrecognized segment types and flag patterns decode to sentinel values.
A failing entry (truncated image, inconsistent entry size) is logged,
recorded as a :class:`~elfscope.core.models.DecodeIssue` and dropped;
the remaining entries are still decoded.

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2, Figure 2-1.
    - System V ABI, Edition 4.1, "Program Header".
"""

from __future__ import annotations

from typing import Callable

from shared.logger import ElfscopeLogger

from elfscope.core.errors import ElfDecodeError, TableGeometryError
from elfscope.core.models import (
    DecodeIssue,
    ElfHeader,
    ProgramHeaderEntry,
    TableResult,
    WordClass,
)
from elfscope.parsers.cursor import ByteCursor
from elfscope.parsers.tables import (
    ELF32_PHDR_SIZE,
    ELF64_PHDR_SIZE,
    SEGMENT_FLAGS,
    SEGMENT_TYPES,
)


class ProgramHeaderDecoder:
    """Decoder for the program header table described by an :class:`ElfHeader`.

    Usage::

        result = ProgramHeaderDecoder(raw_bytes, header).decode()
        for segment in result.entries:
            print(segment.segment_type, hex(segment.virtual_address))
        for issue in result.issues:
            print(issue.index, issue.message)
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
            None, "parsers.program"
        )

    def decode(self) -> TableResult[ProgramHeaderEntry]:
        """Decode every program header entry.

        Returns:
            Decoded entries plus one issue per dropped entry.
        """
        h = self._header
        if h.word_class is WordClass.ELF64:
            decode_entry: Callable[[ByteCursor, int], ProgramHeaderEntry] = self._decode_entry_64
            natural_size = ELF64_PHDR_SIZE
        else:
            decode_entry = self._decode_entry_32
            natural_size = ELF32_PHDR_SIZE

        stride = h.program_header_entry_size or natural_size
        cursor = ByteCursor(self._data, h.byte_order)
        entries: list[ProgramHeaderEntry] = []
        issues: list[DecodeIssue] = []

        for index in range(h.program_header_entry_count):
            offset = h.program_header_offset + index * stride
            try:
                if stride < natural_size:
                    raise TableGeometryError(
                        f"program header entry size {stride} is smaller than "
                        f"the {h.word_class.value} layout ({natural_size} bytes)"
                    )
                cursor.seek(offset)
                entries.append(decode_entry(cursor, index))
            except ElfDecodeError as exc:
                self._logger.warning(
                    "Dropping program header entry %d at 0x%x: %s",
                    index, offset, exc,
                )
                issues.append(DecodeIssue.from_exception("program", index, exc, offset))

        self._logger.debug(
            "Decoded %d/%d program header entries",
            len(entries), h.program_header_entry_count,
        )
        return TableResult[ProgramHeaderEntry](entries=entries, issues=issues)

    # ------------------------------------------------------------------ #
    #  Per-class layouts
    # ------------------------------------------------------------------ #

    @staticmethod
    def _decode_entry_64(cursor: ByteCursor, index: int) -> ProgramHeaderEntry:
        segment_type = SEGMENT_TYPES.decode(cursor.read_u32())
        segment_flags = SEGMENT_FLAGS.decode(cursor.read_u32())
        return ProgramHeaderEntry(
            index=index,
            segment_type=segment_type,
            segment_flags=segment_flags,
            offset=cursor.read_u64(),
            virtual_address=cursor.read_u64(),
            physical_address=cursor.read_u64(),
            file_size=cursor.read_u64(),
            memory_size=cursor.read_u64(),
            alignment=cursor.read_u64(),
        )

    @staticmethod
    def _decode_entry_32(cursor: ByteCursor, index: int) -> ProgramHeaderEntry:
        segment_type = SEGMENT_TYPES.decode(cursor.read_u32())
        offset = cursor.read_u32()
        virtual_address = cursor.read_u32()
        physical_address = cursor.read_u32()
        file_size = cursor.read_u32()
        memory_size = cursor.read_u32()
        # p_flags sits after p_memsz in the 32-bit layout
        segment_flags = SEGMENT_FLAGS.decode(cursor.read_u32())
        return ProgramHeaderEntry(
            index=index,
            segment_type=segment_type,
            segment_flags=segment_flags,
            offset=offset,
            virtual_address=virtual_address,
            physical_address=physical_address,
            file_size=file_size,
            memory_size=memory_size,
            alignment=cursor.read_u32(),
        )
