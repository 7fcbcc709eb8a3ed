"""
Elfscope Data Models
=====================

Pydantic-based, immutable data models for the decoded structure of an
ELF image: the file header, the program (segment) header table, the
section header table and the aggregate decode result.

Every model is frozen.  A decode call produces a fresh, fully-owned
result; the only link back to the input image is the read-only ``raw``
bytes kept on :class:`ElfBinary` for later slicing.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
    - Linux man page: elf(5).
"""

from __future__ import annotations

import enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class WordClass(str, enum.Enum):
    """Address width of the image (``EI_CLASS``)."""
    ELF32 = "32-bit"
    ELF64 = "64-bit"

    @property
    def code(self) -> int:
        """Raw ``EI_CLASS`` byte."""
        return 1 if self is WordClass.ELF32 else 2

    @property
    def bits(self) -> int:
        return 32 if self is WordClass.ELF32 else 64

    @property
    def word_size(self) -> int:
        """Width in bytes of addresses, offsets and word-sized sizes."""
        return 4 if self is WordClass.ELF32 else 8

    @classmethod
    def from_code(cls, code: int) -> Optional[WordClass]:
        return {1: cls.ELF32, 2: cls.ELF64}.get(code)


class ByteOrder(str, enum.Enum):
    """Byte order of multi-byte fields (``EI_DATA``).

    The values are accepted directly by :meth:`int.from_bytes`.
    """
    LITTLE = "little"
    BIG = "big"

    @property
    def code(self) -> int:
        """Raw ``EI_DATA`` byte."""
        return 1 if self is ByteOrder.LITTLE else 2

    @property
    def struct_prefix(self) -> str:
        """:mod:`struct` byte-order prefix."""
        return "<" if self is ByteOrder.LITTLE else ">"

    @classmethod
    def from_code(cls, code: int) -> Optional[ByteOrder]:
        return {1: cls.LITTLE, 2: cls.BIG}.get(code)


class ElfParts(str, enum.Enum):
    """Which parts of the image a decode request covers."""
    HEADER = "header"
    PROGRAM = "program"
    SECTIONS = "sections"
    DATA = "data"
    ALL = "all"

    @property
    def wants_program_headers(self) -> bool:
        return self in (ElfParts.PROGRAM, ElfParts.ALL)

    @property
    def wants_section_headers(self) -> bool:
        return self in (ElfParts.SECTIONS, ElfParts.DATA, ElfParts.ALL)


# ---------------------------------------------------------------------------
# Decoded enumeration values
# ---------------------------------------------------------------------------

class EnumValue(BaseModel):
    """A decoded enumerated field.

    Recognized codes carry their symbolic name (``PT_LOAD``, ``EM_X86_64``
    ...) and a description.  Unrecognized codes decode to the sentinel
    variant of their table: ``known`` is ``False`` and ``code`` keeps the
    original numeric value so it survives for diagnostics.

    Attributes:
        code: Raw numeric value read from the image.
        name: Symbolic name, or the table's sentinel name.
        description: Human-readable description.
        known: ``False`` for sentinel values.
    """
    model_config = ConfigDict(frozen=True)

    code: int
    name: str
    description: str = ""
    known: bool = True

    @property
    def is_unknown(self) -> bool:
        return not self.known

    def __str__(self) -> str:
        if self.known:
            return self.name
        return f"{self.name}(0x{self.code:x})"


class OsAbi(EnumValue):
    """Target operating system ABI (``EI_OSABI``)."""


class ObjectType(EnumValue):
    """Object file type (``e_type``)."""


class InstructionSet(EnumValue):
    """Target instruction set architecture (``e_machine``)."""


class SegmentType(EnumValue):
    """Program header segment type (``p_type``)."""


class SegmentFlags(EnumValue):
    """Program header segment permission flags (``p_flags``).

    Only exact single-bit values are named; combinations such as
    ``PF_R | PF_W`` decode to the ``UNKNOWN`` sentinel, whose ``code``
    holds the full bit pattern.
    """


class SectionType(EnumValue):
    """Section header type (``sh_type``)."""


class SectionFlags(EnumValue):
    """Section header attribute flags (``sh_flags``), single-bit match."""


# ---------------------------------------------------------------------------
# ELF header
# ---------------------------------------------------------------------------

class ElfHeader(BaseModel):
    """The fixed-layout ELF file header.

    Attributes:
        magic: The four identity bytes (``\\x7fELF``).
        word_class: 32-bit or 64-bit layout.
        byte_order: Little or big endian.
        header_version: ``EI_VERSION`` byte.
        os_abi: Target OS/ABI.
        abi_version: ``EI_ABIVERSION`` byte.
        object_type: Relocatable, executable, shared, core ...
        instruction_set: Target machine.
        version: ``e_version``.
        entry_point: Virtual address of the entry point.
        program_header_offset: File offset of the program header table.
        section_header_offset: File offset of the section header table.
        flags: Processor-specific flags.
        header_size: Size of this header (52 or 64 bytes normally).
        program_header_entry_size: Size of one program header entry.
        program_header_entry_count: Number of program header entries.
        section_header_entry_size: Size of one section header entry.
        section_header_entry_count: Number of section header entries.
        section_name_table_index: Index of the section-name string table.
    """
    model_config = ConfigDict(frozen=True)

    magic: bytes = b"\x7fELF"
    word_class: WordClass
    byte_order: ByteOrder
    header_version: int = 0
    os_abi: OsAbi
    abi_version: int = 0
    object_type: ObjectType
    instruction_set: InstructionSet
    version: int = 0
    entry_point: int = 0
    program_header_offset: int = 0
    section_header_offset: int = 0
    flags: int = 0
    header_size: int = 0
    program_header_entry_size: int = 0
    program_header_entry_count: int = 0
    section_header_entry_size: int = 0
    section_header_entry_count: int = 0
    section_name_table_index: int = 0

    @property
    def program_table_span(self) -> tuple[int, int]:
        """``(start, end)`` byte range of the program header table."""
        start = self.program_header_offset
        return start, start + self.program_header_entry_size * self.program_header_entry_count

    @property
    def section_table_span(self) -> tuple[int, int]:
        """``(start, end)`` byte range of the section header table."""
        start = self.section_header_offset
        return start, start + self.section_header_entry_size * self.section_header_entry_count


# ---------------------------------------------------------------------------
# Program header (segment) entry
# ---------------------------------------------------------------------------

class ProgramHeaderEntry(BaseModel):
    """One entry of the program header table.

    Attributes:
        index: Position in the table.
        segment_type: Decoded ``p_type``.
        segment_flags: Decoded ``p_flags`` (single-bit match only).
        offset: File offset of the segment.
        virtual_address: Virtual address of the segment in memory.
        physical_address: Physical address, where relevant.
        file_size: Size of the segment in the file.
        memory_size: Size of the segment in memory.
        alignment: Required alignment (0/1 or a power of two).
    """
    model_config = ConfigDict(frozen=True)

    index: int = 0
    segment_type: SegmentType
    segment_flags: SegmentFlags
    offset: int = 0
    virtual_address: int = 0
    physical_address: int = 0
    file_size: int = 0
    memory_size: int = 0
    alignment: int = 0

    @property
    def flags_raw(self) -> int:
        """Raw ``p_flags`` bit pattern, for compound permissions."""
        return self.segment_flags.code


# ---------------------------------------------------------------------------
# Section header entry
# ---------------------------------------------------------------------------

class SectionHeaderEntry(BaseModel):
    """One entry of the section header table.

    ``name`` is not stored in the file: it is resolved afterwards from the
    section-name string table and is empty until then.
    """
    model_config = ConfigDict(frozen=True)

    index: int = 0
    name_offset: int = 0
    name: str = ""
    section_type: SectionType
    section_flags: SectionFlags
    virtual_address: int = 0
    offset: int = 0
    size: int = 0
    link: int = 0
    info: int = 0
    address_alignment: int = 0
    entry_size: int = 0

    def with_name(self, name: str) -> SectionHeaderEntry:
        """Return a copy of this entry carrying *name*."""
        return self.model_copy(update={"name": name})


# ---------------------------------------------------------------------------
# Per-entry failures
# ---------------------------------------------------------------------------

class DecodeIssue(BaseModel):
    """A recorded, non-fatal failure of a single table entry.

    Attributes:
        table: ``"program"``, ``"section"`` or ``"names"``.
        index: Entry index the failure belongs to.
        error: Exception class name (``OutOfBoundsError`` ...).
        message: Exception message.
        offset: File offset of the failing entry or string.
    """
    model_config = ConfigDict(frozen=True)

    table: str
    index: int
    error: str
    message: str
    offset: int = 0

    @classmethod
    def from_exception(
        cls, table: str, index: int, exc: Exception, offset: int = 0
    ) -> DecodeIssue:
        return cls(
            table=table,
            index=index,
            error=type(exc).__name__,
            message=str(exc),
            offset=offset,
        )


EntryT = TypeVar("EntryT")


class TableResult(BaseModel, Generic[EntryT]):
    """Successfully decoded entries plus the issues of the failed ones."""
    model_config = ConfigDict(frozen=True)

    entries: list[EntryT] = Field(default_factory=list)
    issues: list[DecodeIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


# ---------------------------------------------------------------------------
# Program data preview
# ---------------------------------------------------------------------------

class DataPreview(BaseModel):
    """Leading bytes of a program-data section.

    Attributes:
        name: Resolved section name.
        offset: File offset of the section.
        size: Section size in bytes.
        data: First bytes of the section (bounded to the image).
    """
    model_config = ConfigDict(frozen=True)

    name: str = ""
    offset: int = 0
    size: int = 0
    data: bytes = b""

    @property
    def hex(self) -> str:
        return self.data.hex(" ").upper()


# ---------------------------------------------------------------------------
# Aggregate decode result
# ---------------------------------------------------------------------------

class ElfBinary(BaseModel):
    """Complete decode result for a single image.

    Attributes:
        path: Source path, or ``"<memory>"``.
        size: Image size in bytes.
        header: The decoded file header.
        program_headers: Decoded program headers, ``None`` if not requested.
        section_headers: Decoded, named section headers, ``None`` if not
                         requested.
        issues: Per-entry failures from all table decoders.
        raw: The image bytes, kept read-only for slicing; never serialised.
    """
    model_config = ConfigDict(frozen=True)

    path: str = "<memory>"
    size: int = 0
    header: ElfHeader
    program_headers: Optional[list[ProgramHeaderEntry]] = None
    section_headers: Optional[list[SectionHeaderEntry]] = None
    issues: list[DecodeIssue] = Field(default_factory=list)
    raw: bytes = Field(default=b"", exclude=True, repr=False)

    @property
    def ok(self) -> bool:
        return not self.issues

    def section_by_name(self, name: str) -> Optional[SectionHeaderEntry]:
        """Return the first section whose resolved name is *name*."""
        for entry in self.section_headers or []:
            if entry.name == name:
                return entry
        return None

    def sections_of_type(self, type_name: str) -> list[SectionHeaderEntry]:
        """Return all sections whose type name is *type_name* (``SHT_*``)."""
        return [
            entry for entry in self.section_headers or []
            if entry.section_type.known and entry.section_type.name == type_name
        ]

    def section_data(self, entry: SectionHeaderEntry) -> bytes:
        """Return the file bytes of *entry*, clipped to the image.

        ``SHT_NOBITS`` sections occupy no file space and return ``b""``.
        """
        if entry.section_type.known and entry.section_type.name == "SHT_NOBITS":
            return b""
        start = min(entry.offset, len(self.raw))
        end = min(entry.offset + entry.size, len(self.raw))
        return self.raw[start:end]
