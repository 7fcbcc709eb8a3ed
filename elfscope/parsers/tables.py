"""
ELF Enumeration Tables
========================

One ordered code table per enumerated ELF field.  Each table is the single
source of truth for both decoding (raw code -> :class:`EnumValue`) and
diagnostic text (raw code -> description), so decode and display logic
never disagree.

A table entry covers an inclusive code range; single codes use
``low == high``.  Lookup returns the *first* matching entry, so specific
codes that fall inside a reserved range (the GNU segment types inside the
OS-specific range, for instance) must be listed before the range itself.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1, chapter 4.
    - Wikipedia. Executable and Linkable Format -- File header.
    - OSDev Wiki. ELF.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterator, Optional, TypeVar

from elfscope.core.models import (
    EnumValue,
    InstructionSet,
    ObjectType,
    OsAbi,
    SectionFlags,
    SectionType,
    SegmentFlags,
    SegmentType,
)


# Magic number
ELF_MAGIC: bytes = b"\x7fELF"

# Identity layout
EI_NIDENT: int = 16
EI_PAD_SIZE: int = 7

# Natural entry sizes of the table layouts
ELF32_PHDR_SIZE: int = 32
ELF64_PHDR_SIZE: int = 56
ELF32_SHDR_SIZE: int = 40
ELF64_SHDR_SIZE: int = 64

# Special section index: no section-name string table
SHN_UNDEF: int = 0


ValueT = TypeVar("ValueT", bound=EnumValue)


@dataclass(frozen=True, slots=True)
class CodeEntry:
    """A single code (or inclusive code range) of an enumeration table.

    Attributes:
        low: First code covered.
        high: Last code covered (equal to *low* for a single code).
        name: Symbolic name (``PT_LOAD``, ``EM_X86_64`` ...).
        description: Human-readable description.
    """
    low: int
    high: int
    name: str
    description: str

    def matches(self, code: int) -> bool:
        return self.low <= code <= self.high


def _code(code: int, name: str, description: str) -> CodeEntry:
    return CodeEntry(code, code, name, description)


def _range(low: int, high: int, name: str, description: str) -> CodeEntry:
    return CodeEntry(low, high, name, description)


class CodeTable(Generic[ValueT]):
    """Ordered ``code -> name`` table for one enumerated field.

    Usage::

        SEGMENT_TYPES.decode(1)            # SegmentType(name="PT_LOAD", ...)
        SEGMENT_TYPES.decode(0x99999999)   # sentinel, known=False
        SEGMENT_TYPES.describe(1)          # "Loadable segment"
    """

    def __init__(
        self,
        field: str,
        value_type: type[ValueT],
        entries: list[CodeEntry],
        sentinel: str = "UNKNOWN",
    ) -> None:
        """Create a table.

        Args:
            field: Field name used in diagnostics.
            value_type: :class:`EnumValue` subclass produced by :meth:`decode`.
            entries: Ordered entries; the first match wins.
            sentinel: Name given to values for unrecognized codes.
        """
        self._field = field
        self._value_type = value_type
        self._entries: tuple[CodeEntry, ...] = tuple(entries)
        self._sentinel = sentinel

    @property
    def field(self) -> str:
        return self._field

    @property
    def sentinel(self) -> str:
        return self._sentinel

    def lookup(self, code: int) -> Optional[CodeEntry]:
        """Return the first entry covering *code*, or ``None``."""
        for entry in self._entries:
            if entry.matches(code):
                return entry
        return None

    def decode(self, code: int) -> ValueT:
        """Map *code* to a known value or to the sentinel carrying *code*."""
        entry = self.lookup(code)
        if entry is None:
            return self._value_type(
                code=code,
                name=self._sentinel,
                description=f"Unrecognized {self._field}",
                known=False,
            )
        return self._value_type(
            code=code, name=entry.name, description=entry.description
        )

    def describe(self, code: int) -> str:
        """Human-readable description of *code*."""
        entry = self.lookup(code)
        if entry is None:
            return f"Unrecognized {self._field} (0x{code:x})"
        return entry.description

    def code_of(self, name: str) -> int:
        """Return the (lowest) code registered under *name*."""
        for entry in self._entries:
            if entry.name == name:
                return entry.low
        raise KeyError(name)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, int) and self.lookup(code) is not None

    def __iter__(self) -> Iterator[CodeEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


# ---------------------------------------------------------------------------
# EI_OSABI -- target operating system ABI
# ---------------------------------------------------------------------------

OS_ABIS: CodeTable[OsAbi] = CodeTable("OS/ABI", OsAbi, [
    _code(0x00, "ELFOSABI_SYSV", "System V"),
    _code(0x01, "ELFOSABI_HPUX", "HP-UX"),
    _code(0x02, "ELFOSABI_NETBSD", "NetBSD"),
    _code(0x03, "ELFOSABI_LINUX", "Linux"),
    _code(0x04, "ELFOSABI_HURD", "GNU Hurd"),
    _code(0x06, "ELFOSABI_SOLARIS", "Solaris"),
    _code(0x07, "ELFOSABI_AIX", "AIX (Monterey)"),
    _code(0x08, "ELFOSABI_IRIX", "IRIX"),
    _code(0x09, "ELFOSABI_FREEBSD", "FreeBSD"),
    _code(0x0A, "ELFOSABI_TRU64", "Tru64"),
    _code(0x0B, "ELFOSABI_MODESTO", "Novell Modesto"),
    _code(0x0C, "ELFOSABI_OPENBSD", "OpenBSD"),
    _code(0x0D, "ELFOSABI_OPENVMS", "OpenVMS"),
    _code(0x0E, "ELFOSABI_NSK", "NonStop Kernel"),
    _code(0x0F, "ELFOSABI_AROS", "AROS"),
    _code(0x10, "ELFOSABI_FENIXOS", "FenixOS"),
    _code(0x11, "ELFOSABI_CLOUDABI", "Nuxi CloudABI"),
    _code(0x12, "ELFOSABI_OPENVOS", "Stratus Technologies OpenVOS"),
])


# ---------------------------------------------------------------------------
# e_type -- object file type
# ---------------------------------------------------------------------------

OBJECT_TYPES: CodeTable[ObjectType] = CodeTable("object file type", ObjectType, [
    _code(0x0000, "ET_NONE", "Unknown"),
    _code(0x0001, "ET_REL", "Relocatable file"),
    _code(0x0002, "ET_EXEC", "Executable file"),
    _code(0x0003, "ET_DYN", "Shared object"),
    _code(0x0004, "ET_CORE", "Core file"),
    _code(0xFE00, "ET_LOOS", "Operating system specific (low)"),
    _code(0xFEFF, "ET_HIOS", "Operating system specific (high)"),
    _range(0xFE01, 0xFEFE, "ET_OS", "Operating system specific"),
    _code(0xFF00, "ET_LOPROC", "Processor specific (low)"),
    _code(0xFFFF, "ET_HIPROC", "Processor specific (high)"),
    _range(0xFF01, 0xFFFE, "ET_PROC", "Processor specific"),
])


# ---------------------------------------------------------------------------
# e_machine -- instruction set architecture
# ---------------------------------------------------------------------------

INSTRUCTION_SETS: CodeTable[InstructionSet] = CodeTable("instruction set", InstructionSet, [
    _code(0x00, "EM_NONE", "No specific instruction set"),
    _code(0x01, "EM_M32", "AT&T WE 32100"),
    _code(0x02, "EM_SPARC", "SPARC"),
    _code(0x03, "EM_386", "x86"),
    _code(0x04, "EM_68K", "Motorola 68000 (M68k)"),
    _code(0x05, "EM_88K", "Motorola 88000 (M88k)"),
    _code(0x06, "EM_IAMCU", "Intel MCU"),
    _code(0x07, "EM_860", "Intel 80860"),
    _code(0x08, "EM_MIPS", "MIPS"),
    _code(0x09, "EM_S370", "IBM System/370"),
    _code(0x0A, "EM_MIPS_RS3_LE", "MIPS RS3000 Little-endian"),
    _range(0x0B, 0x0E, "EM_RESERVED", "Reserved for future use"),
    _code(0x0F, "EM_PARISC", "Hewlett-Packard PA-RISC"),
    _code(0x13, "EM_960", "Intel 80960"),
    _code(0x14, "EM_PPC", "PowerPC"),
    _code(0x15, "EM_PPC64", "PowerPC (64-bit)"),
    _code(0x16, "EM_S390", "S390, including S390x"),
    _code(0x17, "EM_SPU", "IBM SPU/SPC"),
    _range(0x18, 0x23, "EM_RESERVED", "Reserved for future use"),
    _code(0x24, "EM_V800", "NEC V800"),
    _code(0x25, "EM_FR20", "Fujitsu FR20"),
    _code(0x26, "EM_RH32", "TRW RH-32"),
    _code(0x27, "EM_RCE", "Motorola RCE"),
    _code(0x28, "EM_ARM", "Arm (up to Armv7/AArch32)"),
    _code(0x29, "EM_ALPHA", "Digital Alpha"),
    _code(0x2A, "EM_SH", "SuperH"),
    _code(0x2B, "EM_SPARCV9", "SPARC Version 9"),
    _code(0x2C, "EM_TRICORE", "Siemens TriCore embedded processor"),
    _code(0x2D, "EM_ARC", "Argonaut RISC Core"),
    _code(0x2E, "EM_H8_300", "Hitachi H8/300"),
    _code(0x2F, "EM_H8_300H", "Hitachi H8/300H"),
    _code(0x30, "EM_H8S", "Hitachi H8S"),
    _code(0x31, "EM_H8_500", "Hitachi H8/500"),
    _code(0x32, "EM_IA_64", "IA-64"),
    _code(0x33, "EM_MIPS_X", "Stanford MIPS-X"),
    _code(0x34, "EM_COLDFIRE", "Motorola ColdFire"),
    _code(0x35, "EM_68HC12", "Motorola M68HC12"),
    _code(0x36, "EM_MMA", "Fujitsu MMA Multimedia Accelerator"),
    _code(0x37, "EM_PCP", "Siemens PCP"),
    _code(0x38, "EM_NCPU", "Sony nCPU embedded RISC processor"),
    _code(0x39, "EM_NDR1", "Denso NDR1 microprocessor"),
    _code(0x3A, "EM_STARCORE", "Motorola Star*Core processor"),
    _code(0x3B, "EM_ME16", "Toyota ME16 processor"),
    _code(0x3C, "EM_ST100", "STMicroelectronics ST100 processor"),
    _code(0x3D, "EM_TINYJ", "Advanced Logic Corp. TinyJ embedded processor family"),
    _code(0x3E, "EM_X86_64", "AMD x86-64"),
    _code(0x3F, "EM_PDSP", "Sony DSP Processor"),
    _code(0x40, "EM_PDP10", "Digital Equipment Corp. PDP-10"),
    _code(0x41, "EM_PDP11", "Digital Equipment Corp. PDP-11"),
    _code(0x42, "EM_FX66", "Siemens FX66 microcontroller"),
    _code(0x43, "EM_ST9PLUS", "STMicroelectronics ST9+ 8/16-bit microcontroller"),
    _code(0x44, "EM_ST7", "STMicroelectronics ST7 8-bit microcontroller"),
    _code(0x45, "EM_68HC16", "Motorola MC68HC16 Microcontroller"),
    _code(0x46, "EM_68HC11", "Motorola MC68HC11 Microcontroller"),
    _code(0x47, "EM_68HC08", "Motorola MC68HC08 Microcontroller"),
    _code(0x48, "EM_68HC05", "Motorola MC68HC05 Microcontroller"),
    _code(0x49, "EM_SVX", "Silicon Graphics SVx"),
    _code(0x4A, "EM_ST19", "STMicroelectronics ST19 8-bit microcontroller"),
    _code(0x4B, "EM_VAX", "Digital VAX"),
    _code(0x4C, "EM_CRIS", "Axis Communications 32-bit embedded processor"),
    _code(0x4D, "EM_JAVELIN", "Infineon Technologies 32-bit embedded processor"),
    _code(0x4E, "EM_FIREPATH", "Element 14 64-bit DSP Processor"),
    _code(0x4F, "EM_ZSP", "LSI Logic 16-bit DSP Processor"),
    _code(0x8C, "EM_TI_C6000", "TMS320C6000 Family"),
    _code(0xAF, "EM_MCST_ELBRUS", "MCST Elbrus e2k"),
    _code(0xB7, "EM_AARCH64", "Arm 64-bits (Armv8/AArch64)"),
    _code(0xDC, "EM_Z80", "Zilog Z80"),
    _code(0xF3, "EM_RISCV", "RISC-V"),
    _code(0xF7, "EM_BPF", "Berkeley Packet Filter"),
    _code(0x101, "EM_65816", "WDC 65C816"),
    _code(0x102, "EM_LOONGARCH", "LoongArch"),
])


# ---------------------------------------------------------------------------
# p_type -- segment type
# ---------------------------------------------------------------------------

SEGMENT_TYPES: CodeTable[SegmentType] = CodeTable("segment type", SegmentType, [
    _code(0x00000000, "PT_NULL", "Program header table entry unused"),
    _code(0x00000001, "PT_LOAD", "Loadable segment"),
    _code(0x00000002, "PT_DYNAMIC", "Dynamic linking information"),
    _code(0x00000003, "PT_INTERP", "Interpreter information"),
    _code(0x00000004, "PT_NOTE", "Auxiliary information"),
    _code(0x00000005, "PT_SHLIB", "Reserved"),
    _code(0x00000006, "PT_PHDR", "Segment containing program header table itself"),
    _code(0x00000007, "PT_TLS", "Thread-Local Storage template"),
    _code(0x60000000, "PT_LOOS", "Operating system specific (low)"),
    _code(0x6474E550, "PT_GNU_EH_FRAME", "GCC .eh_frame_hdr segment"),
    _code(0x6474E551, "PT_GNU_STACK", "Stack executability"),
    _code(0x6474E552, "PT_GNU_RELRO", "Read-only after relocation"),
    _code(0x6474E553, "PT_GNU_PROPERTY", "GNU property notes"),
    _code(0x6FFFFFFF, "PT_HIOS", "Operating system specific (high)"),
    _range(0x60000001, 0x6FFFFFFE, "PT_OS", "Operating system specific"),
    _code(0x70000000, "PT_LOPROC", "Processor specific (low)"),
    _code(0x7FFFFFFF, "PT_HIPROC", "Processor specific (high)"),
    _range(0x70000001, 0x7FFFFFFE, "PT_PROC", "Processor specific"),
])


# ---------------------------------------------------------------------------
# p_flags -- segment permissions (exact single-bit match)
# ---------------------------------------------------------------------------

PF_X: int = 0x1
PF_W: int = 0x2
PF_R: int = 0x4

SEGMENT_FLAGS: CodeTable[SegmentFlags] = CodeTable("segment flags", SegmentFlags, [
    _code(PF_X, "PF_X", "Executable segment"),
    _code(PF_W, "PF_W", "Writable segment"),
    _code(PF_R, "PF_R", "Readable segment"),
])


# ---------------------------------------------------------------------------
# sh_type -- section type
# ---------------------------------------------------------------------------

SECTION_TYPES: CodeTable[SectionType] = CodeTable("section type", SectionType, [
    _code(0x00, "SHT_NULL", "Section header table entry unused"),
    _code(0x01, "SHT_PROGBITS", "Program data"),
    _code(0x02, "SHT_SYMTAB", "Symbol table"),
    _code(0x03, "SHT_STRTAB", "String table"),
    _code(0x04, "SHT_RELA", "Relocation entries with addends"),
    _code(0x05, "SHT_HASH", "Symbol hash table"),
    _code(0x06, "SHT_DYNAMIC", "Dynamic linking information"),
    _code(0x07, "SHT_NOTE", "Notes"),
    _code(0x08, "SHT_NOBITS", "Program space with no data (bss)"),
    _code(0x09, "SHT_REL", "Relocation entries, no addends"),
    _code(0x0A, "SHT_SHLIB", "Reserved"),
    _code(0x0B, "SHT_DYNSYM", "Dynamic linker symbol table"),
    _code(0x0E, "SHT_INIT_ARRAY", "Array of constructors"),
    _code(0x0F, "SHT_FINI_ARRAY", "Array of destructors"),
    _code(0x10, "SHT_PREINIT_ARRAY", "Array of pre-constructors"),
    _code(0x11, "SHT_GROUP", "Section group"),
    _code(0x12, "SHT_SYMTAB_SHNDX", "Extended section indices"),
    _code(0x13, "SHT_NUM", "Number of defined types"),
    _code(0x60000000, "SHT_LOOS", "Start OS-specific"),
], sentinel="NULL")


# ---------------------------------------------------------------------------
# sh_flags -- section attributes (exact single-bit or mask match)
# ---------------------------------------------------------------------------

SECTION_FLAGS: CodeTable[SectionFlags] = CodeTable("section flags", SectionFlags, [
    _code(0x1, "SHF_WRITE", "Writable"),
    _code(0x2, "SHF_ALLOC", "Occupies memory during execution"),
    _code(0x4, "SHF_EXECINSTR", "Executable"),
    _code(0x10, "SHF_MERGE", "Might be merged"),
    _code(0x20, "SHF_STRINGS", "Contains null-terminated strings"),
    _code(0x40, "SHF_INFO_LINK", "sh_info contains SHT index"),
    _code(0x80, "SHF_LINK_ORDER", "Preserve order after combining"),
    _code(0x100, "SHF_OS_NONCONFORMING", "Non-standard OS specific handling required"),
    _code(0x200, "SHF_GROUP", "Section is member of a group"),
    _code(0x400, "SHF_TLS", "Section holds thread-local data"),
    _code(0x0FF00000, "SHF_MASKOS", "OS-specific"),
    _code(0xF0000000, "SHF_MASKPROC", "Processor-specific"),
    _code(0x4000000, "SHF_ORDERED", "Special ordering requirement (Solaris)"),
    _code(0x8000000, "SHF_EXCLUDE", "Excluded unless referenced or allocated (Solaris)"),
], sentinel="NULL")
