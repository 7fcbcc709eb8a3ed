"""
Elfscope Error Taxonomy
========================

Exception hierarchy raised by the ELF decoding pipeline.

Two tiers exist:

* **Fatal** errors abort the whole decode.  Every header-level failure
  (bad magic, unsupported class / encoding / ABI / object type /
  instruction set, truncated header) is fatal -- there is no partial
  header result.
* **Per-entry** errors raised while decoding a single program or section
  header entry are caught by the table decoder, recorded as a
  :class:`~elfscope.core.models.DecodeIssue` and the offending entry is
  dropped.  Decoding continues with the next entry.

Unrecognized enumeration codes inside table entries are never raised;
they are recovered locally as sentinel values carrying the raw code.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
"""

from __future__ import annotations

from typing import Any


class ElfDecodeError(Exception):
    """Base class for every error raised while decoding an ELF image."""

    pass


# ========================== Fatal header errors ============================


class MalformedMagicError(ElfDecodeError):
    """The first four bytes are not ``7F 45 4C 46``."""

    def __init__(self, found: bytes) -> None:
        self.found = bytes(found)
        super().__init__(
            f"Unsupported file type: bad ELF magic {self.found.hex(' ')!r}"
        )


class UnsupportedValueError(ElfDecodeError):
    """A single-valued header field holds a code outside its table.

    Attributes:
        field: Human-readable name of the field.
        code:  The raw numeric code found in the image.
    """

    field: str = "value"

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(f"Unsupported {self.field}: 0x{code:x}")


class UnsupportedClassError(UnsupportedValueError):
    """Class byte (``EI_CLASS``) is neither 1 (32-bit) nor 2 (64-bit)."""

    field = "word class"


class UnsupportedEncodingError(UnsupportedValueError):
    """Data byte (``EI_DATA``) is neither 1 (little) nor 2 (big)."""

    field = "data encoding"


class UnsupportedAbiError(UnsupportedValueError):
    """OS/ABI byte (``EI_OSABI``) is not a known target ABI."""

    field = "OS/ABI"


class UnsupportedObjectTypeError(UnsupportedValueError):
    """Object file type (``e_type``) is not a known type or reserved range."""

    field = "object file type"


class UnsupportedInstructionSetError(UnsupportedValueError):
    """Machine code (``e_machine``) is not a known instruction set."""

    field = "instruction set"


# ========================== Bounds / geometry ==============================


class OutOfBoundsError(ElfDecodeError):
    """A read of *width* bytes at *offset* would pass the end of the image."""

    def __init__(self, offset: int, width: int, length: int) -> None:
        self.offset = offset
        self.width = width
        self.length = length
        super().__init__(
            f"Read of {width} byte(s) at offset 0x{offset:x} exceeds "
            f"image length 0x{length:x}"
        )


class TableGeometryError(ElfDecodeError):
    """Table offset, entry size or entry count disagree with the image."""

    pass


class StringTableError(ElfDecodeError):
    """The section-name string table is missing, misplaced or too short."""

    pass


class TableDecodeError(ElfDecodeError):
    """Raised in strict mode when any table entry failed to decode.

    Attributes:
        issues: The recorded :class:`~elfscope.core.models.DecodeIssue`
                objects.
    """

    def __init__(self, issues: list[Any]) -> None:
        self.issues = list(issues)
        first = self.issues[0].message if self.issues else "unknown failure"
        super().__init__(
            f"{len(self.issues)} table entr"
            f"{'y' if len(self.issues) == 1 else 'ies'} failed to decode "
            f"(first: {first})"
        )


# ========================== File-read collaborator =========================


class EmptyFileError(ElfDecodeError):
    """The input file contains no bytes."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File is empty: {path}")


class FileTooLargeError(ElfDecodeError):
    """The input file exceeds the configured maximum size."""

    def __init__(self, path: str, size: int, limit: int) -> None:
        self.path = path
        self.size = size
        self.limit = limit
        super().__init__(
            f"File too large: {size:,} bytes (max: {limit:,} bytes): {path}"
        )
