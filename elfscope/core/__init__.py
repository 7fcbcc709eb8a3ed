"""
Elfscope Core Module
=====================

Contains the data models and the error taxonomy.  The decode engine lives
in :mod:`elfscope.core.engine`; it depends on the parsers, which in turn
depend on this package, so it is not re-exported here.
"""

from elfscope.core.errors import (
    ElfDecodeError,
    MalformedMagicError,
    OutOfBoundsError,
    StringTableError,
    TableDecodeError,
    TableGeometryError,
    UnsupportedAbiError,
    UnsupportedClassError,
    UnsupportedEncodingError,
    UnsupportedInstructionSetError,
    UnsupportedObjectTypeError,
)
from elfscope.core.models import (
    ByteOrder,
    DataPreview,
    DecodeIssue,
    ElfBinary,
    ElfHeader,
    ElfParts,
    ProgramHeaderEntry,
    SectionHeaderEntry,
    TableResult,
    WordClass,
)

__all__ = [
    "ByteOrder",
    "DataPreview",
    "DecodeIssue",
    "ElfBinary",
    "ElfDecodeError",
    "ElfHeader",
    "ElfParts",
    "MalformedMagicError",
    "OutOfBoundsError",
    "ProgramHeaderEntry",
    "SectionHeaderEntry",
    "StringTableError",
    "TableDecodeError",
    "TableGeometryError",
    "TableResult",
    "UnsupportedAbiError",
    "UnsupportedClassError",
    "UnsupportedEncodingError",
    "UnsupportedInstructionSetError",
    "UnsupportedObjectTypeError",
    "WordClass",
]
