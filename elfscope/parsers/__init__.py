"""
Elfscope Parsers
=================

Byte cursor, code tables and the four decoders: file header, program
header table, section header table and section-name resolution.
"""

from elfscope.parsers.cursor import ByteCursor
from elfscope.parsers.header import HeaderDecoder, decode_header
from elfscope.parsers.names import NameResolver, resolve_names
from elfscope.parsers.program import ProgramHeaderDecoder
from elfscope.parsers.section import SectionHeaderDecoder

__all__ = [
    "ByteCursor",
    "HeaderDecoder",
    "NameResolver",
    "ProgramHeaderDecoder",
    "SectionHeaderDecoder",
    "decode_header",
    "resolve_names",
]
