"""
Elfscope -- ELF Image Decoder
==============================

Elfscope decodes the structural metadata of ELF images (executables,
shared objects, relocatable objects and core files) for both word
classes and both byte orders.

Capabilities:
    - File header decoding with strict validation of identity fields
    - Program (segment) header table decoding
    - Section header table decoding with offset-based name resolution
    - Per-entry issue recording; sentinel values for unknown codes
    - Program-data (SHT_PROGBITS) hex previews
    - Rich console tables and JSON reports

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
"""

__version__ = "1.0.0"
__tool_name__ = "elfscope"
