"""
ELF File Header Decoder
=========================

Decodes the fixed-layout preamble of an ELF image, starting at offset 0,
field by field through a :class:`~elfscope.parsers.cursor.ByteCursor`:

    magic(4) class(1) data(1) version(1) osabi(1) abiversion(1) pad(7)
    e_type(2) e_machine(2) e_version(4) e_entry(W) e_phoff(W) e_shoff(W)
    e_flags(4) e_ehsize(2) e_phentsize(2) e_phnum(2) e_shentsize(2)
    e_shnum(2) e_shstrndx(2)

where ``W`` is 4 bytes on ELF32 and 8 bytes on ELF64.  Every field after
the identity bytes uses the byte order announced by the data byte.

Decoding is all-or-nothing: any failure raises and no partial header is
returned.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2, Figure 1-3.
    - Linux man page: elf(5).
"""

from __future__ import annotations

from typing import Optional

from shared.config import DecoderConfig
from shared.logger import ElfscopeLogger

from elfscope.core.errors import (
    MalformedMagicError,
    OutOfBoundsError,
    TableGeometryError,
    UnsupportedAbiError,
    UnsupportedClassError,
    UnsupportedEncodingError,
    UnsupportedInstructionSetError,
    UnsupportedObjectTypeError,
)
from elfscope.core.models import ByteOrder, ElfHeader, WordClass
from elfscope.parsers.cursor import ByteCursor
from elfscope.parsers.tables import (
    EI_PAD_SIZE,
    ELF_MAGIC,
    INSTRUCTION_SETS,
    OBJECT_TYPES,
    OS_ABIS,
)


class HeaderDecoder:
    """Decoder for the ELF file header.

    Usage::

        header = HeaderDecoder(raw_bytes).decode()
        print(header.word_class, header.instruction_set)

    Raises (from :meth:`decode`):
        MalformedMagicError: First four bytes are not ``\\x7fELF``.
        UnsupportedClassError: Class byte not 1 or 2.
        UnsupportedEncodingError: Data byte not 1 or 2.
        UnsupportedAbiError: Unknown OS/ABI byte.
        UnsupportedObjectTypeError: Unknown ``e_type``.
        UnsupportedInstructionSetError: Unknown ``e_machine``.
        OutOfBoundsError: The image ends inside the header.
        TableGeometryError: A header table lies outside the image (only
            when ``check_table_bounds`` is enabled).
    """

    def __init__(
        self,
        data: bytes,
        config: DecoderConfig | None = None,
        logger: ElfscopeLogger | None = None,
    ) -> None:
        self._data: bytes = data
        self._config: DecoderConfig = config or DecoderConfig()
        self._logger: ElfscopeLogger = logger or ElfscopeLogger.child(
            None, "parsers.header"
        )

    def decode(self) -> ElfHeader:
        """Decode the header at offset 0.

        Returns:
            The fully populated, immutable :class:`ElfHeader`.
        """
        # Identity bytes are single bytes; the order only matters from e_type on.
        cursor = ByteCursor(self._data, ByteOrder.LITTLE)

        magic = self._read_magic(cursor)
        word_class = self._read_class(cursor)
        byte_order = self._read_encoding(cursor)
        header_version = cursor.read_u8()
        os_abi_code = cursor.read_u8()
        if os_abi_code not in OS_ABIS:
            raise UnsupportedAbiError(os_abi_code)
        abi_version = cursor.read_u8()
        cursor.skip(EI_PAD_SIZE)

        cursor.order = byte_order

        type_code = cursor.read_u16()
        if type_code not in OBJECT_TYPES:
            raise UnsupportedObjectTypeError(type_code)
        machine_code = cursor.read_u16()
        if machine_code not in INSTRUCTION_SETS:
            raise UnsupportedInstructionSetError(machine_code)

        header = ElfHeader(
            magic=magic,
            word_class=word_class,
            byte_order=byte_order,
            header_version=header_version,
            os_abi=OS_ABIS.decode(os_abi_code),
            abi_version=abi_version,
            object_type=OBJECT_TYPES.decode(type_code),
            instruction_set=INSTRUCTION_SETS.decode(machine_code),
            version=cursor.read_u32(),
            entry_point=cursor.read_word(word_class),
            program_header_offset=cursor.read_word(word_class),
            section_header_offset=cursor.read_word(word_class),
            flags=cursor.read_u32(),
            header_size=cursor.read_u16(),
            program_header_entry_size=cursor.read_u16(),
            program_header_entry_count=cursor.read_u16(),
            section_header_entry_size=cursor.read_u16(),
            section_header_entry_count=cursor.read_u16(),
            section_name_table_index=cursor.read_u16(),
        )

        if self._config.check_table_bounds:
            self._check_table_bounds(header)

        self._logger.debug(
            "Decoded %s %s-endian header: %s, %s, entry=0x%x",
            header.word_class.value,
            header.byte_order.value,
            header.object_type.name,
            header.instruction_set.name,
            header.entry_point,
        )
        return header

    # ------------------------------------------------------------------ #
    #  Identity fields
    # ------------------------------------------------------------------ #

    @staticmethod
    def _read_magic(cursor: ByteCursor) -> bytes:
        try:
            magic = cursor.read_bytes(len(ELF_MAGIC))
        except OutOfBoundsError:
            # Shorter than the magic itself: not an ELF image at all.
            raise MalformedMagicError(cursor.read_bytes(cursor.remaining)) from None
        if magic != ELF_MAGIC:
            raise MalformedMagicError(magic)
        return magic

    @staticmethod
    def _read_class(cursor: ByteCursor) -> WordClass:
        code = cursor.read_u8()
        word_class = WordClass.from_code(code)
        if word_class is None:
            raise UnsupportedClassError(code)
        return word_class

    @staticmethod
    def _read_encoding(cursor: ByteCursor) -> ByteOrder:
        code = cursor.read_u8()
        byte_order = ByteOrder.from_code(code)
        if byte_order is None:
            raise UnsupportedEncodingError(code)
        return byte_order

    # ------------------------------------------------------------------ #
    #  Geometry
    # ------------------------------------------------------------------ #

    def _check_table_bounds(self, header: ElfHeader) -> None:
        length = len(self._data)
        for label, (start, end) in (
            ("program header", header.program_table_span),
            ("section header", header.section_table_span),
        ):
            if end > length:
                raise TableGeometryError(
                    f"{label} table [0x{start:x}, 0x{end:x}) extends past "
                    f"image length 0x{length:x}"
                )


def decode_header(
    data: bytes,
    config: DecoderConfig | None = None,
    logger: Optional[ElfscopeLogger] = None,
) -> ElfHeader:
    """Module-level convenience wrapper around :meth:`HeaderDecoder.decode`."""
    return HeaderDecoder(data, config=config, logger=logger).decode()
