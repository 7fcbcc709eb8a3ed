"""
Elfscope Decode Engine
=======================

Orchestrates the ELF decoding pipeline and aggregates its stages into a
single :class:`~elfscope.core.models.ElfBinary`.

Decode Pipeline:
    1. Read the image once (size-limited)
    2. Decode the file header at offset 0 (fatal on failure)
    3. Decode the program header table (per-entry issues)
    4. Decode the section header table (per-entry issues)
    5. Resolve section names from the ``e_shstrndx`` string table

Stages 3 and 4 depend only on the header and run independently of each
other; stage 5 needs the decoded section entries.  In strict mode any
recorded issue aborts the decode with
:class:`~elfscope.core.errors.TableDecodeError`.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - Linux man page: elf(5).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from shared.config import ElfscopeConfig
from shared.logger import ElfscopeLogger

from elfscope.core.errors import EmptyFileError, FileTooLargeError, TableDecodeError
from elfscope.core.models import (
    DataPreview,
    DecodeIssue,
    ElfBinary,
    ElfParts,
    ProgramHeaderEntry,
    SectionHeaderEntry,
)
from elfscope.parsers.header import HeaderDecoder
from elfscope.parsers.names import NameResolver
from elfscope.parsers.program import ProgramHeaderDecoder
from elfscope.parsers.section import SectionHeaderDecoder


class ElfscopeEngine:
    """Runs the decoders over an image and collects the results.

    Usage::

        engine = ElfscopeEngine()
        binary = engine.decode_file("/bin/ls", parts=ElfParts.ALL)
        print(binary.header.instruction_set, len(binary.section_headers))
    """

    def __init__(
        self,
        config: ElfscopeConfig | None = None,
        logger: ElfscopeLogger | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            config: Elfscope configuration.  Defaults are used if not provided.
            logger: Logger instance.  A new one is created if not provided.
        """
        self._config: ElfscopeConfig = config or ElfscopeConfig()
        self._logger: ElfscopeLogger = logger or ElfscopeLogger(
            "engine", log_level=self._config.global_settings.log_level
        )

    # ------------------------------------------------------------------ #
    #  File input
    # ------------------------------------------------------------------ #

    def read_image(self, path: str | Path) -> bytes:
        """Read the whole file at *path*.

        Raises:
            FileNotFoundError: *path* does not exist.
            EmptyFileError: The file has no bytes.
            FileTooLargeError: The file exceeds ``decoder.max_file_size``.
        """
        file_path = Path(path)
        size = file_path.stat().st_size
        limit = self._config.decoder.max_file_size
        if size == 0:
            raise EmptyFileError(str(file_path))
        if size > limit:
            raise FileTooLargeError(str(file_path), size, limit)

        data = file_path.read_bytes()
        self._logger.debug("Read %d bytes from %s", len(data), file_path)
        return data

    # ------------------------------------------------------------------ #
    #  Decoding
    # ------------------------------------------------------------------ #

    def decode(
        self,
        data: bytes,
        parts: ElfParts = ElfParts.ALL,
        path: str = "<memory>",
    ) -> ElfBinary:
        """Decode *data* and return the aggregate result.

        Args:
            data: The complete image.
            parts: Which tables to decode in addition to the header.
            path: Label recorded on the result.

        Raises:
            ElfDecodeError: Any header failure; in strict mode also
                :class:`TableDecodeError` when an entry failed.
        """
        data = bytes(data)
        self._logger.info("Decoding %s (%d bytes, parts=%s)", path, len(data), parts.value)

        with self._logger.stage("header"):
            header = HeaderDecoder(
                data,
                config=self._config.decoder,
                logger=ElfscopeLogger.child(self._logger, "parsers.header"),
            ).decode()
            self._logger.info(
                "%s %s-endian %s for %s",
                header.word_class.value,
                header.byte_order.value,
                header.object_type.name,
                header.instruction_set.name,
            )

        issues: list[DecodeIssue] = []
        program_headers: Optional[list[ProgramHeaderEntry]] = None
        section_headers: Optional[list[SectionHeaderEntry]] = None

        if parts.wants_program_headers:
            with self._logger.stage("program_headers"):
                result = ProgramHeaderDecoder(
                    data, header,
                    logger=ElfscopeLogger.child(self._logger, "parsers.program"),
                ).decode()
                program_headers = result.entries
                issues.extend(result.issues)
                self._logger.info(
                    "Program headers: %d decoded, %d dropped",
                    len(result.entries), len(result.issues),
                )

        if parts.wants_section_headers:
            with self._logger.stage("section_headers"):
                result = SectionHeaderDecoder(
                    data, header,
                    logger=ElfscopeLogger.child(self._logger, "parsers.section"),
                ).decode()
                issues.extend(result.issues)
                self._logger.info(
                    "Section headers: %d decoded, %d dropped",
                    len(result.entries), len(result.issues),
                )

            with self._logger.stage("names"):
                named = NameResolver(
                    data, header,
                    logger=ElfscopeLogger.child(self._logger, "parsers.names"),
                ).resolve(result.entries)
                section_headers = named.entries
                issues.extend(named.issues)

        if issues and self._config.decoder.strict:
            self._logger.error("Strict mode: %d table issue(s)", len(issues))
            raise TableDecodeError(issues)

        return ElfBinary(
            path=path,
            size=len(data),
            header=header,
            program_headers=program_headers,
            section_headers=section_headers,
            issues=issues,
            raw=data,
        )

    def decode_file(
        self, path: str | Path, parts: ElfParts = ElfParts.HEADER
    ) -> ElfBinary:
        """Read the file at *path* and decode it."""
        data = self.read_image(path)
        return self.decode(data, parts=parts, path=str(Path(path).resolve()))

    # ------------------------------------------------------------------ #
    #  Program data dump
    # ------------------------------------------------------------------ #

    def program_data_preview(
        self, binary: ElfBinary, limit: int | None = None
    ) -> list[DataPreview]:
        """Return the leading bytes of every ``SHT_PROGBITS`` section.

        Args:
            binary: A result decoded with section headers.
            limit: Bytes per section; ``decoder.data_preview_bytes`` if ``None``.
        """
        if limit is None:
            limit = self._config.decoder.data_preview_bytes
        previews: list[DataPreview] = []
        for entry in binary.sections_of_type("SHT_PROGBITS"):
            previews.append(
                DataPreview(
                    name=entry.name,
                    offset=entry.offset,
                    size=entry.size,
                    data=binary.section_data(entry)[:limit],
                )
            )
        self._logger.debug("Prepared %d program data preview(s)", len(previews))
        return previews
