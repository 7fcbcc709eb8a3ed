"""
Elfscope Report Generator
==========================

Writes decoded ELF images as structured JSON reports for machine
consumption and downstream tooling.

Byte fields (the magic and the data previews) are rendered as uppercase
hex strings so that the report is plain ASCII JSON.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from elfscope.core.models import DataPreview, ElfBinary


class ElfReportGenerator:
    """Serialises :class:`ElfBinary` results to JSON.

    Usage::

        gen = ElfReportGenerator()
        gen.generate_json(binary, "report.json")
    """

    def __init__(self, version: str = "1.0.0") -> None:
        self._version = version

    def build(
        self,
        binary: ElfBinary,
        previews: list[DataPreview] | None = None,
    ) -> dict[str, Any]:
        """Return the report as a JSON-ready dictionary."""
        body = binary.model_dump(mode="json", exclude={"header": {"magic"}})
        body["header"]["magic"] = binary.header.magic.hex(" ").upper()

        report: dict[str, Any] = {
            "report_type": "elfscope_decode",
            "version": self._version,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            **body,
        }
        if previews is not None:
            report["data"] = [
                {
                    "name": p.name,
                    "offset": p.offset,
                    "size": p.size,
                    "hex": p.hex,
                }
                for p in previews
            ]
        return report

    def generate_json(
        self,
        binary: ElfBinary,
        output_path: str | Path,
        previews: list[DataPreview] | None = None,
    ) -> str:
        """Generate a structured JSON decode report.

        Args:
            binary: The decoded image.
            output_path: Filesystem path for the output JSON file.
            previews: Optional program-data previews to include.

        Returns:
            The absolute path of the generated report.
        """
        report = self.build(binary, previews)
        out = Path(output_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(
            json.dumps(report, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        return str(out.resolve())
