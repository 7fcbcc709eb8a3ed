"""
Elfscope CLI -- ELF Image Decoder
===================================

Click-based command-line interface for the Elfscope decoder.  One command
decodes a single ELF file and shows the requested parts.

Usage::

    # File header (default)
    elfscope /bin/ls

    # Program headers, section headers, or both
    elfscope /bin/ls --program
    elfscope /bin/ls --section
    elfscope /bin/ls --all

    # Leading bytes of every SHT_PROGBITS section
    elfscope /bin/ls --data

    # Machine-readable output
    elfscope /bin/ls --all --json
    elfscope /bin/ls --all --output report.json

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import json
import sys
from typing import Optional

import click

from shared.config import ElfscopeConfig
from shared.console import ElfscopeConsole
from shared.logger import ElfscopeLogger

from elfscope.core.engine import ElfscopeEngine
from elfscope.core.errors import ElfDecodeError
from elfscope.core.models import DataPreview, ElfParts
from elfscope.output.console import ElfConsoleOutput
from elfscope.output.report import ElfReportGenerator


def _select_parts(
    program: bool, section: bool, data: bool, all_parts: bool
) -> ElfParts:
    """Collapse the part flags into one request; the widest flag wins."""
    if all_parts or (program and (section or data)):
        return ElfParts.ALL
    if data:
        return ElfParts.DATA
    if section:
        return ElfParts.SECTIONS
    if program:
        return ElfParts.PROGRAM
    return ElfParts.HEADER


@click.command("elfscope")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--header", "-e", is_flag=True, default=False,
              help="Show the ELF file header (default).")
@click.option("--program", "-p", is_flag=True, default=False,
              help="Show the program (segment) header table.")
@click.option("--section", "-s", is_flag=True, default=False,
              help="Show the section header table with resolved names.")
@click.option("--data", "-d", is_flag=True, default=False,
              help="Dump the leading bytes of every SHT_PROGBITS section.")
@click.option("--all", "-a", "all_parts", is_flag=True, default=False,
              help="Show the header and both header tables.")
@click.option("--json", "json_output", is_flag=True, default=False,
              help="Print the result as JSON to stdout.")
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write a JSON report to this path.",
)
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="TOML configuration file.",
)
@click.option("--strict", is_flag=True, default=False,
              help="Fail when any table entry cannot be decoded.")
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Enable verbose/debug output.")
def elfscope_cli(
    path: str,
    header: bool,
    program: bool,
    section: bool,
    data: bool,
    all_parts: bool,
    json_output: bool,
    output_path: Optional[str],
    config_path: Optional[str],
    strict: bool,
    verbose: bool,
) -> None:
    """Elfscope -- ELF Image Decoder.

    Decode the file header, program headers and section headers of an
    ELF executable, shared object, relocatable object or core file.

    PATH is the path to the ELF file to decode.

    Examples:

    \b
        elfscope /usr/bin/ls --all
        elfscope libc.so.6 --section --json
    """
    console = ElfscopeConsole()

    try:
        config = ElfscopeConfig.load(config_path)
    except (OSError, ValueError) as exc:
        console.error(f"Could not load configuration: {exc}")
        sys.exit(1)

    if strict:
        config.decoder.strict = True

    settings = config.global_settings
    logger = ElfscopeLogger(
        "cli",
        log_level="DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file,
        json_logs=settings.log_json,
    )

    parts = _select_parts(program, section, data, all_parts)
    engine = ElfscopeEngine(config=config, logger=logger)

    try:
        binary = engine.decode_file(path, parts=parts)
        previews: list[DataPreview] | None = None
        if data:
            previews = engine.program_data_preview(binary)
    except ElfDecodeError as exc:
        console.error(f"Decoding failed: {exc}")
        sys.exit(1)
    except OSError as exc:
        console.error(f"Could not read {path}: {exc}")
        sys.exit(1)

    report_gen = ElfReportGenerator(version=settings.version)

    if json_output:
        click.echo(json.dumps(report_gen.build(binary, previews), indent=2))
    else:
        ElfConsoleOutput(console=console, display=config.display).display(
            binary, previews
        )
        if binary.issues:
            console.warning(f"{len(binary.issues)} table entr"
                            f"{'y' if len(binary.issues) == 1 else 'ies'} "
                            f"could not be decoded.")

    if output_path:
        report_path = report_gen.generate_json(binary, output_path, previews)
        if not json_output:
            console.success(f"JSON report saved: {report_path}")


# ---------------------------------------------------------------------------
# Module entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Entry point for the ``elfscope`` script and ``python -m elfscope``."""
    elfscope_cli()


if __name__ == "__main__":
    main()
