"""
Elfscope Console Interface
===========================

Rich-powered console abstraction providing the presentation primitives
used by the Elfscope CLI: section rules, severity-coloured messages and
styled tables.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

# ---------------------------------------------------------------------------
# Theme -- one palette for every Elfscope view
# ---------------------------------------------------------------------------
_ELFSCOPE_THEME = Theme(
    {
        "elfscope.section": "bold bright_magenta",
        "elfscope.success": "bold green",
        "elfscope.warning": "bold yellow",
        "elfscope.error": "bold red",
        "elfscope.info": "bold bright_blue",
        "elfscope.dim": "dim white",
        "elfscope.highlight": "bold bright_white",
        "elfscope.unknown": "italic yellow",
        "elfscope.hex": "bright_cyan",
    }
)


class ElfscopeConsole:
    """Console wrapper shared by the Elfscope output layer.

    Usage::

        con = ElfscopeConsole()
        con.section("ELF Header")
        con.table("Segments", ["#", "Type"], [[0, "PT_LOAD"]])
        con.success("Decoded 12 sections")
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        width: int | None = None,
    ) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (useful in library / test mode).
            record: Enable Rich recording so output can be exported.
            width:  Fixed render width; detected from the terminal if ``None``.
        """
        self._console = Console(
            theme=_ELFSCOPE_THEME,
            quiet=quiet,
            record=record,
            width=width,
            highlight=False,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Section header
    # ------------------------------------------------------------------ #

    def section(self, title: str) -> None:
        """Print a prominent section rule."""
        self._console.rule(
            f"  {escape(title)}  ",
            style="elfscope.section",
            characters="─",
        )
        self._console.print()

    # ------------------------------------------------------------------ #
    #  Message helpers (severity-coloured)
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(
            f"[elfscope.success][✔] SUCCESS:[/elfscope.success] {escape(message)}"
        )

    def warning(self, message: str) -> None:
        self._console.print(
            f"[elfscope.warning][⚠] WARNING:[/elfscope.warning] {escape(message)}"
        )

    def error(self, message: str) -> None:
        """Print an error message.

        Prefix: Error.
        """
        self._console.print(
            f"[elfscope.error][✘] ERROR:[/elfscope.error] {escape(message)}"
        )

    def info(self, message: str) -> None:
        self._console.print(
            f"[elfscope.info][ℹ] INFO:[/elfscope.info] {escape(message)}"
        )

    # ------------------------------------------------------------------ #
    #  Table display
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Iterable of row tuples; each element is stringified.
                      Cells may contain Rich markup.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            tbl.add_column(col_name, style=style)

        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def blank(self, count: int = 1) -> None:
        """Print *count* blank lines."""
        for _ in range(count):
            self._console.print()

    def divider(self, style: str = "dim") -> None:
        """Print a thin horizontal rule."""
        self._console.rule(style=style)

    def export_text(self) -> str:
        """Export recorded console output as plain text (requires ``record=True``)."""
        return self._console.export_text()
