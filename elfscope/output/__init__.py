"""
Elfscope Output Module
=======================

Console display and report generation for decoded ELF images.
"""

from elfscope.output.console import ElfConsoleOutput
from elfscope.output.report import ElfReportGenerator

__all__ = [
    "ElfConsoleOutput",
    "ElfReportGenerator",
]
