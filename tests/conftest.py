"""Shared fixtures: synthetic images and a quiet engine."""

from __future__ import annotations

import pytest

from shared.config import ElfscopeConfig
from shared.logger import ElfscopeLogger

from elfscope.core.engine import ElfscopeEngine
from tests.elf_factory import BuiltImage, sample_image


@pytest.fixture(params=[(64, "<"), (64, ">"), (32, "<"), (32, ">")],
                ids=["elf64-le", "elf64-be", "elf32-le", "elf32-be"])
def any_layout(request) -> tuple[int, str]:
    """Every (word class, byte order) combination."""
    return request.param


@pytest.fixture
def sample64() -> BuiltImage:
    return sample_image(64, "<")


@pytest.fixture
def sample_any(any_layout) -> BuiltImage:
    bits, order = any_layout
    return sample_image(bits, order)


@pytest.fixture
def quiet_logger() -> ElfscopeLogger:
    return ElfscopeLogger("tests", log_level="CRITICAL", console_output=False)


@pytest.fixture
def config() -> ElfscopeConfig:
    return ElfscopeConfig()


@pytest.fixture
def engine(config, quiet_logger) -> ElfscopeEngine:
    return ElfscopeEngine(config=config, logger=quiet_logger)


@pytest.fixture
def elf_file(tmp_path, sample64):
    """The 64-bit little-endian sample written to disk."""
    path = tmp_path / "sample.elf"
    path.write_bytes(sample64.data)
    return path
