"""
Elfscope Configuration Management
===================================

Centralized configuration for the Elfscope decoder, presentation layer
and CLI using Python dataclasses and TOML-based persistence.

Configuration is kept apart from code following the Twelve-Factor App
methodology (Wiggins, 2011).

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Section Configs ================================


@dataclass(frozen=False, slots=True)
class DecoderConfig:
    """Configuration for the ELF decoding pipeline.

    ``check_table_bounds`` enforces, at header-decode time, that both
    header tables lie inside the image.  ``strict`` turns any recorded
    per-entry issue into a :class:`~elfscope.core.errors.TableDecodeError`.
    """

    check_table_bounds: bool = True
    strict: bool = False
    max_file_size: int = 268_435_456  # 256 MiB
    data_preview_bytes: int = 16


@dataclass(frozen=False, slots=True)
class DisplayConfig:
    """Configuration for console rendering."""

    show_unknown_codes: bool = True
    hex_width: int = 16


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity, log sinks and report version."""

    log_level: str = "WARNING"
    log_file: Optional[str] = None
    log_json: bool = False
    version: str = "1.0.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class ElfscopeConfig:
    """Master configuration aggregating all settings.

    Usage:
        >>> config = ElfscopeConfig.load()                 # from default path
        >>> config = ElfscopeConfig.load("custom.toml")    # from custom path
        >>> config.decoder.check_table_bounds
        True
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> ElfscopeConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A fully-populated :class:`ElfscopeConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            decoder=cls._build_section(DecoderConfig, raw.get("decoder", {})),
            display=cls._build_section(DisplayConfig, raw.get("display", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored so that newer config
        files still load.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


# ========================= Module-level convenience ========================

def get_config(path: str | Path | None = None) -> ElfscopeConfig:
    """Module-level convenience wrapper around :meth:`ElfscopeConfig.load`.

    Caches the result so that repeated calls share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = ElfscopeConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
