"""Tests for TOML configuration loading."""

import pytest

from shared.config import DecoderConfig, ElfscopeConfig, get_config


def test_defaults():
    config = ElfscopeConfig()
    assert config.decoder.check_table_bounds is True
    assert config.decoder.strict is False
    assert config.decoder.data_preview_bytes == 16
    assert config.display.show_unknown_codes is True
    assert config.global_settings.log_file is None


def test_load_custom_file(tmp_path):
    path = tmp_path / "elfscope.toml"
    path.write_text(
        '[global]\nlog_level = "DEBUG"\n\n'
        "[decoder]\nstrict = true\nmax_file_size = 1024\n\n"
        "[display]\nhex_width = 8\n"
    )
    config = ElfscopeConfig.load(path)
    assert config.global_settings.log_level == "DEBUG"
    assert config.decoder.strict is True
    assert config.decoder.max_file_size == 1024
    assert config.decoder.check_table_bounds is True
    assert config.display.hex_width == 8


def test_unknown_keys_are_ignored(tmp_path):
    path = tmp_path / "elfscope.toml"
    path.write_text("[decoder]\nfuture_option = 1\ndata_preview_bytes = 4\n")
    assert ElfscopeConfig.load(path).decoder == DecoderConfig(data_preview_bytes=4)


def test_explicit_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ElfscopeConfig.load(tmp_path / "missing.toml")


def test_to_dict_round_trips_sections():
    data = ElfscopeConfig().to_dict()
    assert set(data) == {"global_settings", "decoder", "display"}
    assert data["decoder"]["strict"] is False


def test_get_config_caches(tmp_path):
    path = tmp_path / "elfscope.toml"
    path.write_text("[display]\nhex_width = 4\n")
    first = get_config(path)
    assert first.display.hex_width == 4
    assert get_config() is first
