"""Tests for treon_converter.config – YAML config loading and parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from treon_converter.config import ConverterYAMLConfig, load_yaml_config

# -----------------------------------------------------------------------
# ConverterYAMLConfig model
# -----------------------------------------------------------------------


class TestConverterYAMLConfig:
    """ConverterYAMLConfig defaults and construction."""

    def test_defaults(self) -> None:
        cfg = ConverterYAMLConfig()
        assert cfg.vibration_exclude == []
        assert cfg.sink_configs == []
        assert cfg.log_level == "INFO"

    def test_build_converter(self) -> None:
        cfg = ConverterYAMLConfig(vibration_exclude=["Kurtosis", "Crest"])
        converter = cfg.build_converter()
        assert converter.vibration_exclude == frozenset({"Kurtosis", "Crest"})


# -----------------------------------------------------------------------
# load_yaml_config
# -----------------------------------------------------------------------


class TestLoadYAMLConfig:
    """load_yaml_config() parsing from temporary YAML files."""

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_yaml_config(tmp_path / "nonexistent.yaml")

    def test_full_config(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "conv.yaml"
        cfg_file.write_text("""\
converter:
  log_level: debug
  vibration_exclude: [Kurtosis]

sinks:
  - type: console
    fmt: json
  - type: file
    path: ./output
    format: csv
""")
        cfg = load_yaml_config(cfg_file)
        assert cfg.log_level == "DEBUG"
        assert cfg.vibration_exclude == ["Kurtosis"]
        assert len(cfg.sink_configs) == 2
        assert cfg.sink_configs[0] == {"type": "console", "fmt": "json"}

    def test_single_exclude_string(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "conv.yaml"
        cfg_file.write_text("converter:\n  vibration_exclude: RMS\n")
        cfg = load_yaml_config(cfg_file)
        assert cfg.vibration_exclude == ["RMS"]

    def test_empty_file_returns_defaults(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "empty.yaml"
        cfg_file.write_text("")
        cfg = load_yaml_config(cfg_file)
        assert cfg.vibration_exclude == []
        assert cfg.sink_configs == []
        assert cfg.log_level == "INFO"

    def test_sample_config_parses(self, tmp_path: Path) -> None:
        from treon_converter.__main__ import _SAMPLE_CONFIG

        cfg_file = tmp_path / "sample.yaml"
        cfg_file.write_text(_SAMPLE_CONFIG)
        cfg = load_yaml_config(cfg_file)
        assert cfg.sink_configs == [{"type": "console", "fmt": "text"}]
