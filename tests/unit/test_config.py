"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from calcscript.config import ConfigError, EngineConfig, load_config


class TestEngineConfig:
    def test_defaults(self) -> None:
        config = EngineConfig()
        assert config.strict_division is False
        assert config.max_call_depth == 1000
        assert config.log_level == "WARNING"

    def test_rejects_zero_depth(self) -> None:
        with pytest.raises(ConfigError, match="max_call_depth"):
            EngineConfig(max_call_depth=0)

    def test_rejects_unknown_level(self) -> None:
        with pytest.raises(ConfigError, match="log level"):
            EngineConfig(log_level="LOUD")

    def test_config_error_is_value_error(self) -> None:
        assert issubclass(ConfigError, ValueError)


class TestLoadConfig:
    """TOML files and environment variables, environment winning."""

    def test_no_file(self) -> None:
        assert load_config() == EngineConfig()

    def test_default_file_in_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "calcscript.toml").write_text(
            '[engine]\nstrict_division = true\nmax_call_depth = 8\n\n[logging]\nlevel = "debug"\n'
        )
        config = load_config()
        assert config.strict_division is True
        assert config.max_call_depth == 8
        assert config.log_level == "DEBUG"

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "other.toml"
        path.write_text("[engine]\nmax_call_depth = 3\n")
        assert load_config(path).max_call_depth == 3

    def test_explicit_path_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[engine\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path)

    def test_invalid_value_type(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text('[engine]\nmax_call_depth = "deep"\n')
        with pytest.raises(ConfigError, match="integer"):
            load_config(path)

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CALCSCRIPT_STRICT_DIVISION", "yes")
        monkeypatch.setenv("CALCSCRIPT_MAX_CALL_DEPTH", "10")
        monkeypatch.setenv("CALCSCRIPT_LOG_LEVEL", "info")
        config = load_config()
        assert config.strict_division is True
        assert config.max_call_depth == 10
        assert config.log_level == "INFO"

    def test_env_wins_over_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "calcscript.toml").write_text("[engine]\nstrict_division = true\n")
        monkeypatch.setenv("CALCSCRIPT_STRICT_DIVISION", "0")
        assert load_config().strict_division is False

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("CALCSCRIPT_STRICT_DIVISION", "maybe"),
            ("CALCSCRIPT_MAX_CALL_DEPTH", "lots"),
            ("CALCSCRIPT_MAX_CALL_DEPTH", "-1"),
            ("CALCSCRIPT_LOG_LEVEL", "chatty"),
        ],
    )
    def test_invalid_env(self, monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigError):
            load_config()
