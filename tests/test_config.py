"""Tests for Settings."""

import pathlib as _pathlib

import pydantic as _pydantic
import pytest as _pytest

import deeppatch.config as config


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self) -> None:
        settings = config.Settings()

        assert settings.log_level == "WARNING"
        assert settings.as_map is False
        assert settings.output_format == "yaml"
        assert settings.show_changes is True

    def test_env_override(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """DEEPPATCH_* variables override defaults."""
        monkeypatch.setenv("DEEPPATCH_AS_MAP", "true")
        monkeypatch.setenv("DEEPPATCH_OUTPUT_FORMAT", "json")
        monkeypatch.setenv("DEEPPATCH_LOG_LEVEL", "debug")

        settings = config.Settings()

        assert settings.as_map is True
        assert settings.output_format == "json"
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        with _pytest.raises(_pydantic.ValidationError):
            config.Settings(log_level="LOUD")

    def test_invalid_output_format(self) -> None:
        with _pytest.raises(_pydantic.ValidationError):
            config.Settings(output_format="xml")  # type: ignore[arg-type]

    def test_env_file_helper(
        self, monkeypatch: _pytest.MonkeyPatch, tmp_path: _pathlib.Path
    ) -> None:
        """DEEPPATCH_ENV_FILE is honoured only when the file exists."""
        env_file = tmp_path / ".env"
        monkeypatch.setenv("DEEPPATCH_ENV_FILE", str(env_file))
        assert config._get_env_file() is None

        env_file.write_text("DEEPPATCH_AS_MAP=true\n")
        assert config._get_env_file() == str(env_file)
