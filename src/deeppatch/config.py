"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with DEEPPATCH_ prefix
3. .env file named by DEEPPATCH_ENV_FILE (if set and present)

The reconciliation engine itself takes no settings; these drive the command
line tool and its logging.
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings


def _get_env_file() -> str | None:
    """Return the .env file named by DEEPPATCH_ENV_FILE, if it exists."""
    if env_file := _os.environ.get("DEEPPATCH_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    deeppatch configuration settings.

    All settings can be overridden via environment variables with the
    DEEPPATCH_ prefix, e.g. DEEPPATCH_LOG_LEVEL=DEBUG.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="DEEPPATCH_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"
    """Logging level name for the command line tool."""

    as_map: bool = False
    """Turn plain mappings below the root into tracked maps by default."""

    output_format: _typing.Literal["yaml", "json"] = "yaml"
    """Format of the reconciled document printed by `deeppatch apply`."""

    show_changes: bool = True
    """Print the change log of `deeppatch apply`."""

    @_pydantic.field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(_logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level
