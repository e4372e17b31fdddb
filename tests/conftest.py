"""
Shared pytest fixtures for deeppatch tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import typing as _typing

import pytest as _pytest

import deeppatch.observable as observable

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "DEEPPATCH_ENV_FILE",
    "DEEPPATCH_LOG_LEVEL",
    "DEEPPATCH_AS_MAP",
    "DEEPPATCH_OUTPUT_FORMAT",
    "DEEPPATCH_SHOW_CHANGES",
]


@_pytest.fixture(autouse=True)
def clean_env(monkeypatch: _pytest.MonkeyPatch) -> None:
    """Remove deeppatch settings from the environment for every test."""
    for key in ENV_KEYS_TO_CLEAR:
        if key in _os.environ:
            monkeypatch.delenv(key)


@_pytest.fixture
def changes() -> _typing.Iterator[list[observable.Change]]:
    """Record every change made to any tracked container during the test."""
    with observable.record_changes() as recorded:
        yield recorded
