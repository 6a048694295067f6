"""Shared test configuration."""

import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep APIBOOT_* variables from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("APIBOOT_"):
            monkeypatch.delenv(name)
