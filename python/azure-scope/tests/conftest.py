"""Shared fixtures for azure-scope tests."""

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _clean_azure_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own Azure variables out of every test."""
    for key in list(os.environ):
        if key.upper().startswith("AZURE_"):
            monkeypatch.delenv(key)
