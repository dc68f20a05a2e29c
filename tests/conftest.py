"""Shared fixtures for blockmark tests."""

import pytest

from blockmark import settings


@pytest.fixture(autouse=True)
def settings_store(tmp_path, monkeypatch):
    """Point the process-wide settings store at an empty temp directory."""
    store = settings.SettingsStore(tmp_path / "config")
    monkeypatch.setattr(settings, "_store", store)
    return store
