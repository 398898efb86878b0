"""Shared fixtures: every test gets its own archive endpoint and output dir."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a fake archive host and a per-test output directory."""
    monkeypatch.setattr(
        "tosarchive.config.settings.archive_api_url",
        "https://archive.test/wayback/available",
    )
    monkeypatch.setattr("tosarchive.config.settings.output_dir", tmp_path / "out")
    monkeypatch.setattr("tosarchive.config.settings.request_timeout", 5.0)
    monkeypatch.setattr("tosarchive.config.settings.max_concurrent_scrapes", 3)
    return tmp_path
