"""Shared fixtures for dune_runner unit tests."""

import pytest

import dune_runner.polling as polling_mod


@pytest.fixture(autouse=True)
def sleeps(monkeypatch):
    """Record poll delays instead of sleeping."""
    recorded = []

    async def _fake_sleep(seconds):
        recorded.append(seconds)

    monkeypatch.setattr(polling_mod, "_sleep", _fake_sleep)
    return recorded
