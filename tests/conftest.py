import pytest


@pytest.fixture(autouse=True)
def _no_root_override(monkeypatch):
    """Keep a developer's DAYPLUG_ROOT from leaking into tests."""
    monkeypatch.delenv("DAYPLUG_ROOT", raising=False)
