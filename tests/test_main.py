"""Tests for the ``python -m jsonkv`` entry point."""

import pytest

from jsonkv import __main__ as entry
from jsonkv.config import get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def runs(monkeypatch):
    calls = []
    monkeypatch.setattr(entry.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    return calls


def test_main_runs_server(monkeypatch, runs):
    monkeypatch.setenv("JSONKV_PORT", "8123")

    assert entry.main() == 0

    app, kwargs = runs[0]
    assert app.title == "jsonkv"
    assert kwargs["port"] == 8123
    assert kwargs["host"] == "127.0.0.1"


def test_main_rejects_unknown_store(monkeypatch, runs):
    monkeypatch.setenv("JSONKV_STORE__TYPE", "cassandra")

    assert entry.main() == 1
    assert runs == []


def test_main_rejects_invalid_settings(monkeypatch, runs, capsys):
    monkeypatch.setenv("JSONKV_PORT", "not-a-port")

    assert entry.main() == 1
    assert "Invalid configuration" in capsys.readouterr().err
    assert runs == []
