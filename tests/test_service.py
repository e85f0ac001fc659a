"""Tests for KeyValueService — validation in front of the store."""

import logging

import pytest

from jsonkv import KeyValueService
from jsonkv.config import Settings, StoreConfig
from jsonkv.exceptions import UnsupportedOperationError, ValidationError
from jsonkv.stores import InMemoryStore, SQLiteStore
from jsonkv.validation import KeyValidator

# ── delegation ───────────────────────────────────────────────


async def test_upsert_then_get(service):
    await service.upsert("k", [1, 2, 3])
    assert await service.get("k") == [1, 2, 3]


async def test_delete_counts(service):
    await service.upsert("k", {})
    assert await service.delete("k") == 1
    assert await service.delete("k") == 0
    assert await service.get("k") is None


async def test_get_all(service):
    await service.upsert("a", [1])
    await service.upsert("b", {"x": 2})
    assert await service.get_all() == {"a": [1], "b": {"x": 2}}


# ── validation short-circuits ────────────────────────────────


@pytest.mark.parametrize("value", [None, "x", 5, True, [float("nan")], {"a": float("inf")}])
async def test_invalid_value_never_reaches_store(service, recording_store, value):
    with pytest.raises(ValidationError):
        await service.upsert("k", value)
    assert recording_store.calls == []


@pytest.mark.parametrize("operation", ["get", "delete"])
async def test_empty_key_never_reaches_store(service, recording_store, operation):
    with pytest.raises(ValidationError):
        await getattr(service, operation)("")
    assert recording_store.calls == []


async def test_empty_key_upsert_never_reaches_store(service, recording_store):
    with pytest.raises(ValidationError):
        await service.upsert("", [1])
    assert recording_store.calls == []


async def test_custom_key_limit(recording_store):
    service = KeyValueService(recording_store, validator=KeyValidator(max_key_length=3))
    with pytest.raises(ValidationError):
        await service.get("abcd")
    assert recording_store.calls == []


# ── nuke gates ───────────────────────────────────────────────


async def test_nuke_with_confirmation(service, recording_store):
    await service.upsert("k", [1])
    await service.nuke({"nuke": True})
    assert await service.get_all() == {}
    assert ("nuke",) in recording_store.calls


@pytest.mark.parametrize("payload", [{}, {"nuke": False}, {"nuke": "true"}, {"nuke": 1}, [True], None])
async def test_nuke_without_confirmation(service, recording_store, payload):
    with pytest.raises(UnsupportedOperationError, match="magic word"):
        await service.nuke(payload)
    assert recording_store.calls == []


async def test_nuke_disabled(recording_store):
    service = KeyValueService(recording_store, allow_nuke=False)
    with pytest.raises(UnsupportedOperationError):
        await service.nuke({"nuke": True})
    assert recording_store.calls == []


async def test_nuke_logs_warning(service, caplog):
    with caplog.at_level(logging.WARNING, logger="jsonkv.service"):
        await service.nuke({"nuke": True})
    assert "DELETING ALL BACKING STORE CONTENT" in caplog.text


async def test_injected_logger_is_used(recording_store, caplog):
    service = KeyValueService(recording_store, allow_nuke=True, logger=logging.getLogger("custom.kv"))
    with caplog.at_level(logging.WARNING, logger="custom.kv"):
        await service.nuke({"nuke": True})
    assert [r.name for r in caplog.records] == ["custom.kv"]


# ── construction ─────────────────────────────────────────────


def test_defaults():
    service = KeyValueService()
    assert isinstance(service.store, InMemoryStore)
    assert service.validator.max_key_length == 1024
    assert service.allow_nuke is False


async def test_from_settings():
    settings = Settings(
        allow_nuke=True,
        max_key_length=16,
        store=StoreConfig(type="sqlite", options={"db_path": ":memory:"}),
    )
    async with KeyValueService.from_settings(settings) as service:
        assert isinstance(service.store, SQLiteStore)
        assert service.allow_nuke is True
        assert service.validator.max_key_length == 16
        await service.upsert("k", {"a": 1})
        assert await service.get("k") == {"a": 1}


async def test_services_do_not_share_data():
    first = KeyValueService()
    second = KeyValueService()
    await first.upsert("k", ["first"])
    assert await second.get("k") is None
    await second.upsert("k", ["second"])
    assert await first.get("k") == ["first"]
