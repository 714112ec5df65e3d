"""Tests for the JSON file key-value store."""

import pytest

from decision_log.core.errors import StorageError
from decision_log.infrastructure.key_value_store import JsonFileKeyValueStore


@pytest.fixture
def store(tmp_path):
    return JsonFileKeyValueStore(tmp_path / "kv" / "store.json")


async def test_missing_file_reads_none(store):
    assert await store.get("anything") is None


async def test_set_get_delete(store):
    await store.set("decision-log-gist-id", "abc123")
    await store.set("list", [1, 2, 3])
    assert await store.get("decision-log-gist-id") == "abc123"
    assert await store.get("list") == [1, 2, 3]

    await store.delete("list")
    assert await store.get("list") is None
    assert await store.get("decision-log-gist-id") == "abc123"


async def test_delete_missing_key_is_noop(store):
    await store.delete("never-set")
    assert not store.path.exists()


async def test_values_survive_a_new_instance(store):
    await store.set("k", {"nested": True})
    again = JsonFileKeyValueStore(store.path)
    assert await again.get("k") == {"nested": True}


async def test_write_leaves_no_temp_file(store):
    await store.set("k", 1)
    assert not store.path.with_suffix(".json.tmp").exists()


async def test_corrupt_file_raises_storage_error(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text("{broken", encoding="utf-8")
    with pytest.raises(StorageError):
        await store.get("k")


async def test_non_object_document_raises_storage_error(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(StorageError):
        await store.get("k")
