import json

import pytest

from mindflash.domain.errors import MalformedPayloadError
from mindflash.infrastructure.adapters.storage import InMemoryStore, JsonFileStore


def test_in_memory_store():
    store = InMemoryStore()
    assert store.get("k") is None
    store.set("k", "v")
    assert store.get("k") == "v"
    store.delete("k")
    store.delete("k")
    assert store.keys() == []


def test_json_file_store_persists_between_instances(tmp_path):
    path = tmp_path / "nested" / "data.json"
    JsonFileStore(path).set("a", '{"x": 1}')

    store = JsonFileStore(path)
    assert store.get("a") == '{"x": 1}'
    assert json.loads(path.read_text()) == {"a": '{"x": 1}'}
    assert not (tmp_path / "nested" / "data.json.tmp").exists()


def test_json_file_store_missing_or_empty_file(tmp_path):
    path = tmp_path / "data.json"
    assert JsonFileStore(path).get("a") is None
    path.write_text("")
    assert JsonFileStore(path).get("a") is None


def test_json_file_store_delete(tmp_path):
    store = JsonFileStore(tmp_path / "data.json")
    store.set("a", "1")
    store.set("b", "2")
    store.delete("a")
    assert store.get("a") is None
    assert store.get("b") == "2"


def test_json_file_store_corrupt_file_is_malformed(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("{not json")
    store = JsonFileStore(path)

    with pytest.raises(MalformedPayloadError, match="is not valid JSON"):
        store.get("a")
    with pytest.raises(MalformedPayloadError):
        store.set("a", "1")
    # Never overwrite a file we could not parse
    assert path.read_text() == "{not json"
