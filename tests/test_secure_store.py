"""Tests for the namespaced secure store and its backends."""

import json
import logging
import tempfile
from pathlib import Path

from inputdefense.storage.backends import JsonFileBackend, MemoryBackend
from inputdefense.storage.secure_store import SecureStore


def test_round_trip_values():
    store = SecureStore(MemoryBackend())
    values = {
        "str": "hello",
        "int": 42,
        "float": 1.5,
        "bool": True,
        "list": [1, "two", {"three": 3}],
        "dict": {"theme": "dark", "volume": 7, "tags": ["a", "b"]},
        "unicode": "héllo ☃",
    }
    for key, value in values.items():
        store.set(key, value)
        assert store.get(key) == value, key


def test_encoded_round_trip():
    backend = MemoryBackend()
    store = SecureStore(backend)
    store.set("prefs", {"theme": "dark"}, encode=True)
    assert store.get("prefs", decode=True) == {"theme": "dark"}
    raw = backend.get("secure_prefs")
    assert "theme" not in raw


def test_keys_are_namespaced():
    backend = MemoryBackend()
    SecureStore(backend).set("k", 1)
    assert backend.keys() == ["secure_k"]
    assert json.loads(backend.get("secure_k")) == 1


def test_missing_key_returns_none():
    assert SecureStore(MemoryBackend()).get("unknown") is None


def test_corrupt_entry_returns_none_and_logs(caplog):
    backend = MemoryBackend()
    backend.set("secure_bad", "{not json")
    store = SecureStore(backend)
    with caplog.at_level(logging.WARNING):
        assert store.get("bad") is None
    assert "bad" in caplog.text


def test_decode_of_plain_entry_returns_none():
    store = SecureStore(MemoryBackend())
    store.set("plain", {"a": 1})
    assert store.get("plain", decode=True) is None


def test_unserializable_value_is_not_raised(caplog):
    store = SecureStore(MemoryBackend())
    with caplog.at_level(logging.ERROR):
        store.set("obj", object())
    assert store.get("obj") is None
    assert "obj" in caplog.text


def test_remove():
    store = SecureStore(MemoryBackend())
    store.set("k", "v")
    store.remove("k")
    assert store.get("k") is None
    store.remove("never-set")


def test_clear_all_only_touches_namespace():
    backend = MemoryBackend()
    backend.set("rate_limit_search", '{"count": 1, "reset_time": 0}')
    backend.set("other", "x")
    store = SecureStore(backend)
    store.set("a", 1)
    store.set("b", {"c": 2}, encode=True)

    assert store.clear_all() == 2
    assert store.get("a") is None
    assert store.get("b", decode=True) is None
    assert sorted(backend.keys()) == ["other", "rate_limit_search"]


def test_custom_namespace():
    backend = MemoryBackend()
    first = SecureStore(backend, namespace="app1_")
    second = SecureStore(backend, namespace="app2_")
    first.set("k", 1)
    second.set("k", 2)
    first.clear_all()
    assert first.get("k") is None
    assert second.get("k") == 2


def test_file_backend_persists():
    with tempfile.TemporaryDirectory() as tmpdir:
        SecureStore(JsonFileBackend(tmpdir)).set("prefs", {"lang": "en"}, encode=True)
        reopened = SecureStore(JsonFileBackend(tmpdir))
        assert reopened.get("prefs", decode=True) == {"lang": "en"}


def test_file_backend_corrupt_file_starts_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        backend = JsonFileBackend(tmpdir)
        Path(backend.path).write_text("not json at all")
        assert backend.get("anything") is None
        backend.set("k", "v")
        assert backend.get("k") == "v"


def test_compare_and_set():
    for backend in (MemoryBackend(), JsonFileBackend(tempfile.mkdtemp())):
        assert backend.compare_and_set("k", None, "1")
        assert not backend.compare_and_set("k", None, "2")
        assert not backend.compare_and_set("k", "0", "2")
        assert backend.compare_and_set("k", "1", "2")
        assert backend.get("k") == "2"
