"""Local record store: collection primitives, record primitives, backends."""

from __future__ import annotations

import json
import threading

import pytest

from magicmenu.store.local import FileBackend, LocalRecordStore, MemoryBackend, build_local_store


def test_read_missing_collection_is_empty(store):
    assert store.read("restaurants") == []


@pytest.mark.parametrize("payload", ["not json", '{"id": "x"}', "42", ""])
def test_read_tolerates_garbage(payload):
    backend = MemoryBackend({"demo_restaurants": payload})
    assert LocalRecordStore(backend).read("restaurants") == []


def test_write_uses_demo_keys(store):
    store.write("menu_items", [{"id": "m1"}])
    assert json.loads(store.backend.load("demo_menu_items")) == [{"id": "m1"}]


def test_unknown_collection_raises_on_write(store):
    with pytest.raises(KeyError):
        store.write("orders", [])


def test_append_keeps_existing_records(store):
    store.write("categories", [{"id": "c1"}])
    store.append("categories", {"id": "c2"})
    assert [r["id"] for r in store.read("categories")] == ["c1", "c2"]


def test_read_is_idempotent(store):
    store.write("restaurants", [{"id": "r1", "name": "A"}, {"id": "r2", "name": "B"}])
    assert store.read("restaurants") == store.read("restaurants")


def test_upsert_replaces_by_id(store):
    store.upsert("reviews", {"id": "v1", "rating": 3})
    store.upsert("reviews", {"id": "v2", "rating": 4})
    store.upsert("reviews", {"id": "v1", "rating": 5})
    assert store.read("reviews") == [{"id": "v1", "rating": 5}, {"id": "v2", "rating": 4}]


def test_patch_merges_and_reports_missing(store):
    store.upsert("restaurants", {"id": "r1", "name": "Old", "phone": "1"})
    patched = store.patch("restaurants", "r1", {"name": "New", "id": "ignored"})
    assert patched == {"id": "r1", "name": "New", "phone": "1"}
    assert store.patch("restaurants", "nope", {"name": "x"}) is None


def test_remove(store):
    store.write("users", [{"id": "u1"}, {"id": "u2"}])
    assert store.remove("users", "u1") is True
    assert store.remove("users", "u1") is False
    assert store.read("users") == [{"id": "u2"}]


def test_clear_single_and_all(store):
    store.write("users", [{"id": "u1"}])
    store.write("reviews", [{"id": "v1"}])
    store.clear("users")
    assert store.read("users") == []
    assert store.read("reviews") == [{"id": "v1"}]
    store.clear()
    assert store.read("reviews") == []


def test_concurrent_upserts_are_not_lost(store):
    def worker(n: int) -> None:
        for i in range(20):
            store.upsert("reviews", {"id": f"{n}-{i}"})

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(store.read("reviews")) == 100


def test_file_backend_persists_between_instances(tmp_path):
    first = LocalRecordStore(FileBackend(tmp_path))
    first.upsert("restaurants", {"id": "r1", "slug": "tokyo-sushi-bar"})

    second = LocalRecordStore(FileBackend(tmp_path))
    assert second.get("restaurants", "r1") == {"id": "r1", "slug": "tokyo-sushi-bar"}
    assert (tmp_path / "demo_restaurants.json").exists()
    assert not list(tmp_path.glob("*.tmp"))


def test_build_local_store(tmp_path):
    assert isinstance(build_local_store("memory", str(tmp_path)).backend, MemoryBackend)
    assert isinstance(build_local_store("file", str(tmp_path)).backend, FileBackend)
