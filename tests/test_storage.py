from __future__ import annotations

from pathlib import Path

import pytest

from opostore.exceptions import StorageReadError, StorageWriteError
from opostore.storage.area import SharedStorageArea
from opostore.storage.backends import FileStorage, MemoryStorage
from opostore.storage.events import StorageEvent


def test_memory_storage_quota() -> None:
    storage = MemoryStorage(quota=10)
    storage.set_item("cart", "[]")
    with pytest.raises(StorageWriteError):
        storage.set_item("cart", "x" * 20)
    assert storage.get_item("cart") == "[]"


def test_file_storage_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    storage = FileStorage(path)
    assert storage.get_item("cart") is None
    storage.set_item("cart", "[1]")
    storage.set_item("other", "x")
    assert FileStorage(path).get_item("cart") == "[1]"
    storage.remove_item("other")
    assert sorted(storage.keys()) == ["cart"]


def test_file_storage_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{oops", encoding="utf-8")
    storage = FileStorage(path)
    with pytest.raises(StorageReadError):
        storage.get_item("cart")
    storage.set_item("cart", "[]")
    assert storage.get_item("cart") == "[]"


def test_events_reach_other_contexts_only() -> None:
    area = SharedStorageArea()
    writer = area.attach("writer")
    reader = area.attach("reader")
    seen_by_writer: list[StorageEvent] = []
    seen_by_reader: list[StorageEvent] = []
    writer.add_listener(seen_by_writer.append)
    reader.add_listener(seen_by_reader.append)

    writer.set_item("cart", "[]")
    writer.set_item("cart", "[]")
    writer.remove_item("cart")

    assert seen_by_writer == []
    assert [(e.key, e.old_value, e.new_value, e.source) for e in seen_by_reader] == [
        ("cart", None, "[]", "writer"),
        ("cart", "[]", None, "writer"),
    ]


def test_closed_handle_stops_receiving() -> None:
    area = SharedStorageArea()
    writer = area.attach()
    reader = area.attach()
    seen: list[StorageEvent] = []
    reader.add_listener(seen.append)
    reader.close()
    writer.set_item("cart", "[]")
    assert seen == []
    assert reader.closed


def test_failing_listener_does_not_block_others() -> None:
    area = SharedStorageArea()
    writer = area.attach()
    reader = area.attach()
    seen: list[StorageEvent] = []

    def _boom(_event: StorageEvent) -> None:
        raise RuntimeError("listener bug")

    reader.add_listener(_boom)
    reader.add_listener(seen.append)
    writer.set_item("cart", "[]")
    assert len(seen) == 1


def test_contexts_share_file_storage(tmp_path: Path) -> None:
    area = SharedStorageArea(FileStorage(tmp_path / "s.json"))
    area.attach().set_item("cart", "[]")
    assert area.attach().get_item("cart") == "[]"


def test_failed_file_write_leaves_no_temp_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    storage = FileStorage(tmp_path / "storage.json")
    storage.set_item("cart", "[]")

    def _fail_replace(src: str, dst: Path) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("opostore.storage.backends.os.replace", _fail_replace)
    with pytest.raises(StorageWriteError):
        storage.set_item("cart", "[1]")

    assert sorted(p.name for p in tmp_path.iterdir()) == ["storage.json"]
    assert storage.get_item("cart") == "[]"
