"""Key-value storage backends."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from opostore.exceptions import StorageReadError, StorageWriteError

_logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """String-to-string store with ``localStorage`` semantics.

    Having a protocol here makes it easy to pass test doubles (e.g. a
    backend that refuses writes) while keeping the shipped backends concrete.
    """

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class MemoryStorage:
    """In-process storage, optionally with a size quota.

    The quota counts characters of keys and values, mirroring how browsers
    enforce their per-origin storage limit.
    """

    def __init__(self, *, quota: int | None = None) -> None:
        self._data: dict[str, str] = {}
        self._quota = quota

    def _size_with(self, key: str, value: str) -> int:
        size = sum(len(k) + len(v) for k, v in self._data.items() if k != key)
        return size + len(key) + len(value)

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._quota is not None and self._size_with(key, value) > self._quota:
            raise StorageWriteError(f"Storage quota of {self._quota} exceeded writing {key!r}", key=key)
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileStorage:
    """Storage persisted as one JSON object file.

    The file is re-read on every access so that writes from other processes
    sharing the path are visible. Writes go to a temporary file which then
    replaces the original.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageReadError(f"Cannot read {self._path}: {exc}") from exc
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StorageReadError(f"Storage file {self._path} is not JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageReadError(f"Storage file {self._path} does not hold a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, data: dict[str, str], *, key: str) -> None:
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".storage-", dir=self._path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False)
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            raise StorageWriteError(f"Cannot write {self._path}: {exc}", key=key) from exc
        finally:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._load()
        except StorageReadError:
            # A corrupt file is replaced rather than blocking every future write.
            _logger.warning("Discarding unreadable storage file %s", self._path)
            data = {}
        data[key] = value
        self._dump(data, key=key)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data, key=key)

    def keys(self) -> list[str]:
        return list(self._load())
