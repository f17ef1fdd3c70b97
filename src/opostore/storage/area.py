"""Shared storage area with per-context handles.

One :class:`SharedStorageArea` stands for the storage a browser shares
between all tabs of an origin. Each tab (browsing context) attaches and
gets a :class:`StorageHandle`. A write through one handle notifies the
listeners of every *other* handle, never the writer's own.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable

from opostore.exceptions import StorageReadError
from opostore.storage.backends import MemoryStorage, StorageBackend
from opostore.storage.events import StorageEvent

_logger = logging.getLogger(__name__)

StorageListener = Callable[[StorageEvent], None]

_context_ids = itertools.count(1)


class StorageHandle:
    """One browsing context's view of a shared storage area."""

    def __init__(self, area: SharedStorageArea, context_id: str) -> None:
        self._area = area
        self._context_id = context_id
        self._listeners: list[StorageListener] = []
        self._closed = False

    @property
    def context_id(self) -> str:
        return self._context_id

    @property
    def closed(self) -> bool:
        return self._closed

    def get_item(self, key: str) -> str | None:
        return self._area.backend.get_item(key)

    def set_item(self, key: str, value: str) -> None:
        self._area._write(key, value, source=self._context_id)

    def remove_item(self, key: str) -> None:
        self._area._write(key, None, source=self._context_id)

    def add_listener(self, listener: StorageListener) -> Callable[[], None]:
        """Register a cross-context change listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _deliver(self, event: StorageEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                _logger.exception("Storage listener failed for key %r", event.key)

    def close(self) -> None:
        """Detach from the area; no further events are delivered."""
        self._listeners.clear()
        self._area._detach(self)
        self._closed = True


class SharedStorageArea:
    """Storage shared by every attached browsing context."""

    def __init__(self, backend: StorageBackend | None = None) -> None:
        self._backend: StorageBackend = backend if backend is not None else MemoryStorage()
        self._handles: list[StorageHandle] = []

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    def attach(self, context_id: str | None = None) -> StorageHandle:
        """Open a new browsing context on this storage."""
        handle = StorageHandle(self, context_id or f"ctx-{next(_context_ids)}")
        self._handles.append(handle)
        return handle

    def _detach(self, handle: StorageHandle) -> None:
        if handle in self._handles:
            self._handles.remove(handle)

    def _write(self, key: str, value: str | None, *, source: str) -> None:
        try:
            old_value = self._backend.get_item(key)
        except StorageReadError:
            _logger.debug("Previous value of %r unreadable", key, exc_info=True)
            old_value = None
        if value is None:
            self._backend.remove_item(key)
        else:
            self._backend.set_item(key, value)

        if old_value == value:
            return
        event = StorageEvent(key=key, old_value=old_value, new_value=value, source=source)
        _logger.debug("Storage key %r changed by %s", key, source)
        for handle in list(self._handles):
            if handle.context_id != source:
                handle._deliver(event)
