"""Shared customization state.

One instance is shared by the 3D scene (which selects parts on click) and
the floating color panel (which recolors the selected part). Both read
snapshots and subscribe for changes instead of holding references to each
other.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from opostore.models.customization import CustomizationSnapshot, PartColorMap, PartId

_logger = logging.getLogger(__name__)

SnapshotListener = Callable[[CustomizationSnapshot], None]


class CustomizationState:
    """Observable store of the selected part and per-part colors."""

    def __init__(self, items: PartColorMap | None = None) -> None:
        self._initial_items = items or PartColorMap()
        self._snapshot = CustomizationSnapshot(items=self._initial_items)
        self._listeners: list[SnapshotListener] = []

    @property
    def current(self) -> PartId | None:
        return self._snapshot.current

    @property
    def items(self) -> PartColorMap:
        return self._snapshot.items

    def snapshot(self) -> CustomizationSnapshot:
        return self._snapshot

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call *listener* with every new snapshot; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, snapshot: CustomizationSnapshot) -> None:
        if snapshot == self._snapshot:
            return
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.exception("Customization listener failed")

    def select(self, part: PartId | str) -> PartId:
        """Select a part (pointer click). Unknown names select ``main``."""
        selected = PartId(part)
        self._publish(self._snapshot.model_copy(update={"current": selected}))
        return selected

    def clear_selection(self) -> None:
        """Deselect (pointer missed every part)."""
        self._publish(self._snapshot.model_copy(update={"current": None}))

    def set_color(self, color: str) -> bool:
        """Recolor the selected part.

        Returns ``False`` when no part is selected.

        Raises
        ------
        ValueError
            If *color* is not a hex color.
        """
        current = self._snapshot.current
        if current is None:
            return False
        items = self._snapshot.items.with_color(current, color)
        self._publish(self._snapshot.model_copy(update={"items": items}))
        return True

    def reset(self) -> None:
        """Restore the colors the state started with and clear the selection."""
        self._publish(CustomizationSnapshot(items=self._initial_items))
