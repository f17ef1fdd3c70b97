"""Deferred quantity updates for the cart page.

A quantity change on the cart page applies after a short delay. While it is
pending the line is marked "updating" and further changes to that line are
refused, the same way the page disables its quantity buttons.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from opostore._constants import QUANTITY_UPDATE_DELAY
from opostore.cart.store import CartStore, is_valid_quantity

_logger = logging.getLogger(__name__)

UpdatingListener = Callable[[str, bool], None]


class PendingUpdate:
    """Handle for one scheduled quantity change."""

    def __init__(self, updater: QuantityUpdater, line_id: str, quantity: int) -> None:
        self._updater = updater
        self.line_id = line_id
        self.quantity = quantity
        self._task: asyncio.Task[bool] | None = None

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._task is not None and self._task.cancelled()

    def cancel(self) -> bool:
        """Cancel if not yet applied. Returns whether anything was cancelled."""
        if self._task is None or self._task.done():
            return False
        self._task.cancel()
        self._updater._release(self)
        return True

    async def wait(self) -> bool:
        """Wait for the outcome: ``True`` if the quantity was applied."""
        assert self._task is not None  # noqa: S101
        try:
            return await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if self._task.cancelled():
                return False
            raise


class QuantityUpdater:
    """Schedules cart quantity changes after a fixed delay.

    Parameters
    ----------
    store
        Cart store the changes apply to.
    delay
        Seconds before a change applies.
    sleep
        Awaitable sleep; tests pass a controllable one.
    on_updating
        Called with ``(line_id, updating)`` whenever a line enters or
        leaves the updating state.
    """

    def __init__(
        self,
        store: CartStore,
        *,
        delay: float = QUANTITY_UPDATE_DELAY,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        on_updating: UpdatingListener | None = None,
    ) -> None:
        self._store = store
        self._delay = delay
        self._sleep = sleep
        self._on_updating = on_updating
        self._pending: dict[str, PendingUpdate] = {}

    def is_updating(self, line_id: str) -> bool:
        return line_id in self._pending

    @property
    def updating(self) -> frozenset[str]:
        return frozenset(self._pending)

    def request(self, line_id: str, new_quantity: Any) -> PendingUpdate | None:
        """Schedule a quantity change.

        Returns ``None`` without scheduling when the quantity is below 1 or
        the line already has a change pending. Must be called from a running
        event loop.
        """
        if not is_valid_quantity(new_quantity):
            return None
        if line_id in self._pending:
            _logger.debug("Line %s already updating; ignoring change to %s", line_id, new_quantity)
            return None

        pending = PendingUpdate(self, line_id, new_quantity)
        self._pending[line_id] = pending
        self._notify(line_id, True)
        pending._task = asyncio.get_running_loop().create_task(self._apply(pending))
        return pending

    async def _apply(self, pending: PendingUpdate) -> bool:
        try:
            await self._sleep(self._delay)
            return self._store.set_quantity(pending.line_id, pending.quantity)
        finally:
            self._release(pending)

    def _release(self, pending: PendingUpdate) -> None:
        if self._pending.get(pending.line_id) is pending:
            del self._pending[pending.line_id]
            self._notify(pending.line_id, False)

    def _notify(self, line_id: str, updating: bool) -> None:
        if self._on_updating is None:
            return
        try:
            self._on_updating(line_id, updating)
        except Exception:
            _logger.exception("on_updating callback failed")

    def cancel(self, line_id: str) -> bool:
        pending = self._pending.get(line_id)
        return pending.cancel() if pending is not None else False

    def cancel_all(self) -> None:
        for pending in list(self._pending.values()):
            pending.cancel()
