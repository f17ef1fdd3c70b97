"""Cart blob encoding.

The cart is stored as a JSON array of line items with camelCase keys,
which is also what any other page reading the same key expects.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from pydantic import ValidationError

from opostore.exceptions import StorageReadError
from opostore.models.cart import CartLineItem

_logger = logging.getLogger(__name__)


def serialize_cart(lines: Iterable[CartLineItem]) -> str:
    return json.dumps([line.to_wire() for line in lines], ensure_ascii=False, separators=(",", ":"))


def deserialize_cart(raw: str | None) -> list[CartLineItem]:
    """Decode a stored cart blob.

    Absent or blank values decode to an empty cart. Entries that do not
    validate as line items are dropped with a warning.

    Raises
    ------
    StorageReadError
        If *raw* is not JSON or not a JSON array.
    """
    if raw is None or not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StorageReadError(f"Stored cart is not JSON: {raw[:64]!r}") from exc
    if not isinstance(data, list):
        raise StorageReadError(f"Stored cart is a {type(data).__name__}, expected a list")

    lines: list[CartLineItem] = []
    for index, entry in enumerate(data):
        try:
            lines.append(CartLineItem.model_validate(entry))
        except ValidationError:
            _logger.warning("Dropping invalid cart line at index %d", index, exc_info=True)
    return lines
