"""Base model for persisted and catalog payloads.

Every opostore wire model inherits from :class:`OpoBaseModel` which
provides:

* ``alias_generator=to_camel`` so the camelCase keys used in stored
  cart blobs and catalog rows map to snake_case fields.
* ``populate_by_name`` so code can construct models with field names.
* Frozen instances; mutations go through ``model_copy(update=...)``.
"""

from __future__ import annotations

import re
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def normalize_hex_color(value: str) -> str:
    """Validate a ``#rgb`` / ``#rrggbb`` / ``#rrggbbaa`` color and lowercase it."""
    text = value.strip()
    if not _HEX_COLOR_RE.match(text):
        raise ValueError(f"not a hex color: {value!r}")
    return text.lower()


def _coerce_identifier(value: Any) -> Any:
    # Catalog ids arrive as ints from the database but are compared as strings.
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    return value


HexColor = Annotated[str, AfterValidator(normalize_hex_color)]
"""Annotated type for validated, lowercased hex colors."""

Identifier = Annotated[str, BeforeValidator(_coerce_identifier)]
"""Annotated type accepting int or str ids, stored as str."""


class OpoBaseModel(BaseModel):
    """Base for opostore wire models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump with camelCase keys and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)
