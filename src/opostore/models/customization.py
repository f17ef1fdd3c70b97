"""Customizer part identifiers and color maps."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from opostore._constants import DEFAULT_PART_COLOR, MAIN_PART_COLOR
from opostore.models._base import HexColor


class PartId(StrEnum):
    """Logical regions of the customizable shoe.

    Names without a mapped member resolve to ``MAIN`` instead of
    raising ``ValueError``.
    """

    LACES = "laces"
    MESH = "mesh"
    CAPS = "caps"
    INNER = "inner"
    SOLE = "sole"
    STRIPES = "stripes"
    BAND = "band"
    PATCH = "patch"
    MAIN = "main"

    @classmethod
    def _missing_(cls, value: object) -> PartId:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return cls.MAIN


class PartColorMap(BaseModel):
    """Color per part. The key set is closed; only values change."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    laces: HexColor = DEFAULT_PART_COLOR
    mesh: HexColor = DEFAULT_PART_COLOR
    caps: HexColor = DEFAULT_PART_COLOR
    inner: HexColor = DEFAULT_PART_COLOR
    sole: HexColor = DEFAULT_PART_COLOR
    stripes: HexColor = DEFAULT_PART_COLOR
    band: HexColor = DEFAULT_PART_COLOR
    patch: HexColor = DEFAULT_PART_COLOR
    main: HexColor = MAIN_PART_COLOR

    def __getitem__(self, part: PartId | str) -> str:
        return str(getattr(self, PartId(part).value))

    def with_color(self, part: PartId | str, color: str) -> PartColorMap:
        """Return a copy with *part* recolored (validated)."""
        data = self.as_dict()
        data[PartId(part).value] = color
        return PartColorMap.model_validate(data)

    def as_dict(self) -> dict[str, str]:
        return self.model_dump()


class CustomizationSnapshot(BaseModel):
    """Read-only view of the customization state at one point in time."""

    model_config = ConfigDict(frozen=True)

    current: PartId | None = None
    items: PartColorMap = PartColorMap()

    @property
    def current_color(self) -> str | None:
        if self.current is None:
            return None
        return self.items[self.current]
