"""Binding between a rendered shoe model and the customization state.

Loading and drawing the model belong to the renderer. This module consumes
what the renderer reports (the node list and pointer events) and keeps the
part assignment, hover state and load status the overlay displays.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Literal

from opostore._constants import MODEL_ASSET_PATH
from opostore.customize.classifier import classify
from opostore.customize.state import CustomizationState
from opostore.models.customization import PartId

_logger = logging.getLogger(__name__)

StatusKind = Literal["loading", "success", "error"]


@dataclass(frozen=True, slots=True)
class MeshNode:
    """A node of the loaded model as reported by the renderer."""

    name: str
    has_geometry: bool = False
    material_name: str | None = None
    children: tuple[MeshNode, ...] = ()


@dataclass(frozen=True, slots=True)
class SceneStatus:
    kind: StatusKind
    text: str


@dataclass(frozen=True, slots=True)
class RenderedPart:
    """One drawable mesh and the part whose color it uses."""

    node_name: str
    part: PartId


# Drawn when the model has no nodes: a body box and a sole slab.
FALLBACK_PARTS: tuple[RenderedPart, ...] = (
    RenderedPart("fallback-body", PartId.MAIN),
    RenderedPart("fallback-sole", PartId.SOLE),
)


def count_renderable_parts(nodes: Iterable[MeshNode]) -> int:
    """Count nodes with geometry, descending into children."""
    total = 0
    for node in nodes:
        if node.has_geometry:
            total += 1
        total += count_renderable_parts(node.children)
    return total


class CustomizerScene:
    """Scene-side view of the customizer."""

    def __init__(
        self,
        state: CustomizationState,
        *,
        asset_path: str = MODEL_ASSET_PATH,
        on_status: Callable[[SceneStatus], None] | None = None,
    ) -> None:
        self._state = state
        self._asset_path = asset_path
        self._on_status = on_status
        self._parts: tuple[RenderedPart, ...] = FALLBACK_PARTS
        self._has_model = False
        self._hovered: str | None = None
        self._status = SceneStatus("loading", "Loading GLB...")

    @property
    def status(self) -> SceneStatus:
        return self._status

    @property
    def parts(self) -> tuple[RenderedPart, ...]:
        return self._parts

    @property
    def has_model(self) -> bool:
        return self._has_model

    @property
    def hovered(self) -> str | None:
        return self._hovered

    @property
    def cursor(self) -> str:
        return "pointer" if self._hovered else "auto"

    def _set_status(self, kind: StatusKind, text: str) -> SceneStatus:
        self._status = SceneStatus(kind, text)
        if self._on_status is not None:
            self._on_status(self._status)
        return self._status

    def load(self, nodes: Mapping[str, MeshNode] | None) -> SceneStatus:
        """Take the node map of a freshly loaded model.

        Nodes without geometry are not drawn. An empty or missing map keeps
        the fallback shape and reports an error status.
        """
        if not nodes:
            self._has_model = False
            self._parts = FALLBACK_PARTS
            _logger.warning("Shoe model missing or empty at %s", self._asset_path)
            return self._set_status("error", f"Shoe GLB file not found at {self._asset_path}")

        self._has_model = True
        self._parts = tuple(
            RenderedPart(name, classify(name)) for name, node in nodes.items() if node.has_geometry
        )
        renderable = count_renderable_parts(nodes.values())
        _logger.debug("Loaded nodes %s", list(nodes))
        return self._set_status("success", f"Shoe model loaded! Found {len(nodes)} nodes, {renderable} parts")

    def fail(self, error: BaseException) -> SceneStatus:
        """Record a loader failure; the fallback shape stays in place."""
        _logger.error("Error loading shoe model: %s", error)
        self._has_model = False
        self._parts = FALLBACK_PARTS
        return self._set_status("error", f"Shoe GLB file not found at {self._asset_path}")

    def part_for(self, node_name: str) -> PartId:
        for rendered in self._parts:
            if rendered.node_name == node_name:
                return rendered.part
        return classify(node_name)

    def color_for(self, node_name: str) -> str:
        return self._state.items[self.part_for(node_name)]

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_over(self, part_name: str | None, material_name: str | None = None) -> None:
        self._hovered = part_name or material_name or "unknown"

    def pointer_out(self, remaining_intersections: int) -> None:
        """Pointer left a mesh; hover ends only when nothing is under it."""
        if remaining_intersections == 0:
            self._hovered = None

    def click(self, part_name: str | None, material_name: str | None = None) -> PartId:
        return self._state.select(part_name or material_name or PartId.MAIN)

    def pointer_missed(self) -> None:
        self._state.clear_selection()
