"""3D shoe customizer state."""

from opostore.customize.classifier import classify
from opostore.customize.panel import ColorPanel
from opostore.customize.scene import (
    FALLBACK_PARTS,
    CustomizerScene,
    MeshNode,
    RenderedPart,
    SceneStatus,
    count_renderable_parts,
)
from opostore.customize.state import CustomizationState, SnapshotListener

__all__ = [
    "FALLBACK_PARTS",
    "ColorPanel",
    "CustomizationState",
    "CustomizerScene",
    "MeshNode",
    "RenderedPart",
    "SceneStatus",
    "SnapshotListener",
    "classify",
    "count_renderable_parts",
]
