"""Map mesh node names to shoe parts.

Node names come from an externally authored model file, so this is a
best-effort heuristic: it is neither injective nor exhaustive, and any
name it cannot place resolves to :attr:`PartId.MAIN`.
"""

from __future__ import annotations

from opostore.models.customization import PartId

# Checked in order against the lowercased node name.
_SUBSTRING_RULES: tuple[tuple[str, PartId], ...] = (
    ("lace", PartId.LACES),
    ("mesh", PartId.MESH),
    ("cap", PartId.CAPS),
    ("inner", PartId.INNER),
    ("sole", PartId.SOLE),
    ("stripe", PartId.STRIPES),
    ("band", PartId.BAND),
    ("patch", PartId.PATCH),
)

# Numbered "shoe_N" nodes exported without descriptive names.
_NUMBERED_SHOE_RULES: tuple[tuple[str, PartId], ...] = (
    ("shoe_1", PartId.MESH),
    ("shoe_2", PartId.CAPS),
    ("shoe_3", PartId.INNER),
    ("shoe_4", PartId.SOLE),
    ("shoe_5", PartId.STRIPES),
    ("shoe_6", PartId.BAND),
    ("shoe_7", PartId.PATCH),
)


def classify(node_name: str) -> PartId:
    """Return the part a mesh node belongs to."""
    name = node_name.lower()
    for token, part in _SUBSTRING_RULES:
        if token in name:
            return part
    if "shoe" in name:
        for token, part in _NUMBERED_SHOE_RULES:
            if token in name:
                return part
        return PartId.LACES
    return PartId.MAIN
