"""Floating color panel."""

from __future__ import annotations

from opostore.customize.state import CustomizationState


class ColorPanel:
    """Color picker bound to the selected part; hidden when nothing is selected."""

    hint = "Click different parts of the shoe to customize!"

    def __init__(self, state: CustomizationState) -> None:
        self._state = state

    @property
    def visible(self) -> bool:
        return self._state.current is not None

    @property
    def title(self) -> str | None:
        current = self._state.current
        return f"Customize {current.value} Color" if current is not None else None

    @property
    def color(self) -> str | None:
        return self._state.snapshot().current_color

    def pick(self, color: str) -> bool:
        """Apply a color from the picker to the selected part."""
        return self._state.set_color(color)
