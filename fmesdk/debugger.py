"""Collection of debug event properties grouped by category."""

from __future__ import annotations

from typing import Any


class DebuggerService:
    """Holds standard debug props plus per-category overrides."""

    def __init__(self) -> None:
        self._category_props: dict[str, dict[str, Any]] = {}
        self._standard_props: dict[str, Any] = {}

    @property
    def standard_debug_props(self) -> dict[str, Any]:
        """The props shared by every category."""
        return self._standard_props

    def add_standard_debug_props(self, props: dict[str, Any]) -> None:
        """Merge props that apply to every category."""
        self._standard_props.update(props)

    def add_standard_debug_prop(self, key: str, value: Any) -> None:
        """Set a single prop that applies to every category."""
        self._standard_props[key] = value

    def add_category_debug_props(self, category: str, props: dict[str, Any]) -> None:
        """Replace the props of a category."""
        self._category_props[category] = dict(props)

    def add_category_debug_prop(self, category: str, key: str, value: Any) -> None:
        """Set a single prop within a category."""
        self._category_props.setdefault(category, {})[key] = value

    def get_debug_event_props(self, category: str) -> dict[str, Any]:
        """Return standard props merged with the category's, the latter winning."""
        return {**self._standard_props, **self._category_props.get(category, {})}

    def clear(self) -> None:
        """Drop all standard and category props."""
        self._category_props = {}
        self._standard_props = {}