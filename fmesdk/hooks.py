"""Integration callback holder for decisions made by the SDK."""

from __future__ import annotations

from typing import Any, Callable, Optional


class HooksManager:
    """Forwards decisions to an optional integration callback."""

    def __init__(self, callback: Optional[Callable[[dict[str, Any]], None]]) -> None:
        self._callback = callback
        self._decision: dict[str, Any] = {}

    def execute(self, properties: dict[str, Any]) -> None:
        """Call the callback with the properties, if a callback is set."""
        if self._callback is not None:
            self._callback(properties)

    def set(self, properties: dict[str, Any]) -> None:
        """Record the decision; ignored when no callback is set."""
        if self._callback is not None:
            self._decision = properties

    def get(self) -> dict[str, Any]:
        """Return the recorded decision."""
        return self._decision