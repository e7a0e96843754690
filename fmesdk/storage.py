"""User storage connector and the service that reads and writes through it."""

from __future__ import annotations

import copy
from typing import Any, Optional


class StorageConnector:
    """In-memory storage of decisions, keyed by feature key and user id.

    Subclass and override ``get`` and ``set`` to keep decisions elsewhere.
    """

    def __init__(self) -> None:
        self._data: dict[tuple[str, str], dict[str, Any]] = {}

    def get(self, key: str, user_id: str) -> Any:
        """Return the stored record for the feature key and user, or None."""
        record = self._data.get((key, user_id))
        return copy.deepcopy(record) if record is not None else None

    def set(self, data: dict[str, Any]) -> None:
        """Store a record; it must carry ``featureKey`` and ``userId``."""
        try:
            key = (str(data["featureKey"]), str(data["userId"]))
        except KeyError as exc:
            raise ValueError(f"storage record is missing {exc.args[0]!r}") from exc
        self._data[key] = copy.deepcopy(dict(data))


class StorageService:
    """Reads and writes decision records through an optional connector."""

    def __init__(self, connector: Optional[StorageConnector] = None) -> None:
        self.connector = connector

    def get_data_in_storage(self, feature_key: str, user_id: str) -> Optional[dict[str, Any]]:
        """Return the stored record as a dict, or None when absent or not a dict.

        Errors raised by the connector propagate.
        """
        if self.connector is None:
            return None
        result = self.connector.get(feature_key, user_id)
        return result if isinstance(result, dict) else None

    def set_data_in_storage(self, data: dict[str, Any]) -> bool:
        """Store the record; False when there is no connector or it fails."""
        if self.connector is None:
            return False
        try:
            self.connector.set(data)
        except Exception:
            return False
        return True