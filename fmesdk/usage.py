"""Usage statistics derived from the options the SDK was started with."""

from __future__ import annotations

import platform
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional


class LogLevel(Enum):
    """Logging levels, ordered from most to least verbose."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4


def parse_log_level(name: str) -> Optional[LogLevel]:
    """Return the level named by ``name`` (case-insensitive), or None."""
    try:
        return LogLevel[name.strip().upper()]
    except KeyError:
        return None


def get_usage_stats(options: Mapping[str, Any]) -> dict[str, Any]:
    """Map the init options to the usage flags reported to the server."""
    data: dict[str, Any] = {}

    if options.get("integrations") is not None:
        data["ig"] = 1

    logger = options.get("logger")
    if isinstance(logger, Mapping):
        if "transport" in logger or "transports" in logger:
            data["cl"] = 1
        if "level" in logger:
            level = logger["level"]
            parsed = parse_log_level(level) if isinstance(level, str) else None
            data["ll"] = parsed.value if parsed is not None else -1

    if options.get("storage") is not None:
        data["ss"] = 1

    if options.get("gatewayService"):
        data["gs"] = 1

    poll_interval = options.get("pollInterval") or 0
    if poll_interval > 0:
        data["pi"] = 1

    vwo_meta = options.get("_vwo_meta")
    if isinstance(vwo_meta, Mapping) and "ea" in vwo_meta:
        data["_ea"] = 1

    data["lv"] = platform.python_version()
    return data