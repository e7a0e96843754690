"""Small helpers shared by the event payload builders."""

from __future__ import annotations

import random
import time
from typing import Any, Optional

USER_AGENT_HEADER = "X-Device-User-Agent"
IP_HEADER = "VWO-X-Forwarded-For"


def remove_null_values(mapping: dict[str, Any]) -> dict[str, Any]:
    """Return a copy without None values, cleaning nested dicts too."""
    cleaned: dict[str, Any] = {}
    for key, value in mapping.items():
        if isinstance(value, dict):
            value = remove_null_values(value)
        if value is not None:
            cleaned[key] = value
    return cleaned


def generate_msg_id(uuid: str) -> str:
    """Return a message id: the uuid followed by the current time in milliseconds."""
    return f"{uuid}-{time.time_ns() // 1_000_000}"


def generate_session_id() -> int:
    """Return the current Unix time in seconds."""
    return int(time.time())


def generate_random() -> str:
    """Return a random number in [0, 1) with 16 decimal places."""
    return f"{random.random():.16f}"


def create_headers(user_agent: Optional[str] = "", ip_address: Optional[str] = "") -> dict[str, str]:
    """Return request headers carrying the visitor's user agent and IP, when given."""
    headers: dict[str, str] = {}
    if user_agent:
        headers[USER_AGENT_HEADER] = user_agent
    if ip_address:
        headers[IP_HEADER] = ip_address
    return headers