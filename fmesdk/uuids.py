"""Deterministic and random UUID helpers used for visitor identification."""

from __future__ import annotations

import uuid

_SEED_URL = "https://vwo.com"
_UINT64_LIMIT = 1 << 64


def generate_uuid(name: str, namespace: uuid.UUID) -> uuid.UUID:
    """Return the name-based (version 5, SHA-1) UUID of ``name`` in ``namespace``."""
    return uuid.uuid5(namespace, name)


def get_random_uuid(sdk_key: str) -> str:
    """Return a random version 5 UUID string namespaced by the SDK key."""
    namespace = generate_uuid(sdk_key, uuid.NAMESPACE_DNS)
    return str(generate_uuid(str(uuid.uuid4()), namespace))


def get_uuid(user_id: str, account_id: str) -> str:
    """Return the stable visitor UUID for a user within an account.

    The result is 32 upper-case hexadecimal characters without dashes.
    """
    vwo_namespace = generate_uuid(_SEED_URL, uuid.NAMESPACE_URL)
    account_namespace = generate_uuid(account_id or "", vwo_namespace)
    user_uuid = generate_uuid(user_id or "", account_namespace)
    return user_uuid.hex.upper()


def get_uuid_from_bits(msb: int, lsb: int) -> uuid.UUID:
    """Build a UUID from its most and least significant 64-bit halves."""
    for label, value in (("msb", msb), ("lsb", lsb)):
        if not 0 <= value < _UINT64_LIMIT:
            raise ValueError(f"{label} must be an unsigned 64-bit integer, got {value}")
    return uuid.UUID(bytes=msb.to_bytes(8, "big") + lsb.to_bytes(8, "big"))