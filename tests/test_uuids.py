import uuid

import pytest

from fmesdk.uuids import generate_uuid, get_random_uuid, get_uuid, get_uuid_from_bits


def test_generate_uuid_is_version_5_rfc_variant():
    result = generate_uuid("some-name", uuid.NAMESPACE_URL)
    assert result.version == 5
    assert result.variant == uuid.RFC_4122


def test_generate_uuid_is_deterministic():
    ns = uuid.NAMESPACE_DNS
    assert generate_uuid("abc", ns) == generate_uuid("abc", ns)
    assert generate_uuid("abc", ns) != generate_uuid("abd", ns)


def test_get_uuid_is_stable_and_formatted():
    first = get_uuid("user-1", "123456")
    assert first == get_uuid("user-1", "123456")
    assert len(first) == 32
    assert first == first.upper()
    assert "-" not in first
    assert uuid.UUID(hex=first).version == 5


def test_get_uuid_depends_on_user_and_account():
    base = get_uuid("user-1", "123456")
    assert base != get_uuid("user-2", "123456")
    assert base != get_uuid("user-1", "654321")


def test_get_random_uuid_varies_between_calls():
    a = get_random_uuid("placeholder")
    b = get_random_uuid("placeholder")
    assert a != b
    assert uuid.UUID(a).version == 5
    assert uuid.UUID(b).version == 5


def test_get_uuid_from_bits_round_trip():
    original = uuid.uuid4()
    msb = original.int >> 64
    lsb = original.int & ((1 << 64) - 1)
    assert get_uuid_from_bits(msb, lsb) == original


def test_get_uuid_from_bits_zero_is_nil():
    assert get_uuid_from_bits(0, 0) == uuid.UUID(int=0)


@pytest.mark.parametrize("msb,lsb", [(-1, 0), (0, 1 << 64), (1 << 64, 0)])
def test_get_uuid_from_bits_rejects_out_of_range(msb, lsb):
    with pytest.raises(ValueError):
        get_uuid_from_bits(msb, lsb)