"""Classification of loosely typed values such as segment operands."""

from __future__ import annotations

import dataclasses
import datetime
import math
from collections.abc import Mapping
from typing import Any


def is_object(val: Any) -> bool:
    """True for mappings and dataclass instances."""
    if val is None:
        return False
    if isinstance(val, Mapping):
        return True
    return dataclasses.is_dataclass(val) and not isinstance(val, type)


def is_array(val: Any) -> bool:
    """True for lists and tuples."""
    return isinstance(val, (list, tuple))


def is_null(val: Any) -> bool:
    """True when the value is None."""
    return val is None


def is_undefined(val: Any) -> bool:
    """True when the value is None; there is no separate undefined value."""
    return val is None


def is_defined(val: Any) -> bool:
    """True when the value is not None."""
    return val is not None


def is_number(val: Any) -> bool:
    """True for ints and floats, but not booleans."""
    return isinstance(val, (int, float)) and not isinstance(val, bool)


def is_integer(val: Any) -> bool:
    """True for ints, but not booleans."""
    return isinstance(val, int) and not isinstance(val, bool)


def is_string(val: Any) -> bool:
    """True for str values."""
    return isinstance(val, str)


def is_boolean(val: Any) -> bool:
    """True for bool values."""
    return isinstance(val, bool)


def is_nan(val: Any) -> bool:
    """True for a float that is NaN."""
    return isinstance(val, float) and math.isnan(val)


def is_date(val: Any) -> bool:
    """True for datetime values."""
    return isinstance(val, datetime.datetime)


def is_function(val: Any) -> bool:
    """True for callables other than classes."""
    return callable(val) and not isinstance(val, type)


def get_type(val: Any) -> str:
    """Return a type name for the value, checked in a fixed precedence order."""
    checks = (
        (is_null, "Null"),
        (is_undefined, "Undefined"),
        (is_nan, "NaN"),
        (is_array, "Array"),
        (is_object, "Object"),
        (is_integer, "Integer"),
        (is_number, "Number"),
        (is_string, "String"),
        (is_boolean, "Boolean"),
        (is_date, "Date"),
        (is_function, "Function"),
    )
    return next((name for check, name in checks if check(val)), "Unknown Type")