"""Conversion of resolved option values to Python scalars."""

import re
from typing import Any, Callable, Dict, NewType

from .exceptions import TypeConversionError

# Field annotation for integers that must not be negative
uint = NewType("uint", int)

CONVERTER_TYPE = Callable[[str], Any]

BOOL_STRINGS: Dict[str, bool] = {
    "t": True,
    "true": True,
    "y": True,
    "yes": True,
    "on": True,
    "1": True,
    "f": False,
    "false": False,
    "n": False,
    "no": False,
    "off": False,
    "0": False,
}

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
# float() also accepts surrounding spaces and digit separators
_FLOAT_REJECTED = re.compile(r"[\s_]")


def to_str(value: str) -> str:
    return value


def to_bool(value: str) -> bool:
    """Convert value using the case insensitive ``BOOL_STRINGS`` table.

    Raises:
        TypeConversionError: If value is not a recognized token
    """
    try:
        return BOOL_STRINGS[value.lower()]
    except KeyError:
        raise TypeConversionError(f"could not parse bool value: {value}", value) from None


def to_int(value: str) -> int:
    """Convert a base-10 integer, without surrounding spaces or digit separators.

    Raises:
        TypeConversionError: If value is not a plain decimal integer
    """
    try:
        result = int(value, 10)
    except ValueError as e:
        raise TypeConversionError(f"could not parse int value: {value}", value) from e
    # int() also accepts surrounding spaces and digit separators
    if _INT_PATTERN.fullmatch(value) is None:
        raise TypeConversionError(f"could not parse int value: {value}", value)
    return result


def to_uint(value: str) -> int:
    """Convert like ``to_int`` and reject negative numbers."""
    result = to_int(value)
    if result < 0:
        raise TypeConversionError(f"could not parse unsigned value: {value}", value)
    return uint(result)


def to_float(value: str) -> float:
    """Convert a floating point number, without surrounding spaces or digit separators.

    Raises:
        TypeConversionError: If float() rejects value
    """
    if _FLOAT_REJECTED.search(value):
        raise TypeConversionError(f"could not parse float value: {value}", value)
    try:
        return float(value)
    except ValueError as e:
        raise TypeConversionError(f"could not parse float value: {value}", value) from e


SCALAR_CONVERTERS: Dict[Any, CONVERTER_TYPE] = {
    str: to_str,
    bool: to_bool,
    int: to_int,
    uint: to_uint,
    float: to_float,
}
