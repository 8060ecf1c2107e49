"""Signed and unsigned integers of 8, 16, 32 and 64 bits.

Integers are written either in decimal (`-1285`, `01754`) or in hexadecimal with a `0x` prefix (`0x12ae`).
Hexadecimal literals are read into a 64-bit intermediate first,
so a literal that does not fit 64 bits is rejected before the width check.
"""

import re

import numpy as np

from ._registry import Descriptor

RE_HEX = re.compile(r"0x[0-9a-fA-F]+")
RE_DECIMAL = re.compile(r"[+-]?[0-9]+")

# The number of digits in the uint64 maximum, not counting leading zeros.
_MAX_DIGITS = 20

_INT64 = np.iinfo(np.int64)
_UINT64 = np.iinfo(np.uint64)


def is_hex(text: str) -> bool:
    return RE_HEX.fullmatch(text) is not None


def to_int(text: str, signed: bool = True) -> int | None:
    """Read an integer literal without checking its width.

    Args:
        text: The literal.
        signed: Whether the hexadecimal intermediate is signed or unsigned 64-bit.

    Returns:
        The integer, or None if the literal is malformed.
    """

    if is_hex(text):
        if len(text[2:].lstrip("0")) > 16:
            return None

        num = int(text[2:], 16)

        limit = _INT64.max if signed else _UINT64.max
        if num > limit:
            return None

        return num

    if RE_DECIMAL.fullmatch(text):
        digits = text.lstrip("+-").lstrip("0") or "0"
        if len(digits) > _MAX_DIGITS:
            return None

        num = int(digits)
        return -num if text.startswith("-") else num

    return None


def from_int(value: int) -> str:
    return str(int(value))


def integer(name: str, type_: type, dtype: type[np.integer]) -> Descriptor:
    """Create a descriptor for an integer type.

    Args:
        name: The descriptor name.
        type_: The type values are converted to.
        dtype: The NumPy integer type that sets the range.

    Returns:
        The descriptor.
    """

    limits = np.iinfo(dtype)
    signed = limits.min < 0

    def check(text: str) -> bool:
        num = to_int(text, signed)
        return num is not None and limits.min <= num <= limits.max

    def convert(text: str):
        return type_(to_int(text, signed))

    return Descriptor(name, type_, check, convert, from_int)


DESCRIPTORS = [
    integer("int8", np.int8, np.int8),
    integer("int16", np.int16, np.int16),
    integer("int32", np.int32, np.int32),
    integer("int64", np.int64, np.int64),
    integer("uint8", np.uint8, np.uint8),
    integer("uint16", np.uint16, np.uint16),
    integer("uint32", np.uint32, np.uint32),
    integer("uint64", np.uint64, np.uint64),
    # Plain ints behave as signed 64-bit.
    integer("int", int, np.int64),
]
