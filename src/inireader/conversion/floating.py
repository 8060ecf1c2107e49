import re

import numpy as np

from ._registry import Descriptor

RE_FLOAT = re.compile(
    r"""
    # Optional sign.
    [+-]?

    # Digits with an optional fraction, or a bare fraction.
    (?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)

    # Optional exponent.
    (?:[eE][+-]?[0-9]+)?
    """,
    flags=re.VERBOSE,
)


def floating(name: str, type_: type, dtype: type[np.floating]) -> Descriptor:
    """Create a descriptor for a floating point type.

    A string is convertible if it is a decimal or exponential literal
    whose value is finite at the type's precision.

    Args:
        name: The descriptor name.
        type_: The type values are converted to.
        dtype: The NumPy floating type that sets the range.

    Returns:
        The descriptor.
    """

    limits = np.finfo(dtype)

    def check(text: str) -> bool:
        return RE_FLOAT.fullmatch(text) is not None and abs(float(text)) <= limits.max

    def convert(text: str):
        return type_(float(text))

    def format(value) -> str:
        # Shortest representation that reads back to the same value at this width.
        return str(dtype(value))

    return Descriptor(name, type_, check, convert, format)


DESCRIPTORS = [
    floating("float32", np.float32, np.float32),
    floating("float64", np.float64, np.float64),
    floating("float", float, np.float64),
]
