"""This module provides the conversions between INI values and Python types.

The default registry supports:
* `bool`
* `numpy.int8` to `numpy.int64`, `numpy.uint8` to `numpy.uint64`, and `int` (signed 64-bit)
* `numpy.float32`, `numpy.float64` and `float` (double precision)
* `str`, `bytes` (UTF-8), `UTF16String` and `UTF32String`

Further types are supported by registering a `Descriptor`.
"""

from . import boolean, floating, integer, strings
from ._registry import Descriptor, Registry
from .strings import CodeUnits, UTF16String, UTF32String, decode_utf8, encode_utf8


def default_registry() -> Registry:
    """Create a registry with the built-in descriptors."""

    reg = Registry()

    for descriptor in [
        boolean.DESCRIPTOR,
        *integer.DESCRIPTORS,
        *floating.DESCRIPTORS,
        *strings.DESCRIPTORS,
    ]:
        reg.register(descriptor)

    return reg


registry = default_registry()
