"""String views of an INI value.

Values are stored as Python strings, which are also their UTF-8 form.
They can be viewed as UTF-8 bytes, or as sequences of UTF-16 or UTF-32 code units.

UTF-8 sequences are packed as follows:

| Code point         | Byte 1   | Byte 2   | Byte 3   | Byte 4   |
| ------------------ | -------- | -------- | -------- | -------- |
| U+0000 to U+007F   | 0xxxxxxx |          |          |          |
| U+0080 to U+07FF   | 110xxxxx | 10xxxxxx |          |          |
| U+0800 to U+FFFF   | 1110xxxx | 10xxxxxx | 10xxxxxx |          |
| U+10000 to U+10FFFF| 11110xxx | 10xxxxxx | 10xxxxxx | 10xxxxxx |

Code points above U+FFFF become a surrogate pair in UTF-16.
"""

from collections.abc import Iterable, Iterator
from typing import ClassVar, Self

from ..exceptions import ConversionError
from ._registry import Descriptor

_MAX_CODE_POINT = 0x10FFFF

_HIGH_SURROGATES = range(0xD800, 0xDC00)
_LOW_SURROGATES = range(0xDC00, 0xE000)


def _sequence(lead: int) -> tuple[int, int]:
    # Length of the sequence and the payload bits of its lead byte.
    if lead & 0x80 == 0x00:
        return 1, lead
    elif lead & 0xE0 == 0xC0:
        return 2, lead & 0x1F
    elif lead & 0xF0 == 0xE0:
        return 3, lead & 0x0F
    elif lead & 0xF8 == 0xF0:
        return 4, lead & 0x07

    return 0, 0


def decode_utf8(data: bytes, width: int = 32) -> Iterator[int]:
    """Decode UTF-8 into code units, one sequence at a time.

    Args:
        data: The UTF-8 bytes.
        width: The code unit width in bits, either 16 or 32.

    Yields:
        Each code unit.

    Raises:
        ConversionError: The bytes are not valid UTF-8.
    """

    pos = 0

    while pos < len(data):
        size, point = _sequence(data[pos])
        if size == 0:
            raise ConversionError(f"invalid UTF-8 lead byte 0x{data[pos]:02x} at {pos}")

        if pos + size > len(data):
            raise ConversionError(f"truncated UTF-8 sequence at {pos}")

        for byte in data[pos + 1 : pos + size]:
            if byte & 0xC0 != 0x80:
                raise ConversionError(f"invalid UTF-8 continuation byte at {pos}")

            point = (point << 6) | (byte & 0x3F)

        pos += size

        if width == 16 and point > 0xFFFF:
            point -= 0x10000
            yield 0xD800 | (point >> 10)
            yield 0xDC00 | (point & 0x3FF)
        else:
            yield point


def _code_points(units: Iterable[int]) -> Iterator[int]:
    # Join surrogate pairs back into code points.
    high = None

    for unit in units:
        if unit in _HIGH_SURROGATES:
            if high is not None:
                raise ConversionError(f"unpaired surrogate 0x{high:04x}")

            high = unit
            continue

        if unit in _LOW_SURROGATES:
            if high is None:
                raise ConversionError(f"unpaired surrogate 0x{unit:04x}")

            unit = 0x10000 + ((high - 0xD800) << 10) + (unit - 0xDC00)
            high = None

        elif high is not None:
            raise ConversionError(f"unpaired surrogate 0x{high:04x}")

        yield unit

    if high is not None:
        raise ConversionError(f"unpaired surrogate 0x{high:04x}")


def encode_utf8(units: Iterable[int]) -> bytes:
    """Encode UTF-16 or UTF-32 code units as UTF-8.

    Args:
        units: The code units. Surrogate pairs are joined.

    Returns:
        The UTF-8 bytes.

    Raises:
        ConversionError: A code unit is out of range or a surrogate is unpaired.
    """

    buf = bytearray()

    for point in _code_points(units):
        if point < 0:
            raise ConversionError(f"negative code unit {point}")
        elif point < 0x80:
            buf.append(point)
        elif point < 0x800:
            buf.append(0xC0 | (point >> 6))
            buf.append(0x80 | (point & 0x3F))
        elif point < 0x10000:
            buf.append(0xE0 | (point >> 12))
            buf.append(0x80 | ((point >> 6) & 0x3F))
            buf.append(0x80 | (point & 0x3F))
        elif point <= _MAX_CODE_POINT:
            buf.append(0xF0 | (point >> 18))
            buf.append(0x80 | ((point >> 12) & 0x3F))
            buf.append(0x80 | ((point >> 6) & 0x3F))
            buf.append(0x80 | (point & 0x3F))
        else:
            raise ConversionError(f"code point 0x{point:x} is out of range")

    return bytes(buf)


class CodeUnits(tuple[int, ...]):
    """A string as a sequence of fixed-width code units."""

    WIDTH: ClassVar[int]

    @classmethod
    def from_str(cls, text: str) -> Self:
        return cls(decode_utf8(text.encode("utf-8"), cls.WIDTH))

    def __str__(self) -> str:
        return encode_utf8(self).decode("utf-8")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class UTF16String(CodeUnits):
    """A string as UTF-16 code units."""

    WIDTH = 16


class UTF32String(CodeUnits):
    """A string as UTF-32 code units, i.e. code points."""

    WIDTH = 32


def is_encodable(text: str) -> bool:
    # Lone surrogates (from surrogateescape decoding) have no UTF-8 form.
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False

    return True


def to_bytes(text: str) -> bytes:
    return text.encode("utf-8")


def from_bytes(value: bytes) -> str:
    try:
        return bytes(value).decode("utf-8")
    except UnicodeDecodeError as e:
        raise ConversionError(f"value is not valid UTF-8: {e}") from e


def from_code_units(value: CodeUnits) -> str:
    # Plain tuples of code units are accepted too.
    return encode_utf8(value).decode("utf-8")


DESCRIPTORS = [
    Descriptor("str", str, lambda _: True, str, str),
    Descriptor("bytes", bytes, is_encodable, to_bytes, from_bytes),
    Descriptor(
        "utf16", UTF16String, is_encodable, UTF16String.from_str, from_code_units
    ),
    Descriptor(
        "utf32", UTF32String, is_encodable, UTF32String.from_str, from_code_units
    ),
]
