"""Read, edit and write INI configuration files with typed values."""

from . import conversion
from .conversion import Descriptor, Registry, UTF16String, UTF32String
from .document import Document, Section, Value
from .exceptions import (
    ConversionError,
    IniError,
    InvalidFileError,
    NotFoundError,
    ParseError,
    UnsupportedTypeError,
)
from .parser import (
    Diagnostic,
    MalformedLine,
    Parser,
    dump,
    dumps,
    load,
    loads,
    read,
)

__all__ = [
    "conversion",
    "Descriptor",
    "Registry",
    "UTF16String",
    "UTF32String",
    "Document",
    "Section",
    "Value",
    "ConversionError",
    "IniError",
    "InvalidFileError",
    "NotFoundError",
    "ParseError",
    "UnsupportedTypeError",
    "Diagnostic",
    "MalformedLine",
    "Parser",
    "dump",
    "dumps",
    "load",
    "loads",
    "read",
]
