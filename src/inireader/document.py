"""The in-memory model of an INI document.

A document holds a root section for entries before any header, and named sections.
Each section maps keys to values, and each value stores a single canonical string.
Typed reads and writes go through a conversion registry.
"""

from collections import UserDict
from collections.abc import Mapping
from typing import Any, TypeVar

from . import conversion, text
from .exceptions import ConversionError, NotFoundError

T = TypeVar("T")

_NO_DEFAULT: Any = object()


class Value:
    """A value in a section.

    The canonical string is the only state; typed views are computed on every read.

    Attributes:
        text: The canonical string.
        registry: The conversions for typed access.
    """

    __slots__ = ("text", "registry")

    text: str
    registry: conversion.Registry

    def __init__(self, text: str = "", registry: conversion.Registry | None = None):
        self.text = text
        self.registry = registry or conversion.registry

    def as_(self, type_: type[T]) -> T:
        """Read the value as a type.

        Args:
            type_: A type supported by the registry.

        Returns:
            The converted value. For `str`, this is the canonical string itself.

        Raises:
            ConversionError: The value is not convertible to the type.
            UnsupportedTypeError: The type is not supported.
        """

        return self.registry.parse(self.text, type_)

    def is_(self, type_: type) -> bool:
        """Check if the value is convertible to a type."""

        return self.registry.is_convertible(self.text, type_)

    def set(self, value: Any):
        """Overwrite the canonical string with the formatted value.

        Raises:
            ConversionError: The formatted value contains a line break.
        """

        self.text = _check_line(self.registry.format(value), "value")

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Value({self.text!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Value):
            return self.text == other.text
        if isinstance(other, str):
            return self.text == other

        return NotImplemented

    __hash__ = None  # type: ignore[assignment]


class Section(UserDict[str, Value]):
    """A group of key-value entries.

    Assigning any supported type to a key stores its canonical string.
    Assigning to an existing key updates its value in place.

    Attributes:
        registry: The conversions for typed access.
    """

    registry: conversion.Registry

    def __init__(
        self,
        entries: Mapping[str, Any] | None = None,
        registry: conversion.Registry | None = None,
    ):
        self.registry = registry or conversion.registry

        super().__init__(entries)

    def __setitem__(self, key: str, value: Any):
        if isinstance(value, Value):
            value = value.text

        if key in self.data:
            self.data[key].set(value)
            return

        check_key(key)

        new = Value(registry=self.registry)
        new.set(value)
        self.data[key] = new

    def __missing__(self, key: str) -> Value:
        raise NotFoundError(f"section has no key '{key}'")

    def add(self, key: str, value: Any) -> Value:
        """Add or overwrite an entry.

        Returns:
            The stored value.

        Raises:
            ConversionError: The key or the formatted value cannot be written as INI.
        """

        self[key] = value
        return self.data[key]

    def remove(self, key: str) -> bool:
        """Remove an entry.

        Returns:
            True if the entry existed.
        """

        return self.data.pop(key, None) is not None

    def remove_all(self):
        self.data.clear()

    def has_value(self, key: str) -> bool:
        return key in self.data

    def get_as(self, key: str, type_: type[T], default: T = _NO_DEFAULT) -> T:
        """Read an entry as a type.

        Args:
            key: The key to read.
            type_: The type to convert to.
            default: Returned if the key does not exist.

        Raises:
            NotFoundError: The key does not exist and there is no default.
            ConversionError: The value is not convertible to the type.
        """

        if key not in self.data:
            if default is _NO_DEFAULT:
                raise NotFoundError(f"section has no key '{key}'")

            return default

        return self.data[key].as_(type_)

    def structure(self, cls: type[T]) -> T:
        """Convert the section to an attrs class using the registry's converter.

        Keys without a matching field are ignored.

        Raises:
            cattrs.errors.ClassValidationError: A field is missing or could not be converted.
        """

        return self.registry.converter.structure(
            {k: v.text for k, v in self.data.items()}, cls
        )

    def unstructure(self, obj: Any):
        """Add the fields of an attrs instance as entries.

        Fields that are None are skipped.
        """

        for key, value in self.registry.converter.unstructure(obj).items():
            if value is not None:
                self[key] = value

    def stringify(self) -> str:
        """Serialize the entries as `key=value` lines."""

        return "".join(f"{format_key(k)}={format_value(v.text)}\n" for k, v in self.items())


class Document(UserDict[str, Section]):
    """A parsed INI document.

    Iterating over the document yields section names; the root section is not among them.

    Attributes:
        root: The section for entries that appear before any header.
        registry: The conversions shared by every section.
    """

    root: Section
    registry: conversion.Registry

    def __init__(self, registry: conversion.Registry | None = None):
        self.registry = registry or conversion.registry
        self.root = Section(registry=self.registry)

        super().__init__()

    def __setitem__(self, name: str, section: Mapping[str, Any]):
        check_section_name(name)

        if not isinstance(section, Section) or section.registry is not self.registry:
            section = Section(section, self.registry)

        self.data[name] = section

    def __missing__(self, name: str) -> Section:
        raise NotFoundError(f"section '{name}' does not exist")

    def add_section(self, name: str) -> Section:
        """Add an empty section, replacing any section with the same name.

        Returns:
            The new section.

        Raises:
            ConversionError: The name is empty or contains a line break.
        """

        check_section_name(name)

        section = Section(registry=self.registry)
        self.data[name] = section
        return section

    def has_section(self, name: str) -> bool:
        return name in self.data

    def remove_section(self, name: str) -> bool:
        """Remove a section.

        Returns:
            True if the section existed.
        """

        return self.data.pop(name, None) is not None

    def get_section(self, name: str) -> Section:
        """Get a section by name.

        Raises:
            NotFoundError: The section does not exist.
        """

        return self[name]

    def clear(self):
        """Remove every section and empty the root section."""

        self.data.clear()
        self.root.remove_all()

    def stringify(self) -> str:
        """Serialize the document as INI text.

        Root entries come first, followed by each section under its header.
        Blocks are separated by a blank line.
        """

        blocks = []

        if self.root:
            blocks.append(self.root.stringify())

        for name, section in self.items():
            blocks.append(f"[{format_section(name)}]\n" + section.stringify())

        return "\n".join(blocks)

    def __str__(self) -> str:
        return self.stringify()


def check_key(key: str):
    """Check that a key can be written as INI.

    Raises:
        ConversionError: The key would not read back unchanged.
    """

    if not key or key != text.trim(key, text.WHITESPACE):
        raise ConversionError(f"key must be non-empty without surrounding whitespace: {key!r}")

    _check_line(key, "key")


def check_section_name(name: str):
    """Check that a section name can be written as INI.

    Raises:
        ConversionError: The name is empty or contains a line break.
    """

    if not name:
        raise ConversionError("section name must be non-empty")

    _check_line(name, "section name")


def _check_line(s: str, what: str) -> str:
    if text.RE_LINE_BREAK.search(s):
        raise ConversionError(f"{what} cannot contain line breaks: {s!r}")

    return s


def format_section(name: str) -> str:
    return text.escape_comments(text.escape(_check_line(name, "section name"), "]="))


def format_key(key: str) -> str:
    return text.escape_comments(text.escape(_check_line(key, "key"), "="))


def format_value(value: str) -> str:
    value = text.escape_comments(text.escape(_check_line(value, "value"), ""))

    # Quote values whose whitespace would be trimmed, or whose quotes would be stripped.
    if (
        not value
        or value != text.trim(value, text.WHITESPACE)
        or (len(value) >= 2 and value[0] == value[-1] == '"')
    ):
        return f'"{value}"'

    return value
