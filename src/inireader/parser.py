"""Parse INI text into a document.

The grammar is line-oriented:

    section_header := '[' name ']'              ; ']' may be escaped as '\\]'
    entry          := key '=' value             ; value may be wrapped once in '"'
    comment        := (';' | '#') rest-of-line  ; at line start or after whitespace

A line is tried as an entry first and as a section header second,
so `[a=b]` is the key `[a` with the value `b]`.
Entries before the first header go into the document's root section.
"""

import dataclasses
import enum
import io
import logging
import os
import pathlib
from collections.abc import Iterable
from typing import IO, Any

import attrs
import chardet

from . import conversion, text
from .document import Document, Section
from .exceptions import InvalidFileError, ParseError

_log = logging.getLogger(__name__)

Source = str | bytes | os.PathLike | IO[str] | IO[bytes]


@dataclasses.dataclass(slots=True)
class Header:
    """A section header, i.e. [name]."""

    name: str


@dataclasses.dataclass(slots=True)
class Entry:
    """A key-value entry, i.e. key=value."""

    key: str
    value: str


@dataclasses.dataclass(slots=True)
class Malformed:
    """A line that is neither blank, an entry, nor a section header."""

    reason: str


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]

    return value


def parse_entry(line: str) -> Entry | None:
    """Parse a line as a key-value entry.

    The key is everything before the first unescaped `=`.
    Both sides are trimmed, and one layer of double quotes around the value is removed.

    Returns:
        The entry, or None if the key or value is empty.
    """

    pos = text.find_unescaped(line, "=")
    if pos < 0:
        return None

    key = text.trim(line[:pos], text.WHITESPACE)
    value = text.trim(line[pos + 1 :], text.WHITESPACE)

    # Emptiness is checked before unquoting, so `key = ""` is an empty value.
    if not key or not value:
        return None

    return Entry(
        key=text.unescape(key, "=" + text.COMMENT_CHARS),
        value=text.unescape(_unquote(value), text.COMMENT_CHARS),
    )


def parse_header(line: str) -> Header | Malformed | None:
    """Parse a line as a section header.

    The name ends at the first `]` not escaped as `\\]`. Text after the header is ignored.

    Returns:
        The header, Malformed if the line starts a header but is not one, or None otherwise.
    """

    line = text.trim(line, text.WHITESPACE)
    if not line.startswith("["):
        return None

    end = text.find_unescaped(line, "]", 1)
    if end < 0:
        return Malformed("unterminated section header")

    if end == 1:
        return Malformed("empty section name")

    return Header(text.unescape(line[1:end], "]=" + text.COMMENT_CHARS))


def parse_line(line: str) -> Header | Entry | Malformed | None:
    """Classify an INI line.

    Args:
        line: The line to parse, without line breaks.

    Returns:
        A header, an entry, Malformed, or None if the line is blank or a comment.
    """

    line = text.strip_comment(line)
    if not text.trim(line, text.WHITESPACE):
        return None

    if entry := parse_entry(line):
        return entry

    if header := parse_header(line):
        return header

    if text.find_unescaped(line, "=") >= 0:
        return Malformed("empty key or value")

    return Malformed("not an entry or section header")


class MalformedLine(enum.Enum):
    """What to do with a malformed line."""

    # Ignore the line.
    SKIP = "skip"
    # Ignore the line, but record a diagnostic.
    COLLECT = "collect"
    # Raise ParseError.
    ABORT = "abort"


@attrs.frozen
class Diagnostic:
    """A malformed line found while parsing.

    Attributes:
        lineno: The 1-based line number. A carriage return inside a line does not start a new number.
        line: The line as read.
        reason: Why the line was not understood.
    """

    lineno: int
    line: str
    reason: str


def detect_encoding(data: bytes) -> str | None:
    """Determine the encoding of INI bytes.

    Args:
        data: The bytes to detect the encoding of.

    Returns:
        The encoding if detected successfully, otherwise None.
    """

    detector = chardet.UniversalDetector()

    for line in data.splitlines(keepends=True):
        if detector.done:
            break

        detector.feed(line)

    result = detector.close()

    if encoding := result["encoding"]:
        return encoding.lower()

    return None


@attrs.define
class Parser:
    """An INI parser that owns the document it parses into.

    Attributes:
        wipe_on_parse: If True, each parse starts from an empty document.
            Otherwise, parsed entries are layered onto the existing document.
        on_malformed: What to do with lines that are not understood.
        encoding: The encoding of byte input.
            If None, UTF-8 (with or without a BOM) is tried before detecting the encoding.
        registry: The conversions used by the document.
        document: The parsed document.
        diagnostics: Malformed lines collected since the document was last wiped.
    """

    wipe_on_parse: bool = True
    on_malformed: MalformedLine = attrs.field(
        default=MalformedLine.SKIP, converter=MalformedLine
    )
    encoding: str | None = None
    registry: conversion.Registry = attrs.field(
        factory=lambda: conversion.registry, repr=False
    )
    document: Document = attrs.field(
        default=attrs.Factory(lambda self: Document(self.registry), takes_self=True),
        init=False,
        repr=False,
    )
    diagnostics: list[Diagnostic] = attrs.field(factory=list, init=False, repr=False)

    def parse(self, source: Source, is_path: bool = False) -> Document:
        """Parse INI from a path, a string, or an open file.

        Args:
            source: Path-like objects are always read as paths.
                Strings are read as INI text unless is_path is True.
            is_path: Whether or not a string source is a path.

        Returns:
            The document.
        """

        if is_path or isinstance(source, os.PathLike):
            return self.parse_file(source)  # type: ignore[arg-type]

        if isinstance(source, (bytes, bytearray)):
            return self.parse_string(self.decode(bytes(source)))

        if isinstance(source, str):
            return self.parse_string(source)

        return self.parse_stream(source)

    def parse_file(self, path: str | os.PathLike) -> Document:
        """Parse an INI file.

        Raises:
            InvalidFileError: The path does not exist, is not a regular file, or could not be read.
        """

        path = pathlib.Path(path)

        if not path.exists():
            raise InvalidFileError(f"file not found: {path}")

        if not path.is_file():
            raise InvalidFileError(f"not a regular file: {path}")

        try:
            data = path.read_bytes()
        except OSError as e:
            raise InvalidFileError(f"failed to read {path}: {e}") from e

        _log.debug("parsing file %s", path)

        return self.parse_lines(self.decode(data).split("\n"))

    def parse_stream(self, stream: IO[str] | IO[bytes] | Iterable[str]) -> Document:
        """Parse INI from an open text or binary file.

        Iterables of lines without a `read` method are accepted too.
        """

        _log.debug("parsing stream %s", getattr(stream, "name", type(stream).__name__))

        if not hasattr(stream, "read"):
            return self.parse_lines(stream)

        data = stream.read()
        if isinstance(data, bytes):
            data = self.decode(data)

        return self.parse_lines(data.split("\n"))

    def parse_string(self, ini: str) -> Document:
        """Parse INI text."""

        _log.debug("parsing string of %d characters", len(ini))

        return self.parse_lines(ini.split("\n"))

    def parse_lines(self, lines: Iterable[str]) -> Document:
        """Parse INI lines into the document.

        Each item is one line; carriage returns and line feeds inside it split it further.

        Raises:
            ParseError: A line is malformed and on_malformed is ABORT.
        """

        if self.wipe_on_parse:
            self.document = Document(self.registry)
            self.diagnostics = []

        section: Section = self.document.root

        for lineno, physical in enumerate(lines, 1):
            for line in text.split_lines(physical):
                cfg = parse_line(line)

                if cfg is None:
                    continue

                if isinstance(cfg, Entry):
                    section[cfg.key] = cfg.value

                elif isinstance(cfg, Header):
                    if cfg.name not in self.document:
                        self.document.add_section(cfg.name)

                    section = self.document[cfg.name]
                    _log.debug("line %d: entering section '%s'", lineno, cfg.name)

                else:
                    self._malformed(lineno, line, cfg.reason)

        return self.document

    def decode(self, data: bytes) -> str:
        """Decode INI bytes.

        Raises:
            InvalidFileError: The encoding could not be detected.
        """

        if self.encoding is not None:
            return data.decode(self.encoding)

        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError:
            encoding = detect_encoding(data)

        if encoding is None:
            raise InvalidFileError("failed to detect encoding")

        _log.debug("detected encoding %s", encoding)

        return data.decode(encoding)

    def _malformed(self, lineno: int, line: str, reason: str):
        if self.on_malformed is MalformedLine.ABORT:
            raise ParseError(lineno, line, reason)

        if self.on_malformed is MalformedLine.COLLECT:
            self.diagnostics.append(Diagnostic(lineno, line, reason))

        _log.debug("line %d: skipped (%s): '%s'", lineno, reason, line)


def read(path: str | os.PathLike, **options: Any) -> Document:
    """Parse an INI file.

    Args:
        path: The path to the file.
        **options: Passed to Parser.

    Returns:
        The document.

    Raises:
        See Parser.parse_file().
    """

    return Parser(**options).parse_file(path)


def load(file: IO[str] | IO[bytes] | Iterable[str], **options: Any) -> Document:
    """Parse an open INI file.

    Args:
        file: A text or binary file, or an iterable of lines.
        **options: Passed to Parser.

    Returns:
        The document.
    """

    return Parser(**options).parse_stream(file)


def loads(ini: str | bytes, **options: Any) -> Document:
    """Parse INI text.

    Args:
        ini: The text to parse. Bytes are decoded as by Parser.decode().
        **options: Passed to Parser.

    Returns:
        The document.
    """

    return Parser(**options).parse(ini)


def dump(document: Document, file: IO[str]):
    """Serialize a document as INI to a file.

    Args:
        document: The document to serialize.
        file: The file to serialize to.
    """

    file.write(document.stringify())


def dumps(document: Document) -> str:
    """Serialize a document as INI to a string."""

    with io.StringIO() as buf:
        dump(document, buf)
        return buf.getvalue()
