"""Line-level text helpers shared by the parser and the serializer."""

import functools
import re

WHITESPACE = " \t"
COMMENT_CHARS = ";#"

RE_LINE_BREAK = re.compile(r"[\r\n]")

# A comment starts at a delimiter preceded by whitespace, or at the start of the line.
RE_COMMENT = re.compile(r"[ \t][;#]")
RE_BARE_COMMENT = re.compile(r"(^|[ \t])([;#])")


def trim_leading(text: str, char: str = " ") -> str:
    """Remove all leading occurrences of char."""

    return text.lstrip(char)


def trim_trailing(text: str, char: str = " ") -> str:
    """Remove all trailing occurrences of char."""

    return text.rstrip(char)


def trim(text: str, char: str = " ") -> str:
    return trim_trailing(trim_leading(text, char), char)


def split_lines(text: str) -> list[str]:
    """Split text into lines.

    Carriage returns and line feeds are independent delimiters,
    so a CRLF pair yields an empty line between the two real lines.
    A trailing delimiter does not produce a final empty line.

    Args:
        text: The text to split.

    Returns:
        The lines, without their delimiters.
    """

    lines = RE_LINE_BREAK.split(text)

    if not lines[-1]:
        lines.pop()

    return lines


def strip_comment(line: str) -> str:
    """Remove a comment from a line.

    A line whose first non-space character is `;` or `#` is a comment in its entirety.
    Elsewhere, a delimiter only starts a comment when whitespace precedes it,
    so values such as `he##llo` or keys such as `val2##` are left alone.

    Args:
        line: The line to strip.

    Returns:
        The line without the comment and the whitespace before it.
    """

    stripped = trim_leading(line, WHITESPACE)
    if stripped and stripped[0] in COMMENT_CHARS:
        return ""

    if match := RE_COMMENT.search(line):
        return line[: match.start()]

    return line


@functools.cache
def _escaped(chars: str) -> re.Pattern[str]:
    return re.compile(rf"\\([{re.escape(chars)}\\])")


def unescape(text: str, chars: str) -> str:
    """Drop the backslash in front of any of chars, and turn `\\\\` into a single backslash.

    Backslashes before any other character are literal.
    """

    return _escaped(chars).sub(r"\1", text)


def escape(text: str, chars: str) -> str:
    """Prefix every backslash and every occurrence of chars with a backslash."""

    text = text.replace("\\", "\\\\")

    for char in chars:
        text = text.replace(char, "\\" + char)

    return text


def escape_comments(text: str) -> str:
    """Escape only the comment delimiters that the parser would treat as comments."""

    return RE_BARE_COMMENT.sub(r"\1\\\2", text)


def find_unescaped(text: str, char: str, start: int = 0) -> int:
    """Find the first occurrence of char not escaped by a backslash.

    A run of backslashes escapes char only if its length is odd,
    since each `\\\\` pair stands for one literal backslash.

    Returns:
        The index, or -1 if there is none.
    """

    pos = text.find(char, start)

    while pos > 0:
        run = pos - len(text[:pos].rstrip("\\"))
        if run % 2 == 0:
            break

        pos = text.find(char, pos + 1)

    return pos
