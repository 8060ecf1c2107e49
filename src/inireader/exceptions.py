class IniError(Exception):
    pass


class NotFoundError(IniError, KeyError):
    """A section or key does not exist."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0]) if self.args else ""


class InvalidFileError(IniError, OSError):
    """A path does not exist or is not a regular file."""


class ConversionError(IniError, ValueError):
    """A value cannot be converted to or from the requested type."""


class UnsupportedTypeError(IniError, TypeError):
    """No conversion is registered for a type."""


class ParseError(IniError, ValueError):
    """A malformed line was found while parsing in abort mode.

    Attributes:
        lineno: The 1-based line number.
        line: The offending line.
    """

    lineno: int
    line: str

    def __init__(self, lineno: int, line: str, reason: str):
        super().__init__(f"line {lineno}: {reason}: '{line}'")

        self.lineno = lineno
        self.line = line
