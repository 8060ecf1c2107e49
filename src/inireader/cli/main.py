import enum
import logging
import pathlib
from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.table import Table

from .. import conversion, parser
from ..conversion import CodeUnits
from ..document import Document, Section
from ..exceptions import IniError

from .console import console, err_console

LOG_LEVELS = [
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
]

ROOT = "(root)"

TypeName = enum.Enum(  # type: ignore[misc]
    "TypeName", {name: name for name in conversion.registry.names()}, type=str
)

IniFile = Annotated[
    pathlib.Path, typer.Argument(exists=True, dir_okay=False, resolve_path=True)
]

app = typer.Typer(no_args_is_help=True)


@app.callback()
def common(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, min=0, max=5, help="set logging level"
        ),
    ] = 0
):
    """Inspect and reformat INI files."""

    if verbose == 0:
        logging.disable()
    else:
        logging.basicConfig(level=LOG_LEVELS[verbose - 1])


def _error(e: Exception) -> typer.Exit:
    err_console.print(f"error: {escape(str(e))}")
    return typer.Exit(1)


def _read(file: pathlib.Path) -> Document:
    try:
        return parser.read(file)
    except IniError as e:
        raise _error(e)


def _section(doc: Document, name: str | None) -> Section:
    if name is None:
        return doc.root

    try:
        return doc[name]
    except IniError as e:
        raise _error(e)


@app.command()
def show(
    file: IniFile,
    section: Annotated[Optional[str], typer.Argument(help="Only show this section")] = None,
):
    """Show the entries of an INI file as a table."""

    doc = _read(file)

    if section is None:
        sections = {ROOT: doc.root} | dict(doc)
    else:
        sections = {section: _section(doc, section)}

    table = Table()
    for column in ["Section", "Key", "Value"]:
        table.add_column(column)

    for name, sect in sections.items():
        for key, value in sect.items():
            table.add_row(escape(name), escape(key), escape(value.text))

    console.print(table)


@app.command()
def get(
    file: IniFile,
    key: str,
    section: Annotated[
        Optional[str], typer.Option("--section", "-s", help="Section of the key")
    ] = None,
    as_type: Annotated[
        TypeName, typer.Option("--type", "-t", help="Type to read the value as")
    ] = TypeName["str"],
):
    """Print a single value, converted to a type."""

    doc = _read(file)
    sect = _section(doc, section)

    descriptor = conversion.registry.named(as_type.value)

    try:
        value = sect[key].as_(descriptor.type)
    except IniError as e:
        raise _error(e)

    if isinstance(value, CodeUnits):
        typer.echo(" ".join(f"0x{unit:04x}" for unit in value))
    else:
        typer.echo(value)


@app.command()
def check(file: IniFile):
    """List the lines of an INI file that are not understood."""

    ini_parser = parser.Parser(on_malformed=parser.MalformedLine.COLLECT)

    try:
        ini_parser.parse_file(file)
    except IniError as e:
        raise _error(e)

    if not ini_parser.diagnostics:
        console.print(f"{escape(str(file))}: ok")
        return

    table = Table()
    for column in ["Line", "Reason", "Text"]:
        table.add_column(column)

    for diag in ini_parser.diagnostics:
        table.add_row(str(diag.lineno), diag.reason, escape(diag.line))

    console.print(table)
    raise typer.Exit(1)


@app.command(name="format")
def format_(file: IniFile):
    """Print an INI file in canonical form."""

    typer.echo(parser.dumps(_read(file)), nl=False)
