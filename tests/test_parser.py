import io
import logging
import pathlib

import numpy as np
import pytest

from inireader import (
    Document,
    InvalidFileError,
    MalformedLine,
    NotFoundError,
    ParseError,
    Parser,
    load,
    loads,
    read,
)
from inireader.parser import Entry, Header, Malformed, parse_line


def test_parse_line_entry():
    cfg = parse_line("key = value")
    assert isinstance(cfg, Entry)
    assert cfg.key == "key"
    assert cfg.value == "value"


def test_parse_line_header():
    cfg = parse_line("[this is a section]")
    assert isinstance(cfg, Header)
    assert cfg.name == "this is a section"


def test_parse_line_blank():
    assert parse_line("") is None
    assert parse_line("    ") is None
    assert parse_line("  ; comment") is None


def test_parse_line_escaped_header():
    cfg = parse_line("[a\\]b]")
    assert isinstance(cfg, Header)
    assert cfg.name == "a]b"


def test_parse_line_entry_priority():
    # A line that is both is an entry.
    cfg = parse_line("[a=b]")
    assert isinstance(cfg, Entry)
    assert cfg.key == "[a"
    assert cfg.value == "b]"


def test_parse_line_quoted():
    cfg = parse_line('key = "  spaced  "')
    assert isinstance(cfg, Entry)
    assert cfg.value == "  spaced  "

    # Only one layer of quotes is removed.
    cfg = parse_line('key = ""x""')
    assert isinstance(cfg, Entry)
    assert cfg.value == '"x"'


def test_parse_line_escaped_equals():
    cfg = parse_line("a\\=b = c")
    assert isinstance(cfg, Entry)
    assert cfg.key == "a=b"
    assert cfg.value == "c"


def test_parse_line_escaped_comment():
    cfg = parse_line("key = a \\; b")
    assert isinstance(cfg, Entry)
    assert cfg.value == "a ; b"


@pytest.mark.parametrize(
    "line", ["=empty key", "empty value =", "[hanging bracket", "[]", "just text"]
)
def test_parse_line_malformed(line: str):
    assert isinstance(parse_line(line), Malformed)


def test_parse_default_section(document: Document):
    assert document.root["default section value"] == "test value"

    # Root entries are not in any named section.
    for section in document.values():
        assert "default section value" not in section


def test_parse_comment_val(document: Document):
    section = document["comment_val"]

    assert section["val1"] == "##hello"
    assert section["val2##"] == "world"
    assert section["val3"] == "he##llo"


def test_parse_section1(document: Document):
    section = document["Section 1"]

    assert section["test_line_break"] == "test1"
    assert section["Option 1"] == "value 1"
    assert section["Option 2"] == "value 2"
    assert section["oPtion 1"] == "value 2\\ \\ \\"
    assert section["Option 3"] == "value 3 = not value 2"
    assert section["option 3"] == "value 3 = not value 2 = not value 1\\"


def test_parse_numbers(document: Document):
    section = document["Numbers"]

    assert section["num"].as_(np.int32) == -1285
    assert section["num_bin"].as_(str) == "0b01101001"
    assert section["num_hex"].as_(np.int32) == 4782
    assert section["num_hex"].as_(str) == "0x12ae"
    assert section["num_oct"].as_(np.uint32) == 1754
    assert section["num_uint64"].as_(np.uint64) == 1122334400000000
    assert section["float1"].as_(float) == -124.45667356
    assert section["float2"].as_(float) == 4.123456545
    assert section["float3"].as_(float) == 412.3456545
    assert section["float4"].as_(float) == -1.1245864


def test_parse_other(document: Document):
    section = document["Other"]

    assert section["bool1"].as_(bool) is True
    assert section["bool2"].as_(bool) is True
    assert section["bool3"].as_(bool) is False


def test_parse_sections(document: Document):
    assert list(document) == ["comment_val", "Section 1", "Numbers", "Other"]
    assert len(document) == 4


def test_parse_duplicate_key():
    doc = loads("[a]\nk = 1\nk = 2\n")
    assert doc["a"]["k"] == "2"
    assert len(doc["a"]) == 1


def test_parse_duplicate_section():
    doc = loads("[a]\nx = 1\n[b]\ny = 2\n[a]\nz = 3\n")

    assert dict(doc["a"]) == {"x": "1", "z": "3"}


def test_parse_crlf():
    doc = loads("[a]\r\nx = 1\r\ny = 2\r\n")
    assert dict(doc["a"]) == {"x": "1", "y": "2"}


def test_parse_file(ini_file: pathlib.Path):
    doc = read(ini_file)
    assert doc["Numbers"]["num_hex"].as_(np.int32) == 4782

    doc = Parser().parse(str(ini_file), is_path=True)
    assert doc.has_section("Other")


def test_parse_file_invalid(tmp_path: pathlib.Path):
    with pytest.raises(InvalidFileError):
        read(tmp_path / "doesntexist.ini")

    # Directories are not regular files.
    with pytest.raises(InvalidFileError):
        read(tmp_path)


def test_parse_stream(ini_text: str):
    doc = load(io.StringIO(ini_text))
    assert doc["Other"]["bool3"] == "off"

    doc = load(io.BytesIO(ini_text.encode("utf-8")))
    assert doc["Other"]["bool3"] == "off"


def test_parse_lines():
    doc = load(["[a]", "x = 1"])
    assert doc["a"]["x"] == "1"


def test_parse_logs_source(caplog: pytest.LogCaptureFixture, ini_file: pathlib.Path):
    caplog.set_level(logging.DEBUG, logger="inireader.parser")

    parser = Parser()
    parser.parse_string("[a]")
    parser.parse_stream(io.StringIO("[a]"))
    parser.parse_file(ini_file)

    messages = [r.getMessage() for r in caplog.records]
    assert "parsing string of 3 characters" in messages
    assert "parsing stream StringIO" in messages
    assert f"parsing file {ini_file}" in messages


def test_parse_bom():
    doc = loads("\ufeff[a]\nx = 1".encode("utf-8"))
    assert doc.has_section("a")


def test_parse_encoding():
    data = "[セクション]\nキー = 値\n".encode("shift_jis")

    doc = loads(data, encoding="shift_jis")
    assert doc["セクション"]["キー"] == "値"


def test_parse_wipe():
    parser = Parser()
    parser.parse("[a]\nx = 1")
    first = parser.document

    parser.parse("[b]\ny = 2")

    assert parser.document is not first
    assert not parser.document.has_section("a")
    assert parser.document.has_section("b")


def test_parse_merge():
    parser = Parser(wipe_on_parse=False)
    parser.parse("root = 1\n[a]\nx = 1")

    # The current section starts at the root again.
    parser.parse("root = 2\nnew = 3\n[a]\ny = 2")

    doc = parser.document
    assert dict(doc.root) == {"root": "2", "new": "3"}
    assert dict(doc["a"]) == {"x": "1", "y": "2"}


def test_parse_malformed_skip():
    doc = loads("[a]\nnot an entry\nx = 1")
    assert dict(doc["a"]) == {"x": "1"}


def test_parse_malformed_collect():
    parser = Parser(on_malformed=MalformedLine.COLLECT)
    parser.parse("[a]\nnot an entry\nx =\ny = 1")

    assert [(d.lineno, d.line) for d in parser.diagnostics] == [
        (2, "not an entry"),
        (3, "x ="),
    ]
    assert dict(parser.document["a"]) == {"y": "1"}


def test_parse_malformed_abort():
    parser = Parser(on_malformed="abort")

    with pytest.raises(ParseError) as exc:
        parser.parse("[a]\nx = 1\n[broken")

    assert exc.value.lineno == 3
    assert exc.value.line == "[broken"


def test_parse_missing(document: Document):
    with pytest.raises(NotFoundError):
        document["doesn't exist"]

    with pytest.raises(KeyError):
        document["Other"]["doesn't exist"]
