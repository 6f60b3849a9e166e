"""Flat key/value property store codec.

Reads and writes the ``key = value`` text format used for settings files.
Unlike a stock properties writer, ``encode`` never emits a modification
timestamp comment, so saving unchanged data twice yields identical bytes.

Format:
    # user_SETTINGS
    user_zoom = 1.0
    user_show_grid = true
"""

from __future__ import annotations

import re
import string
from typing import BinaryIO, Mapping

DEFAULT_ENCODING = "utf-8"

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_UNESCAPES = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}
_KEY_SPECIALS = " =:#!"
_SEPARATORS = "=:"
_WHITESPACE = " \t\f"
# Control characters allowed in a text settings file
_TEXT_CONTROLS = "\t\n\r\f"
# Line boundaries for str.splitlines() beyond the control range
_UNICODE_BREAKS = "\x85\u2028\u2029"
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class DecodeError(ValueError):
    """Raised when a settings stream is not a readable property file."""


def decode(stream: BinaryIO, encoding: str = DEFAULT_ENCODING) -> dict[str, str]:
    """Decode a property stream into an ordered ``{key: value}`` mapping.

    Later duplicates of a key overwrite earlier ones.

    Raises:
        DecodeError: If the content is not text or contains a bad escape.
    """
    data = stream.read()
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as e:
        raise DecodeError(f"Settings content is not valid {encoding} text: {e}") from e

    for char in text:
        if char < " " and char not in _TEXT_CONTROLS:
            raise DecodeError(f"Settings content contains control character {ord(char):#04x}")

    record: dict[str, str] = {}
    for line_no, line in _logical_lines(text):
        key, value = _split(line, line_no)
        record[key] = value
    return record


def encode(stream: BinaryIO, record: Mapping[str, str], header: str | None = None,
           encoding: str = DEFAULT_ENCODING) -> None:
    """Write ``record`` as one section, preceded by an optional header comment.

    Characters ``encoding`` cannot represent are written as ``\\uXXXX``.
    The stream is flushed once the section is written.
    """
    lines = []
    if header:
        for header_line in _LINE_BREAK.split(header):
            lines.append(f"# {escape(header_line)}")
    for key, value in record.items():
        lines.append(f"{escape(key, is_key=True)} = {escape(value)}")

    if lines:
        stream.write(_encodable("\n".join(lines) + "\n", encoding).encode(encoding))
    stream.flush()


def escape(text: str, is_key: bool = False) -> str:
    """Escape a key or value so that ``decode`` reads it back unchanged."""
    out = []
    for index, char in enumerate(text):
        if char in _UNESCAPES:
            out.append(_UNESCAPES[char])
        elif char < " " or char in _UNICODE_BREAKS:
            out.append(f"\\u{ord(char):04x}")
        elif is_key and char in _KEY_SPECIALS:
            out.append("\\" + char)
        elif not is_key and index == 0 and char == " ":
            out.append("\\ ")
        else:
            out.append(char)
    return "".join(out)


def _encodable(text: str, encoding: str) -> str:
    """Replace characters ``encoding`` cannot hold with ``\\uXXXX`` escapes."""
    try:
        text.encode(encoding)
        return text
    except UnicodeEncodeError:
        pass

    out = []
    for char in text:
        try:
            char.encode(encoding)
            out.append(char)
        except UnicodeEncodeError:
            code = ord(char)
            if code > 0xFFFF:
                code -= 0x10000
                out.append(f"\\u{0xD800 + (code >> 10):04x}\\u{0xDC00 + (code & 0x3FF):04x}")
            else:
                out.append(f"\\u{code:04x}")
    return "".join(out)


def _logical_lines(text: str):
    """Yield ``(line_no, line)`` with comments dropped and continuations joined."""
    pending: list[str] = []
    start = 0
    for line_no, raw in enumerate(_LINE_BREAK.split(text), start=1):
        line = raw.lstrip(_WHITESPACE)
        if not pending:
            if not line or line[0] in "#!":
                continue
            start = line_no

        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending.append(line[:-1])
            continue

        pending.append(line)
        yield start, "".join(pending)
        pending = []

    if pending:
        yield start, "".join(pending)


def _split(line: str, line_no: int) -> tuple[str, str]:
    """Split a logical line into an unescaped ``(key, value)`` pair."""
    index = 0
    length = len(line)
    while index < length:
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        index += 1

    key = line[:index]
    rest = line[index:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)

    return _unescape(key, line_no), _unescape(rest, line_no)


def _unescape(text: str, line_no: int) -> str:
    out = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char != "\\":
            out.append(char)
            index += 1
            continue

        if index + 1 >= length:
            break
        code = text[index + 1]
        if code == "u":
            point = _hex_escape(text, index, line_no)
            index += 6
            # Characters beyond the BMP are written as a surrogate pair
            if 0xD800 <= point <= 0xDBFF and text.startswith("\\u", index):
                low = _hex_escape(text, index, line_no)
                if 0xDC00 <= low <= 0xDFFF:
                    point = 0x10000 + ((point - 0xD800) << 10) + (low - 0xDC00)
                    index += 6
            out.append(chr(point))
            continue

        out.append(_ESCAPES.get(code, code))
        index += 2
    return "".join(out)


def _hex_escape(text: str, index: int, line_no: int) -> int:
    digits = text[index + 2:index + 6]
    if len(digits) != 4 or any(d not in string.hexdigits for d in digits):
        raise DecodeError(f"Malformed \\uXXXX escape on line {line_no}")
    return int(digits, 16)
