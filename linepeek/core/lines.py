from __future__ import annotations
from typing import List, NamedTuple, Tuple

from .models import FormattingConfig, LineRecord, TrailingBreak

DEFAULT_MIN_DIGITS = 4

_SEPARATOR_ALIASES = {
    "space": " ",
    " ": " ",
    "tab": "\t",
    "\\t": "\t",
    "\t": "\t",
    "colon": ":",
    ":": ":",
    "pipe": "|",
    "|": "|",
}


class FormattedText(NamedTuple):
    text: str
    trailing: TrailingBreak


def trailing_break_of(text: str) -> TrailingBreak:
    if text.endswith("\r\n"):
        return TrailingBreak.CRLF
    if text.endswith("\n"):
        return TrailingBreak.LF
    if text.endswith("\r"):
        return TrailingBreak.CR
    return TrailingBreak.NONE


def split_lines(text: str) -> Tuple[List[LineRecord], TrailingBreak]:
    """Split ``text`` on CRLF, LF and CR, keeping empty lines.

    The final line break is reported as the trailing break and does not
    open a new, empty line. An empty text is a single empty line.
    """
    trailing = trailing_break_of(text)
    body = text[: len(text) - len(trailing.value)]

    contents: List[str] = []
    start = 0
    i = 0
    end = len(body)
    while i < end:
        ch = body[i]
        if ch == "\r":
            contents.append(body[start:i])
            i += 2 if body.startswith("\n", i + 1) else 1
            start = i
        elif ch == "\n":
            contents.append(body[start:i])
            i += 1
            start = i
        else:
            i += 1
    contents.append(body[start:])
    return [LineRecord(n, content) for n, content in enumerate(contents, start=1)], trailing


def digit_width(line_count: int, min_digits: int = DEFAULT_MIN_DIGITS) -> int:
    return max(min_digits, len(str(max(line_count, 1))))


def format_line_number(number: int, width: int) -> str:
    return str(number).zfill(width)


def resolve_separator(token: str) -> str:
    """Map a separator setting (``"colon"``, ``"tab"``, ...) to its literal."""
    if token in _SEPARATOR_ALIASES:
        return _SEPARATOR_ALIASES[token]
    return _SEPARATOR_ALIASES.get(token.lower(), token)


def format_lines(text: str, config: FormattingConfig) -> FormattedText:
    """Plain-text rendering: zero-padded numbers, separator, content.

    Lines are joined with LF; the original trailing break is kept as-is.
    With line numbers disabled the text is returned unchanged.
    """
    lines, trailing = split_lines(text)
    if not config.line_numbers_enabled:
        return FormattedText(text, trailing)

    width = digit_width(len(lines), config.min_digits)
    separator = resolve_separator(config.separator)
    numbered = [f"{format_line_number(line.index, width)}{separator}{line.content}" for line in lines]
    return FormattedText("\n".join(numbered) + trailing.value, trailing)
