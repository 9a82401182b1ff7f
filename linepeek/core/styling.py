"""Styled run construction for rich-text previews.

A document is built once per request: fonts, tab geometry and the digit
width are resolved up front, then every logical line becomes a paragraph
of runs (line number, separator, content, line break). Paragraphs are kept
as index ranges over one flat run list so exporters can walk either view.
"""

from __future__ import annotations
from dataclasses import replace
from typing import List, Mapping, Optional

from .fonts import NUMBER_AREA_PADDING, number_area_width, resolve_font_or_default
from .lines import digit_width, format_line_number, resolve_separator, split_lines
from .models import (
    Document,
    Font,
    FormattingConfig,
    LineRecord,
    Paragraph,
    ParagraphGeometry,
    RunKind,
    StyledRun,
    StyleSpec,
    TabMode,
    TrailingBreak,
)

MAX_TAB_STOPS = 50
LINE_BREAK = "\n"


def tab_width_points(mode: TabMode, value: float, font: Font) -> float:
    if mode is TabMode.CHARACTERS:
        return font.advance_width * value
    if mode is TabMode.POINTS:
        return value
    raise ValueError(f"Unknown tab mode: {mode!r}")


def compute_tab_geometry(
    config: FormattingConfig,
    content_font: Font,
    line_number_font: Font,
    digits: int,
) -> ParagraphGeometry:
    interval = tab_width_points(config.tab_mode, config.tab_value, content_font)
    first: Optional[float] = None
    if config.line_numbers_enabled and resolve_separator(config.separator) == "\t":
        first = number_area_width(digits, line_number_font) + NUMBER_AREA_PADDING

    stops: List[float] = []
    if first is not None:
        stops.append(first)
    if interval > 0:
        origin = first if first is not None else 0.0
        step = 1
        while len(stops) < MAX_TAB_STOPS:
            stops.append(origin + interval * step)
            step += 1
    return ParagraphGeometry(default_tab_interval=interval, tab_stops=tuple(stops), first_tab_stop=first)


class _DocumentBuilder:
    def __init__(self) -> None:
        self._runs: List[StyledRun] = []
        self._paragraphs: List[Paragraph] = []
        self._start = 0

    def begin_paragraph(self) -> None:
        self._start = len(self._runs)

    def add_run(self, text: str, style: StyleSpec, kind: RunKind) -> None:
        self._runs.append(StyledRun(text, style, kind))

    def end_paragraph(self, line: LineRecord) -> None:
        self._paragraphs.append(Paragraph(line, self._start, len(self._runs)))

    def build(self, **kwargs) -> Document:
        return Document(runs=tuple(self._runs), paragraphs=tuple(self._paragraphs), **kwargs)


def build_document(
    text: str,
    config: FormattingConfig,
    catalog: Optional[Mapping[str, float]] = None,
) -> Document:
    lines, trailing = split_lines(text)
    numbered = config.line_numbers_enabled
    digits = digit_width(len(lines), config.min_digits) if numbered else 0

    ln_spec, content_spec = config.line_number_style, config.content_style
    ln_font = resolve_font_or_default(ln_spec.font_name, ln_spec.font_size, catalog)
    content_font = resolve_font_or_default(content_spec.font_name, content_spec.font_size, catalog)
    ln_style = replace(ln_spec, font_name=ln_font.name)
    content_style = replace(content_spec, font_name=content_font.name)

    separator = resolve_separator(config.separator)
    # a tab separator must carry the content paragraph's tab stops
    separator_style = content_style if separator == "\t" else ln_style
    geometry = compute_tab_geometry(config, content_font, ln_font, digits)

    builder = _DocumentBuilder()
    last = len(lines) - 1
    for pos, line in enumerate(lines):
        builder.begin_paragraph()
        if numbered:
            builder.add_run(format_line_number(line.index, digits), ln_style, RunKind.LINE_NUMBER)
            if separator:
                builder.add_run(separator, separator_style, RunKind.SEPARATOR)
        if line.content:
            builder.add_run(line.content, content_style, RunKind.CONTENT)
        if pos < last or trailing is not TrailingBreak.NONE:
            # the last break keeps the bytes that ended the source text
            brk = LINE_BREAK if pos < last else trailing.value
            builder.add_run(brk, content_style, RunKind.LINE_BREAK)
        builder.end_paragraph(line)

    return builder.build(
        geometry=geometry,
        digit_width=digits,
        trailing=trailing,
        fonts=(ln_font, content_font),
    )
