from __future__ import annotations
import html
from typing import List

from .base import ExporterPlugin
from ..core.fonts import number_area_width
from ..core.models import Document, RunKind, StyledRun, StyleSpec


def _css(style: StyleSpec) -> str:
    parts = [
        f"font-family:'{style.font_name}',monospace",
        f"font-size:{style.font_size:g}pt",
        f"color:{style.foreground.hex}",
    ]
    if style.background is not None:
        parts.append(f"background-color:{style.background.hex}")
    return ";".join(parts)


class HTMLExporter(ExporterPlugin):
    NAME = "html"
    EXTENSION = "html"
    MEDIA_TYPE = "text/html"

    def _separator_gap(self, document: Document) -> float:
        # the tab after the number is drawn as a fixed gap up to the first stop
        first = document.geometry.first_tab_stop
        if first is None or not document.fonts:
            return 0.0
        return max(first - number_area_width(document.digit_width, document.fonts[0]), 0.0)

    def _run(self, run: StyledRun, gap: float) -> str:
        if run.kind is RunKind.LINE_BREAK:
            return "\n"
        if run.kind is RunKind.SEPARATOR and run.text == "\t" and gap > 0:
            return f'<span style="{_css(run.style)};display:inline-block;width:{gap:.2f}pt"></span>'
        return f'<span style="{_css(run.style)}">{html.escape(run.text)}</span>'

    def serialize(self, document: Document) -> bytes:
        gap = self._separator_gap(document)
        tab = document.geometry.default_tab_interval
        body: List[str] = [self._run(run, gap) for run in document.runs]
        page = (
            "<!DOCTYPE html>\n"
            '<html><head><meta charset="utf-8">'
            f"<style>pre{{margin:0;tab-size:{tab:.2f}pt;-moz-tab-size:{tab:.2f}pt}}</style>"
            "</head>\n<body><pre>"
            + "".join(body)
            + "</pre></body></html>\n"
        )
        return page.encode("utf-8")


HTML = HTMLExporter
