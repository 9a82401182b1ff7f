from __future__ import annotations
from typing import Dict, List, Optional

from .base import ExporterPlugin
from ..core.models import RGB, Document, ParagraphGeometry, RunKind, StyledRun

TWIPS_PER_POINT = 20


def _twips(points: float) -> int:
    return int(round(points * TWIPS_PER_POINT))


def _escape(text: str) -> str:
    out: List[str] = []
    for ch in text:
        cp = ord(ch)
        if ch in "\\{}":
            out.append("\\" + ch)
        elif ch == "\t":
            out.append("\\tab ")
        elif cp < 0x20:
            out.append(f"\\'{cp:02x}")
        elif cp < 0x80:
            out.append(ch)
        elif cp <= 0xFFFF:
            out.append(f"\\u{cp if cp < 0x8000 else cp - 0x10000}?")
        else:
            # astral code points are written as a UTF-16 surrogate pair
            cp -= 0x10000
            for unit in (0xD800 | (cp >> 10), 0xDC00 | (cp & 0x3FF)):
                out.append(f"\\u{unit - 0x10000}?")
    return "".join(out)


class _Tables:
    def __init__(self) -> None:
        self.fonts: Dict[str, int] = {}
        self.colors: Dict[RGB, int] = {}

    def font(self, name: str) -> int:
        return self.fonts.setdefault(name, len(self.fonts))

    def color(self, color: Optional[RGB]) -> Optional[int]:
        if color is None:
            return None
        # index 0 is the implicit "auto" color
        return self.colors.setdefault(color, len(self.colors) + 1)

    def header(self, geometry: ParagraphGeometry) -> str:
        fonts = "".join(f"\\f{idx}\\fmodern\\fcharset0 {_escape(name)};" for name, idx in self.fonts.items())
        colors = "".join(f"\\red{c.red}\\green{c.green}\\blue{c.blue};" for c in self.colors)
        deftab = _twips(geometry.default_tab_interval) if geometry.default_tab_interval > 0 else 720
        return (
            f"{{\\rtf1\\ansi\\ansicpg1252\\deff0\\deftab{deftab}\n"
            f"{{\\fonttbl{fonts}}}\n"
            f"{{\\colortbl;{colors}}}\n"
        )


class RTFExporter(ExporterPlugin):
    NAME = "rtf"
    EXTENSION = "rtf"
    MEDIA_TYPE = "application/rtf"

    def _run(self, run: StyledRun, tables: _Tables) -> str:
        if run.kind is RunKind.LINE_BREAK:
            return "\\par\n"
        style = run.style
        controls = [f"\\f{tables.font(style.font_name)}", f"\\fs{int(round(style.font_size * 2))}"]
        controls.append(f"\\cf{tables.color(style.foreground)}")
        background = tables.color(style.background)
        if background is not None:
            controls.append(f"\\cb{background}")
        return "{" + "".join(controls) + " " + _escape(run.text) + "}"

    def serialize(self, document: Document) -> bytes:
        tables = _Tables()
        for font in document.fonts:
            tables.font(font.name)
        stops = "".join(f"\\tx{_twips(stop)}" for stop in document.geometry.tab_stops)
        body: List[str] = []
        for para in document.paragraphs:
            body.append(f"\\pard{stops}\\pardirnatural ")
            body.extend(self._run(run, tables) for run in document.paragraph_runs(para))
        # font/color tables are only known once every run has been visited
        rtf = tables.header(document.geometry) + "".join(body) + "}"
        return rtf.encode("ascii")


RTF = RTFExporter
