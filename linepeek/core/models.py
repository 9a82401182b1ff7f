from __future__ import annotations
import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Tuple


class EncodingTag(enum.Enum):
    """Candidate encodings; the value is the Python codec used to decode."""

    UTF8 = "utf-8"
    UTF16BE = "utf-16-be"
    UTF16LE = "utf-16-le"
    UTF32BE = "utf-32-be"
    UTF32LE = "utf-32-le"
    SHIFT_JIS = "shift_jis"
    EUC_JP = "euc_jp"
    ISO2022_JP = "iso2022_jp"
    EUC_KR = "euc_kr"
    GB18030 = "gb18030"
    BIG5 = "big5"
    GB2312 = "gb2312"
    WINDOWS_1252 = "cp1252"
    MAC_ROMAN = "mac_roman"

    @property
    def codec(self) -> str:
        return self.value


@dataclass(frozen=True)
class DetectionResult:
    encoding: EncodingTag
    text: str
    bom_stripped: bool = False
    stage: str = "utf8"  # bom | utf8 | statistical | fallback | lossy

    @property
    def lossy(self) -> bool:
        return self.stage == "lossy"


@dataclass(frozen=True)
class AnalysisResult:
    is_text: bool
    mime_type: str
    detection: Optional[DetectionResult] = None


class TrailingBreak(enum.Enum):
    NONE = ""
    LF = "\n"
    CR = "\r"
    CRLF = "\r\n"


@dataclass(frozen=True)
class LineRecord:
    index: int
    content: str


class TabMode(enum.Enum):
    CHARACTERS = "characters"
    POINTS = "points"


class RGB(NamedTuple):
    red: int
    green: int
    blue: int

    @property
    def hex(self) -> str:
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"


@dataclass(frozen=True)
class StyleSpec:
    font_name: str
    font_size: float
    foreground: RGB
    background: Optional[RGB] = None


@dataclass(frozen=True)
class FormattingConfig:
    line_numbers_enabled: bool = False
    separator: str = " "
    min_digits: int = 4
    rtf_enabled: bool = False
    line_number_style: StyleSpec = StyleSpec("Menlo", 11.0, RGB(0x80, 0x80, 0x80), RGB(0xF5, 0xF5, 0xF5))
    content_style: StyleSpec = StyleSpec("Menlo", 11.0, RGB(0, 0, 0), RGB(0xFF, 0xFF, 0xFF))
    tab_mode: TabMode = TabMode.CHARACTERS
    tab_value: float = 4.0


@dataclass(frozen=True)
class PreviewSettings:
    formatting: FormattingConfig = field(default_factory=FormattingConfig)
    max_file_size: int = 100 * 1024
    dark_mode: bool = False


class Font(NamedTuple):
    name: str
    size: float
    advance_width: float  # width of the reference glyph "m", in points
    is_fallback: bool = False


class RunKind(enum.Enum):
    LINE_NUMBER = "line_number"
    SEPARATOR = "separator"
    CONTENT = "content"
    LINE_BREAK = "line_break"


@dataclass(frozen=True)
class StyledRun:
    text: str
    style: StyleSpec
    kind: RunKind = RunKind.CONTENT

    @property
    def is_line_number_segment(self) -> bool:
        return self.kind is RunKind.LINE_NUMBER


@dataclass(frozen=True)
class ParagraphGeometry:
    default_tab_interval: float
    tab_stops: Tuple[float, ...] = ()
    first_tab_stop: Optional[float] = None


@dataclass(frozen=True)
class Paragraph:
    """A logical line, as a half-open index range over ``Document.runs``."""

    line: LineRecord
    start: int
    end: int


@dataclass(frozen=True)
class Document:
    runs: Tuple[StyledRun, ...]
    paragraphs: Tuple[Paragraph, ...]
    geometry: ParagraphGeometry
    digit_width: int
    trailing: TrailingBreak = TrailingBreak.NONE
    fonts: Tuple[Font, ...] = ()

    def entries(self) -> Iterator[Tuple[LineRecord, Tuple[StyledRun, ...], ParagraphGeometry]]:
        for para in self.paragraphs:
            yield para.line, self.runs[para.start:para.end], self.geometry

    def paragraph_runs(self, para: Paragraph) -> Tuple[StyledRun, ...]:
        return self.runs[para.start:para.end]

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def line_count(self) -> int:
        return len(self.paragraphs)


@dataclass
class Preview:
    data: bytes
    media_type: str
    encoding: Optional[EncodingTag] = None
    is_text: bool = True
    truncated: bool = False
    used_fallback: bool = False
    source: Optional[Path] = None
    notes: List[str] = field(default_factory=list)


@dataclass
class IndexEntry:
    file_location: str  # string path for JSON serializable output
    status: str  # rendered | binary | skipped | error
    output: Optional[str] = None
    encoding: Optional[str] = None
    media_type: Optional[str] = None
    truncated: bool = False
    used_fallback: bool = False
    meta: Dict[str, Any] = field(default_factory=dict)
