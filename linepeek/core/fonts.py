from __future__ import annotations
from typing import List, Mapping, Optional

from .models import Font
from .utils import get_logger

logger = get_logger("fonts")

# Advance width of one glyph, as a fraction of the point size.
MONOSPACED_FONTS: Mapping[str, float] = {
    "Andale Mono": 0.6001,
    "Consolas": 0.5498,
    "Courier": 0.6,
    "Courier New": 0.6001,
    "DejaVu Sans Mono": 0.6021,
    "Fira Code": 0.6,
    "IBM Plex Mono": 0.6,
    "JetBrains Mono": 0.6,
    "Liberation Mono": 0.6001,
    "Menlo": 0.6021,
    "Menlo-Regular": 0.6021,
    "Monaco": 0.6001,
    "Osaka-Mono": 0.5,
    "PT Mono": 0.6,
    "SF Mono": 0.6,
    "SFMono-Regular": 0.6,
    "Source Code Pro": 0.6,
}

DEFAULT_FONT_NAME = "Courier"
DEFAULT_ADVANCE_RATIO = 0.6
NUMBER_AREA_PADDING = 6.0  # points between the number column and the content


def available_monospaced_fonts(catalog: Optional[Mapping[str, float]] = None) -> List[str]:
    return sorted(catalog if catalog is not None else MONOSPACED_FONTS)


def resolve_font_or_default(name: str, size: float, catalog: Optional[Mapping[str, float]] = None) -> Font:
    """Look ``name`` up in the catalog (case-insensitive).

    Unknown fonts resolve to the built-in ``Courier`` at the requested size.
    """
    fonts = catalog if catalog is not None else MONOSPACED_FONTS
    ratio = fonts.get(name)
    if ratio is None:
        folded = (name or "").casefold()
        for known, known_ratio in fonts.items():
            if known.casefold() == folded:
                name, ratio = known, known_ratio
                break
    if ratio is None:
        logger.info("Font %r is not available; using %s", name, DEFAULT_FONT_NAME)
        return Font(DEFAULT_FONT_NAME, size, DEFAULT_ADVANCE_RATIO * size, is_fallback=True)
    return Font(name, size, ratio * size)


def number_area_width(digits: int, font: Font) -> float:
    return digits * font.advance_width
