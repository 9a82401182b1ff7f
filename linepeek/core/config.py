"""Settings loading.

Settings are a flat JSON object using the same keys the preview extension
stores in its preferences, e.g.::

    {"lineNumbersEnabled": true, "lineSeparator": "colon",
     "rtfRenderingEnabled": true, "contentFontName": "Menlo",
     "tabWidthMode": "points", "tabWidthValue": 28}

Every value is validated here, at the boundary, so the rest of the package
only ever sees closed enums, clamped numbers and parsed colors.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Mapping, Optional

from .colors import resolve_color_or_default
from .errors import ConfigError
from .lines import DEFAULT_MIN_DIGITS
from .models import RGB, FormattingConfig, PreviewSettings, StyleSpec, TabMode
from .utils import get_logger

logger = get_logger("config")

KB = 1024
DEFAULT_MAX_FILE_SIZE = 100 * KB
MIN_MAX_FILE_SIZE = 100 * KB
MAX_MAX_FILE_SIZE = 10240 * KB

MIN_FONT_SIZE = 8.0
MAX_FONT_SIZE = 24.0

DEFAULT_SEPARATOR = " "
DEFAULT_FONT_NAME = "Menlo"
DEFAULT_FONT_SIZE = 11.0
DEFAULT_TAB_MODE = TabMode.CHARACTERS
DEFAULT_TAB_VALUE = 4.0

DEFAULT_LINE_NUMBER_FOREGROUND = RGB(0x80, 0x80, 0x80)
DEFAULT_LINE_NUMBER_BACKGROUND = RGB(0xF5, 0xF5, 0xF5)
DEFAULT_CONTENT_FOREGROUND = RGB(0x00, 0x00, 0x00)
DEFAULT_CONTENT_BACKGROUND = RGB(0xFF, 0xFF, 0xFF)
DEFAULT_CONTENT_FOREGROUND_DARK = RGB(0xE0, 0xE0, 0xE0)
DEFAULT_CONTENT_BACKGROUND_DARK = RGB(0x1E, 0x1E, 0x1E)


def parse_tab_mode(value: Any) -> TabMode:
    if isinstance(value, TabMode):
        return value
    if isinstance(value, str):
        for mode in TabMode:
            if mode.value == value.strip().lower():
                return mode
    if value is not None:
        logger.warning("Unknown tab width mode %r; using %s", value, DEFAULT_TAB_MODE.value)
    return DEFAULT_TAB_MODE


def _positive_float(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def clamp_font_size(value: Any) -> float:
    size = _positive_float(value, DEFAULT_FONT_SIZE)
    return min(max(size, MIN_FONT_SIZE), MAX_FONT_SIZE)


def clamp_max_file_size(value: Any) -> int:
    try:
        size = int(value)
    except (TypeError, ValueError):
        return DEFAULT_MAX_FILE_SIZE
    if size <= 0:
        return DEFAULT_MAX_FILE_SIZE
    return min(max(size, MIN_MAX_FILE_SIZE), MAX_MAX_FILE_SIZE)


def _background(value: Any, default: RGB) -> Optional[RGB]:
    if value is None:
        return default
    if isinstance(value, str) and not value.strip():
        return None
    return resolve_color_or_default(value, default)


def _style(payload: Mapping[str, Any], prefix: str, fg_key: str, bg_key: str, fg: RGB, bg: RGB) -> StyleSpec:
    name = payload.get(f"{prefix}FontName") or DEFAULT_FONT_NAME
    return StyleSpec(
        font_name=str(name),
        font_size=clamp_font_size(payload.get(f"{prefix}FontSize")),
        foreground=resolve_color_or_default(payload.get(fg_key), fg),
        background=_background(payload.get(bg_key), bg),
    )


def _flag(payload: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = payload.get(key)
    if isinstance(value, bool):
        return value
    if value is not None:
        logger.warning("Setting %s expects true or false, got %r; using %s", key, value, default)
    return default


def settings_from_mapping(payload: Mapping[str, Any], dark_mode: bool = False) -> PreviewSettings:
    if not isinstance(payload, Mapping):
        raise ConfigError(f"Settings must be a JSON object, got {type(payload).__name__}")

    if dark_mode:
        content_fg_key, content_bg_key = "contentForegroundColorDark", "contentBackgroundColorDark"
        content_fg, content_bg = DEFAULT_CONTENT_FOREGROUND_DARK, DEFAULT_CONTENT_BACKGROUND_DARK
    else:
        content_fg_key, content_bg_key = "contentForegroundColor", "contentBackgroundColor"
        content_fg, content_bg = DEFAULT_CONTENT_FOREGROUND, DEFAULT_CONTENT_BACKGROUND

    separator = payload.get("lineSeparator")
    min_digits = payload.get("minDigits", DEFAULT_MIN_DIGITS)
    try:
        min_digits = max(1, int(min_digits))
    except (TypeError, ValueError):
        min_digits = DEFAULT_MIN_DIGITS

    formatting = FormattingConfig(
        line_numbers_enabled=_flag(payload, "lineNumbersEnabled"),
        separator=separator if isinstance(separator, str) else DEFAULT_SEPARATOR,
        min_digits=min_digits,
        rtf_enabled=_flag(payload, "rtfRenderingEnabled"),
        line_number_style=_style(
            payload,
            "lineNumber",
            "lineNumberForegroundColor",
            "lineNumberBackgroundColor",
            DEFAULT_LINE_NUMBER_FOREGROUND,
            DEFAULT_LINE_NUMBER_BACKGROUND,
        ),
        content_style=_style(payload, "content", content_fg_key, content_bg_key, content_fg, content_bg),
        tab_mode=parse_tab_mode(payload.get("tabWidthMode")),
        tab_value=_positive_float(payload.get("tabWidthValue"), DEFAULT_TAB_VALUE),
    )
    return PreviewSettings(
        formatting=formatting,
        max_file_size=clamp_max_file_size(payload.get("maxFileSize", DEFAULT_MAX_FILE_SIZE)),
        dark_mode=dark_mode,
    )


def load_settings(path: Path, dark_mode: bool = False) -> PreviewSettings:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing settings file: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Malformed settings file {path}: {exc}") from exc
    return settings_from_mapping(payload, dark_mode=dark_mode)


def default_settings(dark_mode: bool = False) -> PreviewSettings:
    return settings_from_mapping({}, dark_mode=dark_mode)
