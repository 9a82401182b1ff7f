import json
from pathlib import Path

import pytest

from linepeek.core.config import (
    DEFAULT_CONTENT_BACKGROUND_DARK,
    DEFAULT_CONTENT_FOREGROUND_DARK,
    DEFAULT_LINE_NUMBER_FOREGROUND,
    default_settings,
    load_settings,
    settings_from_mapping,
)
from linepeek.core.errors import ConfigError
from linepeek.core.models import RGB, TabMode


def test_defaults():
    settings = default_settings()
    fmt = settings.formatting
    assert not fmt.line_numbers_enabled
    assert not fmt.rtf_enabled
    assert fmt.separator == " "
    assert fmt.min_digits == 4
    assert fmt.tab_mode is TabMode.CHARACTERS
    assert fmt.tab_value == 4.0
    assert fmt.line_number_style.font_name == "Menlo"
    assert fmt.line_number_style.foreground == RGB(0x80, 0x80, 0x80)
    assert fmt.content_style.background == RGB(0xFF, 0xFF, 0xFF)
    assert settings.max_file_size == 100 * 1024


def test_keys_are_parsed():
    settings = settings_from_mapping(
        {
            "lineNumbersEnabled": True,
            "lineSeparator": "pipe",
            "rtfRenderingEnabled": True,
            "contentFontName": "Monaco",
            "contentFontSize": 13,
            "contentForegroundColor": "#112233",
            "tabWidthMode": "Points",
            "tabWidthValue": 28,
            "maxFileSize": 512 * 1024,
        }
    )
    fmt = settings.formatting
    assert fmt.line_numbers_enabled and fmt.rtf_enabled
    assert fmt.separator == "pipe"
    assert fmt.content_style.font_name == "Monaco"
    assert fmt.content_style.font_size == 13.0
    assert fmt.content_style.foreground == RGB(0x11, 0x22, 0x33)
    assert fmt.tab_mode is TabMode.POINTS
    assert fmt.tab_value == 28.0
    assert settings.max_file_size == 512 * 1024


def test_unknown_tab_mode_defaults_to_characters():
    assert settings_from_mapping({"tabWidthMode": "inches"}).formatting.tab_mode is TabMode.CHARACTERS


def test_sizes_are_clamped_and_validated():
    fmt = settings_from_mapping({"lineNumberFontSize": 4, "contentFontSize": 40, "tabWidthValue": -1}).formatting
    assert fmt.line_number_style.font_size == 8.0
    assert fmt.content_style.font_size == 24.0
    assert fmt.tab_value == 4.0
    assert settings_from_mapping({"maxFileSize": 10}).max_file_size == 100 * 1024
    assert settings_from_mapping({"maxFileSize": 10 ** 9}).max_file_size == 10240 * 1024


def test_invalid_color_uses_slot_default():
    fmt = settings_from_mapping({"lineNumberForegroundColor": "zzzzzz"}).formatting
    assert fmt.line_number_style.foreground == DEFAULT_LINE_NUMBER_FOREGROUND


def test_empty_background_means_none():
    fmt = settings_from_mapping({"contentBackgroundColor": ""}).formatting
    assert fmt.content_style.background is None


def test_dark_mode_content_colors():
    fmt = settings_from_mapping({}, dark_mode=True).formatting
    assert fmt.content_style.foreground == DEFAULT_CONTENT_FOREGROUND_DARK
    assert fmt.content_style.background == DEFAULT_CONTENT_BACKGROUND_DARK
    fmt = settings_from_mapping({"contentForegroundColorDark": "#FFFFFF"}, dark_mode=True).formatting
    assert fmt.content_style.foreground == RGB(255, 255, 255)


def test_load_settings_file(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"lineNumbersEnabled": True, "lineSeparator": "tab"}))
    settings = load_settings(path)
    assert settings.formatting.line_numbers_enabled
    assert settings.formatting.separator == "tab"


def test_load_settings_errors(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(ConfigError):
        load_settings(bad)
    wrong = tmp_path / "list.json"
    wrong.write_text("[1, 2]")
    with pytest.raises(ConfigError):
        load_settings(wrong)


@pytest.mark.parametrize("value", ["false", "true", 1, 0, None, [True]])
def test_non_boolean_flags_fall_back_to_defaults(value):
    fmt = settings_from_mapping({"lineNumbersEnabled": value, "rtfRenderingEnabled": value}).formatting
    assert fmt.line_numbers_enabled is False
    assert fmt.rtf_enabled is False


def test_boolean_flags_are_honored():
    fmt = settings_from_mapping({"lineNumbersEnabled": True, "rtfRenderingEnabled": True}).formatting
    assert fmt.line_numbers_enabled is True
    assert fmt.rtf_enabled is True
