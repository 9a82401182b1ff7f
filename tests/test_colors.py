from linepeek.core.colors import parse_hex_color, resolve_color_or_default
from linepeek.core.models import RGB


def test_six_digit_hex_with_hash():
    assert parse_hex_color("#FF0000") == RGB(255, 0, 0)


def test_eight_digit_hex_ignores_alpha():
    assert parse_hex_color("FF0000FF") == RGB(255, 0, 0)
    assert parse_hex_color("#00FF0080") == RGB(0, 255, 0)


def test_case_insensitive_and_trimmed():
    assert parse_hex_color("  #00ff7f ") == RGB(0, 255, 127)


def test_invalid_colors():
    for value in ("zzzzzz", "#abc", "#GG0000", "FF00", "#FF00000", "", "##FF0000"):
        assert parse_hex_color(value) is None


def test_invalid_color_is_replaced_by_default():
    default = RGB(1, 2, 3)
    assert resolve_color_or_default("zzzzzz", default) == default
    assert resolve_color_or_default(None, default) == default
    assert resolve_color_or_default("#0A0B0C", default) == RGB(10, 11, 12)


def test_rgb_hex_round_trip():
    assert RGB(255, 0, 16).hex == "#FF0010"
