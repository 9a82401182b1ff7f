from __future__ import annotations
import string
from typing import Optional

from .models import RGB
from .utils import get_logger

logger = get_logger("colors")

_HEX_DIGITS = frozenset(string.hexdigits)


def parse_hex_color(value: str) -> Optional[RGB]:
    """Parse ``RRGGBB`` or ``RRGGBBAA`` with an optional leading ``#``.

    Alpha is validated but dropped. Returns None for anything else.
    """
    if not isinstance(value, str):
        return None
    digits = value.strip()
    if digits.startswith("#"):
        digits = digits[1:]
    if len(digits) not in (6, 8) or not all(ch in _HEX_DIGITS for ch in digits):
        return None
    return RGB(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def resolve_color_or_default(value: Optional[str], default: RGB) -> RGB:
    """Parse ``value``; an invalid or missing color becomes ``default``."""
    color = parse_hex_color(value) if value is not None else None
    if color is None:
        if value is not None:
            logger.warning("Invalid color %r; using %s", value, default.hex)
        return default
    return color
