"""Binary/text classification and encoding detection.

``detect`` walks a fixed chain of stages and returns the first one that
produces text:

1. byte-order mark (the BOM is stripped before decoding)
2. strict UTF-8 structural validation
3. statistical guess from chardet, restricted to a suggested candidate set
   and accepted only when it decodes without loss
4. brute-force fallback chain of regional codecs
5. UTF-8 with replacement characters, which always succeeds

Binary classification is a separate gate (``is_binary``); ``analyze`` runs
the gate first and only decodes samples that look like text.
"""

from __future__ import annotations
import codecs
from typing import Iterable, Optional, Sequence, Tuple

import chardet  # type: ignore

from .models import AnalysisResult, DetectionResult, EncodingTag
from .utils import SAMPLE_SIZE, get_logger

logger = get_logger("encoding")

TEXT_MIME_TYPE = "text/plain"
BINARY_MIME_TYPE = "application/octet-stream"

# TAB, LF, FF, CR
ALLOWED_CONTROL_BYTES = frozenset({0x09, 0x0A, 0x0C, 0x0D})
CONTROL_RATIO_THRESHOLD = 0.30

# Longer marks first so FF FE 00 00 is never read as a UTF-16LE mark.
BOMS: Tuple[Tuple[bytes, EncodingTag], ...] = (
    (b"\x00\x00\xfe\xff", EncodingTag.UTF32BE),
    (b"\xff\xfe\x00\x00", EncodingTag.UTF32LE),
    (b"\xef\xbb\xbf", EncodingTag.UTF8),
    (b"\xfe\xff", EncodingTag.UTF16BE),
    (b"\xff\xfe", EncodingTag.UTF16LE),
)

DEFAULT_SUGGESTED_ENCODINGS = frozenset({
    EncodingTag.UTF8,
    EncodingTag.UTF16LE,
    EncodingTag.UTF16BE,
    EncodingTag.UTF32LE,
    EncodingTag.UTF32BE,
    EncodingTag.ISO2022_JP,
    EncodingTag.EUC_JP,
    EncodingTag.SHIFT_JIS,
})

# Stricter and regional codecs first; single-byte tables accept almost anything.
FALLBACK_CHAIN: Tuple[EncodingTag, ...] = (
    EncodingTag.ISO2022_JP,
    EncodingTag.EUC_JP,
    EncodingTag.SHIFT_JIS,
    EncodingTag.EUC_KR,
    EncodingTag.GB18030,
    EncodingTag.BIG5,
    EncodingTag.GB2312,
    EncodingTag.WINDOWS_1252,
    EncodingTag.MAC_ROMAN,
)

# Canonical codec names (codecs.lookup(...).name) reported by chardet.
_CODEC_ALIASES = {
    "ascii": EncodingTag.UTF8,
    "utf-8": EncodingTag.UTF8,
    "utf-16-be": EncodingTag.UTF16BE,
    "utf-16-le": EncodingTag.UTF16LE,
    "utf-32-be": EncodingTag.UTF32BE,
    "utf-32-le": EncodingTag.UTF32LE,
    "shift_jis": EncodingTag.SHIFT_JIS,
    "cp932": EncodingTag.SHIFT_JIS,
    "euc_jp": EncodingTag.EUC_JP,
    "iso2022_jp": EncodingTag.ISO2022_JP,
    "euc_kr": EncodingTag.EUC_KR,
    "cp949": EncodingTag.EUC_KR,
    "gb18030": EncodingTag.GB18030,
    "big5": EncodingTag.BIG5,
    "gb2312": EncodingTag.GB2312,
    "cp1252": EncodingTag.WINDOWS_1252,
    "mac-roman": EncodingTag.MAC_ROMAN,
}


def is_binary(data: bytes, sample_size: int = SAMPLE_SIZE, threshold: float = CONTROL_RATIO_THRESHOLD) -> bool:
    window = data[:sample_size]
    if not window:
        return False
    if 0 in window:
        return True
    suspicious = sum(1 for b in window if b < 0x20 and b not in ALLOWED_CONTROL_BYTES)
    return (suspicious / len(window)) > threshold


def detect_bom(data: bytes) -> Optional[Tuple[EncodingTag, int]]:
    """Return the encoding announced by a leading BOM and the BOM length."""
    for mark, tag in BOMS:
        if data.startswith(mark):
            return tag, len(mark)
    return None


def _sequence_length(lead: int) -> int:
    if lead <= 0x7F:
        return 1
    if lead & 0xE0 == 0xC0:
        return 2
    if lead & 0xF0 == 0xE0:
        return 3
    if lead & 0xF8 == 0xF0:
        return 4
    return 0


_MIN_CODE_POINT = {2: 0x80, 3: 0x800, 4: 0x10000}
_LEAD_MASK = {2: 0x1F, 3: 0x0F, 4: 0x07}


def is_valid_utf8(data: bytes) -> bool:
    """Structural UTF-8 check rejecting overlongs, surrogates and > U+10FFFF."""
    i = 0
    total = len(data)
    while i < total:
        lead = data[i]
        length = _sequence_length(lead)
        if length == 1:
            i += 1
            continue
        if length == 0 or i + length > total:
            return False
        code_point = lead & _LEAD_MASK[length]
        for j in range(1, length):
            cont = data[i + j]
            if cont & 0xC0 != 0x80:
                return False
            code_point = (code_point << 6) | (cont & 0x3F)
        if code_point < _MIN_CODE_POINT[length]:
            return False
        if 0xD800 <= code_point <= 0xDFFF or code_point > 0x10FFFF:
            return False
        i += length
    return True


def trim_truncated_utf8_tail(data: bytes) -> bytes:
    """Drop a multi-byte UTF-8 sequence cut short at the end of ``data``.

    Only applies when the bytes before the cut are valid UTF-8 holding at
    least one multi-byte sequence; anything else comes back unchanged.
    """
    end = len(data)
    i = end - 1
    while i >= 0 and end - i <= 4 and data[i] & 0xC0 == 0x80:
        i -= 1
    if i < 0 or end - i > 4:
        return data
    need = _sequence_length(data[i])
    if need < 2 or end - i >= need:
        return data
    prefix = data[:i]
    # an ASCII prefix gives no evidence the buffer is UTF-8
    if prefix.isascii() or _decode_strict(prefix, EncodingTag.UTF8) is None:
        return data
    return prefix


def tag_for_label(label: Optional[str]) -> Optional[EncodingTag]:
    if not label:
        return None
    try:
        name = codecs.lookup(label).name
    except LookupError:
        return None
    return _CODEC_ALIASES.get(name)


def _decode_strict(data: bytes, tag: EncodingTag) -> Optional[str]:
    try:
        return data.decode(tag.codec, errors="strict")
    except (UnicodeDecodeError, LookupError):
        return None


def decode_with_bom(data: bytes) -> Optional[DetectionResult]:
    hit = detect_bom(data)
    if hit is None:
        return None
    tag, length = hit
    text = _decode_strict(data[length:], tag)
    if text is None:
        logger.debug("BOM announced %s but the payload does not decode; continuing", tag.name)
        return None
    return DetectionResult(tag, text, bom_stripped=True, stage="bom")


def detect_statistically(
    data: bytes, suggested: Optional[Iterable[EncodingTag]] = None
) -> Optional[DetectionResult]:
    candidates = frozenset(suggested) if suggested is not None else DEFAULT_SUGGESTED_ENCODINGS
    guess = chardet.detect(data)
    label = guess.get("encoding")
    tag = tag_for_label(label)
    if tag is None or tag not in candidates:
        logger.debug("Statistical guess %r (confidence %s) not among candidates", label, guess.get("confidence"))
        return None
    text = _decode_strict(data, tag)
    if text is None:
        logger.debug("Statistical guess %s would be lossy; discarded", tag.name)
        return None
    return DetectionResult(tag, text, stage="statistical")


def decode_with_fallback_chain(
    data: bytes, chain: Sequence[EncodingTag] = FALLBACK_CHAIN
) -> Optional[DetectionResult]:
    for tag in chain:
        text = _decode_strict(data, tag)
        if text is not None:
            return DetectionResult(tag, text, stage="fallback")
    return None


def detect(
    data: bytes,
    suggested: Optional[Iterable[EncodingTag]] = None,
    fallback_chain: Sequence[EncodingTag] = FALLBACK_CHAIN,
) -> DetectionResult:
    """Decode ``data`` into text. Never fails; see the module docstring."""
    result = decode_with_bom(data)
    if result is None and is_valid_utf8(data):
        result = DetectionResult(EncodingTag.UTF8, data.decode("utf-8"), stage="utf8")
    if result is None:
        result = detect_statistically(data, suggested)
    if result is None:
        result = decode_with_fallback_chain(data, fallback_chain)
    if result is None:
        result = DetectionResult(EncodingTag.UTF8, data.decode("utf-8", errors="replace"), stage="lossy")
    logger.debug("Detected %s via %s stage (%d bytes)", result.encoding.name, result.stage, len(data))
    return result


def analyze(
    data: bytes,
    sample_size: int = SAMPLE_SIZE,
    suggested: Optional[Iterable[EncodingTag]] = None,
) -> AnalysisResult:
    if is_binary(data, sample_size=sample_size):
        return AnalysisResult(is_text=False, mime_type=BINARY_MIME_TYPE)
    return AnalysisResult(is_text=True, mime_type=TEXT_MIME_TYPE, detection=detect(data, suggested))
