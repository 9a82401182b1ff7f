from __future__ import annotations
from pathlib import Path
from typing import NamedTuple, Optional

from .encoding import BINARY_MIME_TYPE, analyze, trim_truncated_utf8_tail
from .errors import NotTextError, RichTextExportError, UnsupportedFileError
from .lines import format_lines
from .models import FormattingConfig, Preview, PreviewSettings
from .styling import build_document
from .utils import IGNORED_FILE_NAMES, get_logger, read_sample
from ..exporters.base import ExporterPlugin
from ..exporters.rtf import RTFExporter

logger = get_logger("preview")

PLAIN_MEDIA_TYPE = "text/plain; charset=utf-8"


class Rendered(NamedTuple):
    data: bytes
    media_type: str
    used_fallback: bool = False


def render_text(text: str, config: FormattingConfig, exporter: Optional[ExporterPlugin] = None) -> Rendered:
    """Render decoded text as plain (optionally numbered) text or rich text.

    Rich text goes through ``exporter``; if it fails, the plain path is used.
    """
    if config.rtf_enabled:
        exporter = exporter or RTFExporter()
        document = build_document(text, config)
        try:
            return Rendered(exporter.export(document), exporter.MEDIA_TYPE)
        except RichTextExportError as exc:
            logger.warning("Rich text export failed (%s); falling back to plain text", exc)
            return Rendered(format_lines(text, config).text.encode("utf-8"), PLAIN_MEDIA_TYPE, True)
    return Rendered(format_lines(text, config).text.encode("utf-8"), PLAIN_MEDIA_TYPE)


def preview_bytes(
    data: bytes,
    settings: Optional[PreviewSettings] = None,
    exporter: Optional[ExporterPlugin] = None,
    *,
    truncated: bool = False,
    source: Optional[Path] = None,
) -> Preview:
    settings = settings or PreviewSettings()
    if truncated:
        data = trim_truncated_utf8_tail(data)

    analysis = analyze(data)
    if not analysis.is_text or analysis.detection is None:
        return Preview(data=b"", media_type=BINARY_MIME_TYPE, is_text=False, truncated=truncated, source=source)

    detection = analysis.detection
    rendered = render_text(detection.text, settings.formatting, exporter)
    preview = Preview(
        data=rendered.data,
        media_type=rendered.media_type,
        encoding=detection.encoding,
        truncated=truncated,
        used_fallback=rendered.used_fallback,
        source=source,
    )
    if detection.lossy:
        preview.notes.append("invalid byte sequences replaced")
    if truncated:
        preview.notes.append(f"truncated to {settings.max_file_size} bytes")
    return preview


def preview_file(
    path: Path,
    settings: Optional[PreviewSettings] = None,
    exporter: Optional[ExporterPlugin] = None,
) -> Preview:
    """Read up to ``settings.max_file_size`` bytes of ``path`` and render them.

    Raises UnsupportedFileError for ignored names, UnreadableInputError when
    the file cannot be read and NotTextError when it looks binary.
    """
    settings = settings or PreviewSettings()
    if path.name in IGNORED_FILE_NAMES:
        raise UnsupportedFileError(f"Ignored file: {path}")
    data, truncated = read_sample(path, settings.max_file_size)
    preview = preview_bytes(data, settings, exporter, truncated=truncated, source=path)
    if not preview.is_text:
        raise NotTextError(f"Not a text file: {path}")
    logger.info(
        "Rendered %s as %s (%s%s)",
        path,
        preview.media_type,
        preview.encoding.name if preview.encoding else "unknown",
        ", truncated" if truncated else "",
    )
    return preview
