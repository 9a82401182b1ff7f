import pytest

from linepeek.core.errors import RichTextExportError
from linepeek.core.loader import discover_exporter_plugins, select_exporter
from linepeek.core.models import FormattingConfig
from linepeek.core.styling import build_document
from linepeek.exporters.base import ExporterPlugin
from linepeek.exporters.html import HTMLExporter
from linepeek.exporters.rtf import RTFExporter

NUMBERED = FormattingConfig(line_numbers_enabled=True, separator="tab", rtf_enabled=True)


def test_discovery_finds_builtin_exporters():
    plugins = discover_exporter_plugins()
    assert {"rtf", "html"} <= set(plugins)
    assert "base" not in plugins
    assert isinstance(select_exporter(plugins, "RTF"), RTFExporter)
    assert isinstance(select_exporter(plugins, None), RTFExporter)
    assert select_exporter(plugins, "docx") is None


def test_rtf_document_structure():
    rtf = RTFExporter().export(build_document("first\nsecond\n", NUMBERED)).decode("ascii")
    assert rtf.startswith("{\\rtf1\\ansi")
    assert rtf.endswith("}")
    assert "{\\fonttbl\\f0\\fmodern\\fcharset0 Menlo;}" in rtf
    assert "\\red128\\green128\\blue128;" in rtf
    assert "\\deftab" in rtf
    assert "\\tx" in rtf
    assert "0001}" in rtf and "0002}" in rtf
    assert "\\tab " in rtf
    assert rtf.count("\\par\n") == 2
    assert "\\fs22" in rtf


def test_rtf_escapes_text():
    rtf = RTFExporter().export(build_document("{x}\\ é \U0001F600", NUMBERED)).decode("ascii")
    assert "\\{x\\}\\\\" in rtf
    assert "\\u233?" in rtf
    assert "\\u-10179?\\u-8704?" in rtf


def test_html_export():
    page = HTMLExporter().export(build_document("<a>\nb", NUMBERED)).decode("utf-8")
    assert "<pre>" in page
    assert "&lt;a&gt;" in page
    assert "color:#808080" in page
    assert "tab-size:" in page
    assert "display:inline-block" in page


class _Broken(ExporterPlugin):
    NAME = "broken"

    def serialize(self, document):
        raise ValueError("boom")


def test_export_failures_are_reported_as_rich_text_errors():
    with pytest.raises(RichTextExportError):
        _Broken().export(build_document("a", NUMBERED))
