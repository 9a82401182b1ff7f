from pathlib import Path

from linepeek.core.models import FormattingConfig, PreviewSettings
from linepeek.core.preview import PLAIN_MEDIA_TYPE
from linepeek.core.scanner import DirectoryRenderer
from linepeek.exporters.base import ExporterPlugin
from linepeek.exporters.rtf import RTFExporter

RICH = PreviewSettings(formatting=FormattingConfig(line_numbers_enabled=True, rtf_enabled=True))


class _Broken(ExporterPlugin):
    NAME = "broken"
    EXTENSION = "rtf"
    MEDIA_TYPE = "application/rtf"

    def serialize(self, document):
        raise ValueError("boom")


def _render(tmp_path: Path, exporter, settings=RICH):
    root = tmp_path / "src"
    root.mkdir()
    (root / "a.txt").write_text("one\ntwo\n", encoding="utf-8")
    out = tmp_path / "out"
    renderer = DirectoryRenderer(root, out, settings, exporter, ["*"], [], workers=1, show_progress=False)
    return renderer.render(), out


def test_export_failure_writes_plain_text_file(tmp_path: Path):
    entries, out = _render(tmp_path, _Broken())
    [entry] = entries
    assert entry.status == "rendered"
    assert entry.used_fallback
    assert entry.media_type == PLAIN_MEDIA_TYPE
    assert Path(entry.output) == out / "a.txt.txt"
    assert (out / "a.txt.txt").read_text(encoding="utf-8") == "0001 one\n0002 two\n"
    assert not (out / "a.txt.rtf").exists()


def test_rich_text_uses_exporter_extension(tmp_path: Path):
    entries, out = _render(tmp_path, RTFExporter())
    [entry] = entries
    assert not entry.used_fallback
    assert Path(entry.output) == out / "a.txt.rtf"
    assert (out / "a.txt.rtf").read_bytes().startswith(b"{\\rtf1")


def test_plain_settings_write_txt(tmp_path: Path):
    entries, out = _render(tmp_path, RTFExporter(), settings=PreviewSettings())
    assert Path(entries[0].output) == out / "a.txt.txt"
