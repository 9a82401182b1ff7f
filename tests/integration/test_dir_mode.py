from pathlib import Path

from .conftest import run_cli, load_json, assert_exit_ok, assert_file


def test_dir_mode_renders_tree_and_writes_index(dataset_dir: Path, out_dir: Path):
    proc = run_cli(["dir", dataset_dir, "--out", out_dir, "--line-numbers", "--no-progress"])
    assert_exit_ok(proc)

    assert_file(out_dir / "summary.md")
    index = load_json(assert_file(out_dir / "index.json"))
    by_name = {Path(item["file_location"]).name: item for item in index}

    assert by_name["hello.txt"]["status"] == "rendered"
    assert by_name["hello.txt"]["encoding"] == "UTF8"
    assert by_name["blob.bin"]["status"] == "binary"
    assert by_name["bom16.txt"]["status"] == "binary"
    assert "skip.txt" not in by_name

    rendered = assert_file(out_dir / "hello.txt.txt").read_text(encoding="utf-8")
    assert rendered == "0001 hello\n0002 world\n"


def test_dir_mode_html_export(dataset_dir: Path, out_dir: Path):
    proc = run_cli(["dir", dataset_dir, "--out", out_dir, "--rtf", "--format", "html", "--include", "*.txt", "--no-progress"])
    assert_exit_ok(proc)
    page = assert_file(out_dir / "hello.txt.html").read_text(encoding="utf-8")
    assert "<pre>" in page
    index = load_json(out_dir / "index.json")
    assert all(Path(item["file_location"]).suffix == ".txt" for item in index)
