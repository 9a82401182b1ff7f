import json
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def run_cli(args, cwd=PROJECT_ROOT, env=None, timeout=60):
    """
    Run the CLI as a subprocess: python -m linepeek.cli <args>
    Returns CompletedProcess with stdout/stderr text captured.
    """
    cmd = [sys.executable, "-m", "linepeek.cli"] + list(map(str, args))
    return subprocess.run(cmd, cwd=cwd, env=env, capture_output=True, text=True, encoding="utf-8", timeout=timeout)


@pytest.fixture()
def dataset_dir(tmp_path: Path) -> Path:
    """
    Build a small mixed tree of text and binary files.
    """
    root = tmp_path / "dataset"
    (root / "nested").mkdir(parents=True)
    (root / "__pycache__").mkdir()
    (root / "hello.txt").write_text("hello\nworld\n", encoding="utf-8")
    (root / "latin1.txt").write_bytes(b"caf\xe9 cr\xe8me\n")
    (root / "nested" / "bom16.txt").write_bytes(b"\xff\xfe" + "hi".encode("utf-16-le"))
    (root / "blob.bin").write_bytes(bytes(range(256)))
    (root / "__pycache__" / "skip.txt").write_text("excluded\n")
    return root


@pytest.fixture()
def out_dir(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir(parents=True, exist_ok=True)
    return d


def load_json(p: Path):
    with p.open("r") as f:
        return json.load(f)


def assert_exit_ok(proc):
    assert proc.returncode == 0, f"Non-zero exit:\nSTDOUT:\n{proc.stdout}\nSTDERR:\n{proc.stderr}"


def assert_file(p: Path):
    assert p.exists(), f"Expected file missing: {p}"
    return p
