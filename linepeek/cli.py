import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .core.config import clamp_max_file_size, default_settings, load_settings
from .core.encoding import analyze, trim_truncated_utf8_tail
from .core.errors import ConfigError, NotTextError, UnreadableInputError, UnsupportedFileError
from .core.fonts import available_monospaced_fonts
from .core.loader import discover_exporter_plugins, select_exporter
from .core.models import PreviewSettings
from .core.preview import preview_file
from .core.reporting import Reporter
from .core.scanner import DirectoryRenderer, configure_logging
from .core.utils import read_sample

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_NOT_TEXT = 3


def _add_formatting_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--settings", type=Path, default=None, help="JSON settings file (preview extension keys).")
    p.add_argument("--line-numbers", action=argparse.BooleanOptionalAction, default=None, help="Prefix every line with a zero-padded number.")
    p.add_argument("--separator", default=None, help="Separator after the number: space, tab, colon, pipe or any literal.")
    p.add_argument("--rtf", action=argparse.BooleanOptionalAction, default=None, help="Render styled rich text instead of plain text.")
    p.add_argument("--format", default="rtf", help="Rich text exporter to use when --rtf is on (e.g. 'rtf', 'html').")
    p.add_argument("--dark", action="store_true", help="Use the dark appearance content colors.")
    p.add_argument("--max-file-size", type=int, default=None, help="Max bytes to read (clamped to 100KB..10MB).")
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="linepeek",
        description="Decode text of unknown encoding and render a line-numbered, optionally styled preview.",
    )
    sub = p.add_subparsers(dest="mode", required=True)

    # file mode
    f = sub.add_parser("file", help="Render a preview of a single file.")
    f.add_argument("path", type=Path, help="File to preview.")
    f.add_argument("--out", type=Path, default=None, help="Write the preview here instead of stdout.")
    _add_formatting_args(f)

    # dir mode
    d = sub.add_parser("dir", help="Render previews for every file under a directory.")
    d.add_argument("path", type=Path, help="Directory to walk recursively.")
    d.add_argument("--out", type=Path, default=Path("./preview_output"), help="Output directory.")
    d.add_argument("--workers", type=int, default=8, help="Number of worker threads.")
    d.add_argument("--include", default="*", help="Glob(s) to include, comma-separated.")
    d.add_argument("--exclude", default=".git,.venv,node_modules,venv,.tox,.mypy_cache,.pytest_cache,__pycache__", help="Dir names to exclude, comma-separated.")
    d.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    _add_formatting_args(d)

    # detect mode
    e = sub.add_parser("detect", help="Report text/binary classification and detected encoding as JSON.")
    e.add_argument("path", type=Path, help="File to inspect.")
    e.add_argument("--max-file-size", type=int, default=None, help="Max bytes to read (clamped to 100KB..10MB).")
    e.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")

    # fonts mode
    sub.add_parser("fonts", help="List the monospaced fonts known to the renderer.")

    return p


def _settings_from_args(args: argparse.Namespace) -> PreviewSettings:
    dark = bool(getattr(args, "dark", False))
    settings = load_settings(args.settings, dark_mode=dark) if getattr(args, "settings", None) else default_settings(dark)
    formatting = settings.formatting
    if getattr(args, "line_numbers", None) is not None:
        formatting = replace(formatting, line_numbers_enabled=args.line_numbers)
    if getattr(args, "separator", None) is not None:
        formatting = replace(formatting, separator=args.separator)
    if getattr(args, "rtf", None) is not None:
        formatting = replace(formatting, rtf_enabled=args.rtf)
    settings = replace(settings, formatting=formatting)
    if args.max_file_size is not None:
        settings = replace(settings, max_file_size=clamp_max_file_size(args.max_file_size))
    return settings


def _load_or_exit(args: argparse.Namespace) -> Optional[PreviewSettings]:
    try:
        return _settings_from_args(args)
    except (FileNotFoundError, ConfigError) as exc:
        print(f"Invalid settings: {exc}", file=sys.stderr)
        return None


def run_file(args: argparse.Namespace) -> int:
    configure_logging(verbose=args.verbose)
    settings = _load_or_exit(args)
    if settings is None:
        return EXIT_USAGE
    exporter = select_exporter(discover_exporter_plugins(), args.format)
    if exporter is None:
        print(f"Unknown format '{args.format}'.", file=sys.stderr)
        return EXIT_USAGE

    try:
        preview = preview_file(args.path, settings, exporter)
    except NotTextError:
        print(f"Not a text file: {args.path}", file=sys.stderr)
        return EXIT_NOT_TEXT
    except (UnreadableInputError, UnsupportedFileError) as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_USAGE

    if args.out:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_bytes(preview.data)
    else:
        sys.stdout.buffer.write(preview.data)
        sys.stdout.buffer.flush()
    return EXIT_OK


def run_dir(args: argparse.Namespace) -> int:
    logger = configure_logging(verbose=args.verbose)
    settings = _load_or_exit(args)
    if settings is None:
        return EXIT_USAGE
    exporter = select_exporter(discover_exporter_plugins(), args.format)
    if exporter is None:
        print(f"Unknown format '{args.format}'.", file=sys.stderr)
        return EXIT_USAGE
    if not args.path.is_dir():
        print(f"Not a directory: {args.path}", file=sys.stderr)
        return EXIT_USAGE

    out_dir = args.out
    out_dir.mkdir(parents=True, exist_ok=True)
    renderer = DirectoryRenderer(
        root=args.path,
        out_dir=out_dir,
        settings=settings,
        exporter=exporter,
        include_globs=[g.strip() for g in args.include.split(",") if g.strip()],
        exclude_dirs=[e.strip() for e in args.exclude.split(",") if e.strip()],
        workers=args.workers,
        logger=logger,
        verbose=args.verbose,
        show_progress=not args.no_progress,
    )
    entries = renderer.render()
    Reporter(out_dir).write_all(entries)
    return EXIT_OK


def run_detect(args: argparse.Namespace) -> int:
    configure_logging(verbose=args.verbose)
    max_bytes = clamp_max_file_size(args.max_file_size) if args.max_file_size is not None else PreviewSettings().max_file_size
    try:
        data, truncated = read_sample(args.path, max_bytes)
    except UnreadableInputError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_USAGE
    if truncated:
        data = trim_truncated_utf8_tail(data)
    analysis = analyze(data)
    detection = analysis.detection
    payload = {
        "path": str(args.path),
        "bytes": len(data),
        "truncated": truncated,
        "is_text": analysis.is_text,
        "mime_type": analysis.mime_type,
        "encoding": detection.encoding.name if detection else None,
        "codec": detection.encoding.codec if detection else None,
        "stage": detection.stage if detection else None,
        "bom_stripped": detection.bom_stripped if detection else False,
    }
    print(json.dumps(payload, indent=2))
    return EXIT_OK


def run_fonts(args: argparse.Namespace) -> int:
    for name in available_monospaced_fonts():
        print(name)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.mode == "file":
        return run_file(args)
    elif args.mode == "dir":
        return run_dir(args)
    elif args.mode == "detect":
        return run_detect(args)
    elif args.mode == "fonts":
        return run_fonts(args)
    else:
        parser.print_help()
        return EXIT_USAGE


if __name__ == "__main__":
    raise SystemExit(main())
