from __future__ import annotations

import fnmatch
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterator, List, Optional

from tqdm import tqdm

from .errors import LinepeekError, NotTextError, UnsupportedFileError
from .models import IndexEntry, Preview, PreviewSettings
from .preview import PLAIN_MEDIA_TYPE, preview_file
from .utils import DEFAULT_LOGGER_NAME
from ..exporters.base import ExporterPlugin
from ..exporters.rtf import RTFExporter


SLOW_RENDER_THRESHOLD_SECONDS = 2.0


def configure_logging(verbose: bool = False, logger_name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Configure and return the project logger.

    This helper ensures linepeek has a configured logger even in script usage
    where ``logging.basicConfig`` was not called. ``verbose`` raises the level
    to INFO.
    """

    logger = logging.getLogger(logger_name)
    level = logging.INFO if verbose else logging.WARNING
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s")
        )
        logger.addHandler(handler)

    return logger


class DirectoryRenderer:
    def __init__(
        self,
        root: Path,
        out_dir: Path,
        settings: PreviewSettings,
        exporter: Optional[ExporterPlugin],
        include_globs: List[str],
        exclude_dirs: List[str],
        workers: int = 8,
        *,
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
        show_progress: bool = True,
        progress_desc: str = "Rendering files",
    ) -> None:
        self.root = root
        self.out_dir = out_dir
        self.settings = settings
        self.exporter = exporter
        self.include_globs = include_globs or ["*"]
        self.exclude_dirs = set(exclude_dirs)
        self.workers = workers
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self.verbose = verbose
        if verbose:
            self.logger.setLevel(logging.INFO)
        self.show_progress = bool(show_progress)
        self.progress_desc = progress_desc
        self.entries: List[IndexEntry] = []
        self._entries_lock = threading.Lock()
        self._slow_log_threshold = SLOW_RENDER_THRESHOLD_SECONDS

    def _iter_files(self) -> Iterator[Path]:
        for p in sorted(self.root.rglob("*")):
            if p.is_dir():
                continue
            rel_parts = p.relative_to(self.root).parts[:-1]
            if any(part in self.exclude_dirs for part in rel_parts):
                continue
            if any(fnmatch.fnmatch(p.name, pat) for pat in self.include_globs):
                yield p

    def _output_path(self, path: Path, preview: Preview) -> Path:
        rel = path.relative_to(self.root)
        # plain output, including rich text that fell back, is always .txt
        if preview.media_type == PLAIN_MEDIA_TYPE:
            ext = "txt"
        else:
            ext = (self.exporter or RTFExporter()).EXTENSION
        return self.out_dir / rel.parent / f"{rel.name}.{ext}"

    def _record(self, entry: IndexEntry) -> None:
        with self._entries_lock:
            self.entries.append(entry)

    def render(self) -> List[IndexEntry]:
        files = list(self._iter_files())
        total_files = len(files)

        if self.verbose:
            self.logger.info("Discovered %d file(s) to render", total_files)

        if not total_files:
            return []

        progress_bar = None
        if self.show_progress:
            progress_bar = tqdm(total=total_files, desc=self.progress_desc, unit="file")

        executor = ThreadPoolExecutor(max_workers=self.workers)
        try:
            futures = {executor.submit(self._render_file, path): path for path in files}
            for future in as_completed(futures):
                path = futures[future]
                try:
                    future.result()
                except Exception as exc:
                    if self.verbose:
                        self.logger.exception("Error rendering %s", path)
                    else:
                        self.logger.warning("Error rendering %s: %s", path, exc)
                    self._record(IndexEntry(str(path), "error", meta={"error": str(exc)}))
                finally:
                    if progress_bar is not None:
                        progress_bar.update(1)
        except KeyboardInterrupt:
            if self.verbose:
                self.logger.info("Rendering interrupted by user; shutting down workers")
            raise
        finally:
            executor.shutdown(wait=True, cancel_futures=True)
            if progress_bar is not None:
                progress_bar.close()

        self.entries.sort(key=lambda e: e.file_location)
        return self.entries

    def _render_file(self, path: Path) -> None:
        start_time = time.perf_counter()
        try:
            preview = preview_file(path, self.settings, self.exporter)
        except UnsupportedFileError:
            self._record(IndexEntry(str(path), "skipped"))
            return
        except NotTextError:
            self._record(IndexEntry(str(path), "binary"))
            return
        except LinepeekError as exc:
            self.logger.warning("Cannot render %s: %s", path, exc)
            self._record(IndexEntry(str(path), "error", meta={"error": str(exc)}))
            return

        out_path = self._output_path(path, preview)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(preview.data)
        self._record(
            IndexEntry(
                file_location=str(path),
                status="rendered",
                output=str(out_path),
                encoding=preview.encoding.name if preview.encoding else None,
                media_type=preview.media_type,
                truncated=preview.truncated,
                used_fallback=preview.used_fallback,
                meta={"notes": list(preview.notes)} if preview.notes else {},
            )
        )
        self._maybe_log_slow_file(path, time.perf_counter() - start_time, len(preview.data))

    def _maybe_log_slow_file(self, path: Path, duration: float, output_size: int) -> None:
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        if duration < self._slow_log_threshold:
            return
        self.logger.debug(
            "Slow render for %s took %.2fs (output=%s bytes)",
            path,
            duration,
            f"{output_size:,}",
        )
