from __future__ import annotations
import logging
from pathlib import Path
from typing import Tuple

from .errors import UnreadableInputError

DEFAULT_LOGGER_NAME = "linepeek"
SAMPLE_SIZE = 8192  # bytes inspected by the binary classifier
IGNORED_FILE_NAMES = frozenset({".DS_Store"})


def get_logger(component: str) -> logging.Logger:
    return logging.getLogger(DEFAULT_LOGGER_NAME).getChild(component)


def read_sample(path: Path, max_bytes: int) -> Tuple[bytes, bool]:
    """Read at most ``max_bytes`` from ``path``.

    Returns the bytes and whether the file held more than was read.
    """
    try:
        with path.open("rb") as f:
            data = f.read(max_bytes)
            truncated = bool(f.read(1))
    except OSError as exc:
        raise UnreadableInputError(f"Cannot read {path}: {exc}") from exc
    return data, truncated
