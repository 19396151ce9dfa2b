"""Byte-size formatting helpers for progress and summary output."""

from __future__ import annotations

import math
import os
from pathlib import Path


def format_bytes(size: int) -> str:
    """Format a byte count as `B`, whole `KB`, or `MB` with one decimal."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.0f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def percent_smaller(original: int, produced: int) -> int:
    """Whole-number percentage saved going from `original` to `produced`."""
    if original <= 0:
        return 0
    # Halves round up
    return math.floor((original - produced) / original * 100 + 0.5)


def file_size(path: str | Path) -> int:
    """Size of `path` in bytes, or 0 when it cannot be read."""
    try:
        return int(os.path.getsize(path))
    except OSError:
        return 0
