"""Source directory scanning."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from loguru import logger

DEFAULT_EXTENSIONS: tuple[str, ...] = (".jpg", ".jpeg", ".png", ".webp", ".tiff")


def list_source_images(
    source_dir: str | Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS
) -> list[str]:
    """Return eligible image file names in `source_dir`, sorted by name.

    Only top-level regular files are considered; the extension check is
    case-insensitive.
    """
    allowed = {ext.lower() for ext in extensions}
    names: list[str] = []
    for entry in Path(source_dir).iterdir():
        if not entry.is_file():
            logger.debug("Skipping non-file entry: {}", entry.name)
            continue
        if entry.suffix.lower() not in allowed:
            logger.debug("Skipping unsupported extension: {}", entry.name)
            continue
        names.append(entry.name)
    names.sort()
    return names
