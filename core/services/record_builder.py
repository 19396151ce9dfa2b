"""Pure helpers that assemble `PhotoRecord` entries from scan results."""

from __future__ import annotations

import re
from pathlib import PurePosixPath

from core.models import ExifInfo, ExtractedMetadata, PhotoRecord
from core.services.interfaces import DecodedImage

_SEPARATOR_RX = re.compile(r"[-_]")


def web_safe_name(file_name: str) -> str:
    """Replace undecodable bytes (surrogate escapes) in `file_name` with U+FFFD."""
    return file_name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def stem_of(file_name: str) -> str:
    """Return `file_name` without its last extension."""
    return PurePosixPath(file_name).stem


def alt_text(file_name: str) -> str:
    """Derive alt text: drop the extension and turn each `-`/`_` into a space."""
    return _SEPARATOR_RX.sub(" ", stem_of(file_name))


def webp_name(file_name: str) -> str:
    """Name of the WebP derivative generated for `file_name`."""
    return f"{stem_of(file_name)}.webp"


def join_web_path(web_root: str, *parts: str) -> str:
    """Join URL path segments with single slashes."""
    segments = [web_root.rstrip("/")] + [p.strip("/") for p in parts]
    return "/".join(segments)


def _exif_info(decoded: DecodedImage) -> ExifInfo:
    return ExifInfo(width=decoded.width, height=decoded.height)


def build_single_record(
    file_name: str, src: str, decoded: DecodedImage, meta: ExtractedMetadata
) -> PhotoRecord:
    """Build a record for the single-size variant."""
    return PhotoRecord(
        src=src,
        alt=alt_text(file_name),
        date=meta.date,
        camera=meta.camera,
        exif=_exif_info(decoded),
    )


def build_derivative_record(
    file_name: str,
    thumb: str,
    display: str,
    decoded: DecodedImage,
    meta: ExtractedMetadata,
) -> PhotoRecord:
    """Build a record for the thumbnail + display variant."""
    return PhotoRecord(
        thumb=thumb,
        display=display,
        alt=alt_text(file_name),
        date=meta.date,
        camera=meta.camera,
        exif=_exif_info(decoded),
    )
