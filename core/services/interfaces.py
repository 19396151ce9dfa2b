"""Core service interfaces and shared data structures.

This module defines the imaging capability the pipeline consumes and the
simple dataclasses exchanged between the infrastructure and the batch layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from core.models import PhotoRecord


@dataclass
class DecodedImage:
    """Metadata reported by the decoder for a source image.

    Attributes:
        width: Pixel width, or None when the decoder did not report it.
        height: Pixel height, or None when the decoder did not report it.
        density: Pixel density (DPI) when embedded in the file.
        exif: Raw EXIF byte buffer, if present.
    """

    width: int | None
    height: int | None
    density: float | None = None
    exif: bytes | None = None


@dataclass
class EncodedDerivative:
    """A resized, re-encoded copy written to disk.

    Attributes:
        path: Destination file path.
        width: Pixel width of the derivative.
        height: Pixel height of the derivative.
        size_bytes: Size of the written file.
    """

    path: Path
    width: int
    height: int
    size_bytes: int


@dataclass
class ResizeTarget:
    """Target width and encoder quality for one derivative size."""

    width: int
    quality: int


@dataclass
class BatchSummary:
    """Aggregate byte totals for one run.

    Attributes:
        original_bytes: Sizes of every eligible source file, failed ones included.
        thumb_bytes: Thumbnails written (derivatives variant).
        display_bytes: Display copies written (derivatives variant).
        single_bytes: Single-size copies written (single variant).
    """

    original_bytes: int = 0
    thumb_bytes: int = 0
    display_bytes: int = 0
    single_bytes: int = 0


@dataclass
class BatchResult:
    """Outcome of a batch run.

    Attributes:
        records: Records in their final sorted order.
        failed: Tuples of (file name, reason) for skipped files.
        output_file: Path of the written JSON file.
        summary: Byte totals, None when the run ended early.
    """

    records: list[PhotoRecord]
    failed: list[tuple[str, str]] = field(default_factory=list)
    output_file: Path | None = None
    summary: BatchSummary | None = None


class IImageService(Protocol):
    """Decode/resize/encode capability supplied by an imaging library."""

    def decode_metadata(self, path: str | Path) -> DecodedImage:
        """Return dimensions, density and raw EXIF for `path`."""
        raise NotImplementedError

    def resize_and_encode(
        self,
        path: str | Path,
        dest: str | Path,
        target: ResizeTarget,
        image_format: str = "WEBP",
    ) -> EncodedDerivative:
        """Write a copy of `path` scaled to `target` (never upscaled) to `dest`."""
        raise NotImplementedError
