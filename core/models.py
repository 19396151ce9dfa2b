"""Core domain models for photo records and their sidecar serialization."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ExifInfo:
    """Exposure fields and source dimensions nested under `exif`."""

    focal_length: str = ""
    aperture: str = ""
    iso: int | None = None
    shutter: str = ""
    # Always the decoded source, never a derivative
    width: int | None = None
    height: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape; `width`/`height` are omitted when unknown."""
        data: dict[str, Any] = {
            "focalLength": self.focal_length,
            "aperture": self.aperture,
            "iso": self.iso,
            "shutter": self.shutter,
        }
        if self.width is not None:
            data["width"] = self.width
        if self.height is not None:
            data["height"] = self.height
        return data


@dataclass
class ExtractedMetadata:
    """Best-effort result of scanning a raw EXIF buffer."""

    date: str = ""
    camera: str = ""


@dataclass
class PhotoRecord:
    """A single photo entry of the sidecar collection.

    Exactly one of the two reference shapes is populated: `src` for the
    single-size variant, `thumb` and `display` for the derivatives variant.
    """

    alt: str
    src: str | None = None
    thumb: str | None = None
    display: str | None = None
    caption: str = ""
    date: str = ""
    camera: str = ""
    tags: list[str] = field(default_factory=list)
    exif: ExifInfo = field(default_factory=ExifInfo)

    @property
    def primary_reference(self) -> str:
        """Path used to order undated records."""
        return self.src if self.src is not None else (self.thumb or "")

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object for this record with stable key order."""
        data: dict[str, Any] = {}
        if self.src is not None:
            data["src"] = self.src
        else:
            data["thumb"] = self.thumb or ""
            data["display"] = self.display or ""
        data.update(
            {
                "alt": self.alt,
                "caption": self.caption,
                "date": self.date,
                "camera": self.camera,
                "tags": list(self.tags),
                "exif": self.exif.to_dict(),
            }
        )
        return data
