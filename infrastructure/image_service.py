"""Image decoding, resizing, and WebP encoding via Pillow.

Registers the pillow-heif opener so HEIC/HEIF sources decode like any other
Pillow format when they are allowed by the scanner.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from PIL import Image
from pillow_heif import register_heif_opener

from core.services.interfaces import DecodedImage, EncodedDerivative, ResizeTarget

register_heif_opener()

_ALPHA_MODES = {"RGBA", "LA", "PA", "RGBa", "La"}


def _ensure_dir(p: Path) -> None:
    """Create directory `p` if missing (including parents)."""
    p.mkdir(parents=True, exist_ok=True)


def _density(info: dict) -> float | None:
    """Return horizontal DPI from Pillow's `info` dict, when present."""
    dpi = info.get("dpi")
    if not dpi:
        return None
    try:
        return float(dpi[0])
    except (TypeError, ValueError, IndexError):
        return None


def _raw_exif(im: Image.Image) -> bytes | None:
    """Return the raw EXIF block, falling back to re-serialising parsed tags."""
    raw = im.info.get("exif")
    if raw:
        return bytes(raw)
    exif = im.getexif()
    if exif:
        return exif.tobytes()
    return None


def _prepare_for_webp(im: Image.Image) -> Image.Image:
    """Normalise mode so the WebP encoder accepts it."""
    has_alpha = im.mode in _ALPHA_MODES or (
        im.mode == "P" and "transparency" in im.info
    )
    target = "RGBA" if has_alpha else "RGB"
    if im.mode != target:
        im = im.convert(target)
    return im


class ImageService:
    """Pillow-backed implementation of the imaging capability."""

    def __init__(self, resample: Image.Resampling = Image.Resampling.LANCZOS) -> None:
        self._resample = resample

    def decode_metadata(self, path: str | Path) -> DecodedImage:
        """Open `path` and report size, density, and raw EXIF.

        Raises:
            PIL.UnidentifiedImageError: The file is not a decodable image.
            OSError: The file cannot be read.
        """
        with Image.open(path) as im:
            # Force a full decode so truncated or corrupt files fail here
            im.load()
            width, height = im.size
            decoded = DecodedImage(
                width=int(width),
                height=int(height),
                density=_density(im.info),
                exif=_raw_exif(im),
            )
        logger.debug(
            "Decoded {}: {}x{} dpi={}", path, decoded.width, decoded.height, decoded.density
        )
        return decoded

    def resize_and_encode(
        self,
        path: str | Path,
        dest: str | Path,
        target: ResizeTarget,
        image_format: str = "WEBP",
    ) -> EncodedDerivative:
        """Write a copy of `path` no wider than `target.width` to `dest`.

        The aspect ratio is preserved and images narrower than the target keep
        their original size.
        """
        dest_path = Path(dest)
        _ensure_dir(dest_path.parent)
        with Image.open(path) as im:
            im.load()
            width, height = im.size
            if width > target.width:
                new_height = max(1, round(height * target.width / width))
                out = im.resize((target.width, new_height), self._resample)
            else:
                out = im.copy()
            out = _prepare_for_webp(out)
            out.save(dest_path, format=image_format, quality=int(target.quality), method=6)
            out_width, out_height = out.size
        return EncodedDerivative(
            path=dest_path,
            width=int(out_width),
            height=int(out_height),
            size_bytes=dest_path.stat().st_size,
        )
