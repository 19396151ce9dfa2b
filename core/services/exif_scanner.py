"""Heuristic EXIF scanner working on the raw metadata buffer.

The buffer is not parsed as a TIFF/IFD tag table. Instead it is decoded one
byte per character and searched with regular expressions for the EXIF
date-time format and for known manufacturer strings followed by a
NUL-terminated model name. The first manufacturer pattern that matches wins,
so the result can miss valid EXIF or pick up an unrelated manufacturer
string; callers get empty values rather than errors.
"""

from __future__ import annotations

import re

from loguru import logger

from core.models import ExtractedMetadata

_DATE_RX = re.compile(r"(\d{4}):(\d{2}):(\d{2}) \d{2}:\d{2}:\d{2}", re.ASCII)

# Priority order matters: the first pattern that matches is used.
MAKE_MODEL_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"SONY\0([^\0]+)"),
    re.compile(r"Canon\0([^\0]+)"),
    re.compile(r"NIKON[^\0]*\0([^\0]+)"),
    re.compile(r"FUJIFILM\0([^\0]+)"),
    re.compile(r"Panasonic\0([^\0]+)"),
    re.compile(r"OLYMPUS[^\0]*\0([^\0]+)"),
    re.compile(r"RICOH[^\0]*\0([^\0]+)"),
    re.compile(r"LEICA[^\0]*\0([^\0]+)"),
    re.compile(r"Apple\0([^\0]+)"),
    re.compile(r"samsung\0([^\0]+)", re.IGNORECASE),
    re.compile(r"Google\0([^\0]+)"),
]

_MAKE_RX = re.compile(
    r"(SONY|Canon|NIKON|FUJIFILM|Panasonic|OLYMPUS|RICOH|LEICA|Apple|samsung|Google)",
    re.IGNORECASE,
)


def scan_exif(buffer: bytes | None) -> ExtractedMetadata:
    """Extract capture date and camera from a raw EXIF buffer.

    Args:
        buffer: Raw EXIF bytes as reported by the decoder, or None.

    Returns:
        ExtractedMetadata with `date` as `YYYY-MM-DD` and `camera` as
        "Make Model"; each is an empty string when not detected.
    """
    result = ExtractedMetadata()
    if not buffer:
        return result

    try:
        text = bytes(buffer).decode("latin-1")

        date_match = _DATE_RX.search(text)
        if date_match:
            result.date = f"{date_match.group(1)}-{date_match.group(2)}-{date_match.group(3)}"

        for pattern in MAKE_MODEL_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue
            model = match.group(1).strip()
            make = _MAKE_RX.search(text)
            result.camera = f"{make.group(1)} {model}" if make else model
            break
    except Exception as ex:  # pylint: disable=broad-exception-caught
        logger.debug("EXIF scan failed: {}", ex)

    return result
