"""JSON persistence for the photo sidecar collection.

The file is always rewritten in full: records are regenerated from the
source directory on every run and nothing from a previous file is carried
over.
"""

from __future__ import annotations

from collections.abc import Iterable
import json
from pathlib import Path

from loguru import logger

from core.models import PhotoRecord


class JsonPhotoRepository:
    """Save photo records as a pretty-printed JSON array."""

    def __init__(self, indent: int = 2) -> None:
        self._indent = indent

    def dumps(self, records: Iterable[PhotoRecord]) -> str:
        """Serialize `records` in order to a JSON string."""
        payload = [record.to_dict() for record in records]
        return json.dumps(payload, ensure_ascii=False, indent=self._indent)

    def save(self, json_path: str | Path, records: Iterable[PhotoRecord]) -> int:
        """Write `records` to `json_path`, creating parent directories.

        The payload is encoded before anything is written and lands in a
        sibling temp file that then replaces `json_path`, so a failed save
        leaves the previous file intact.

        Returns:
            Number of records written.
        """
        items = list(records)
        path = Path(json_path)
        data = self.dumps(items).encode("utf-8")
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f"{path.name}.tmp")
        try:
            tmp_path.write_bytes(data)
            tmp_path.replace(path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("Wrote {} record(s) to {}", len(items), path)
        return len(items)
