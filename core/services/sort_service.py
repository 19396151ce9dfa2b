"""Sorting service for the sidecar collection.

Dated records come first, newest first; undated records follow in ascending
order of their primary reference. Dates are zero-padded ISO strings, so a
plain string comparison orders them correctly.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import cmp_to_key

from core.models import PhotoRecord


def _cmp(a: str, b: str) -> int:
    return (a > b) - (a < b)


def compare_records(a: PhotoRecord, b: PhotoRecord) -> int:
    """Three-way comparison used to order the collection."""
    if a.date and b.date:
        return _cmp(b.date, a.date)
    if a.date:
        return -1
    if b.date:
        return 1
    return _cmp(a.primary_reference, b.primary_reference)


class SortService:
    """Provides ordering for `PhotoRecord` collections."""

    def sort(self, records: Iterable[PhotoRecord]) -> list[PhotoRecord]:
        """Return a new list ordered newest first, undated last.

        Args:
            records: Records in scan order.
        """
        return sorted(records, key=cmp_to_key(compare_records))
