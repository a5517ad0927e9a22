"""Accessor over records the caller already holds in memory."""

from __future__ import annotations

from typing import Iterable, List

from barangay_analytics.domain.interfaces import IRecordAccessor
from barangay_analytics.domain.models import Record


class InMemoryRecordAccessor(IRecordAccessor):
    def __init__(self, records: Iterable[Record]) -> None:
        self._records = tuple(records)

    def fetch(self) -> List[Record]:
        return list(self._records)
