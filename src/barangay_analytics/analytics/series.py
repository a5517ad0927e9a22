"""Monthly time-series construction from filtered records."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, tzinfo
from typing import Iterable, List, Sequence

from barangay_analytics.domain.interfaces import ISeriesBuilder
from barangay_analytics.domain.models import PeriodKey, Record, SeriesPoint
from barangay_analytics.utils.timeutils import resolve_timezone, to_local

DEFAULT_TIMEZONE = "Asia/Manila"


class TimeSeriesBuilder(ISeriesBuilder):
    """Buckets records by local calendar month of ``created_at``."""

    def __init__(self, timezone: tzinfo | str = DEFAULT_TIMEZONE) -> None:
        self._tz = resolve_timezone(timezone) if isinstance(timezone, str) else timezone

    def build_series(self, records: Sequence[Record]) -> List[SeriesPoint]:
        """One point per month present in ``records``, oldest first.

        Months without records are left out rather than zero-filled; the
        forecaster fits over consecutive positions of active months only.
        """

        counts = Counter(
            PeriodKey.from_datetime(self._created(record)) for record in records
        )
        return [
            SeriesPoint(period=period, count=counts[period]) for period in sorted(counts)
        ]

    def build_fixed_monthly_series(
        self, records: Sequence[Record], year: int
    ) -> List[SeriesPoint]:
        local = [self._created(record) for record in records]
        counts = Counter(created.month for created in local if created.year == year)
        return [
            SeriesPoint(period=PeriodKey(year=year, month=month), count=counts[month])
            for month in range(1, 13)
        ]

    def build_multi_year_series(
        self, records: Sequence[Record], years: Iterable[int]
    ) -> List[SeriesPoint]:
        """Twelve zero-filled points for each requested year, in year order."""

        series: List[SeriesPoint] = []
        for year in sorted(set(years)):
            series.extend(self.build_fixed_monthly_series(records, year))
        return series

    @staticmethod
    def sparkline(series: Sequence[SeriesPoint], n: int = 12) -> List[SeriesPoint]:
        if n <= 0:
            return []
        return list(series[-n:])

    def _created(self, record: Record) -> datetime:
        return to_local(record.created_at, self._tz)
