"""Contracts between the record source and the analysis components."""

from __future__ import annotations

from datetime import datetime
from typing import List, Protocol, Sequence

from .criteria import FilterCriteria
from .models import (
    Breakdown,
    Dimension,
    ForecastResult,
    InsightSummary,
    Label,
    Record,
    SeriesPoint,
)


class IRecordAccessor(Protocol):
    """Supplies the full record set for one analysis cycle."""

    def fetch(self) -> List[Record]:
        """Return every available record as immutable domain entries."""


class IFilterEngine(Protocol):
    def filter(
        self, records: Sequence[Record], criteria: FilterCriteria, now: datetime
    ) -> List[Record]:
        """Return the records satisfying every set criterion, in input order."""


class IAggregator(Protocol):
    def count_by(self, records: Sequence[Record], dimension: Dimension) -> Breakdown:
        """Group records by a dimension, routing missing values to Unknown."""

    def top_n(
        self, records: Sequence[Record], dimension: Dimension, n: int
    ) -> List[Label]:
        """Rank labels by descending count, ties keeping first-encountered order."""


class ISeriesBuilder(Protocol):
    def build_series(self, records: Sequence[Record]) -> List[SeriesPoint]:
        """Monthly counts for every month that has at least one record."""

    def build_fixed_monthly_series(
        self, records: Sequence[Record], year: int
    ) -> List[SeriesPoint]:
        """Exactly twelve January-December points for ``year``."""


class IEstimator(Protocol):
    """One next-period estimator over an ordered list of counts."""

    @property
    def name(self) -> str:
        """Identifier reported in ``ForecastResult.method``."""

    def estimate(self, counts: Sequence[int]) -> float:
        """Return the unrounded next-period estimate."""


class IForecaster(Protocol):
    def forecast(self, series: Sequence[SeriesPoint]) -> ForecastResult:
        """Estimate the next period, or return the insufficient-data sentinel."""


class IInsightSummarizer(Protocol):
    def summarize(self, series: Sequence[SeriesPoint]) -> InsightSummary:
        """Derive average, extrema and month-over-month change."""
