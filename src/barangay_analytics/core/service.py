"""Dashboard facade coordinating the accessor and the analysis pipeline."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from barangay_analytics.analytics.aggregator import Aggregator
from barangay_analytics.analytics.filters import FilterEngine
from barangay_analytics.analytics.series import TimeSeriesBuilder
from barangay_analytics.core.config import AnalyticsConfig
from barangay_analytics.domain.criteria import FilterCriteria
from barangay_analytics.domain.interfaces import (
    IForecaster,
    IInsightSummarizer,
    IRecordAccessor,
)
from barangay_analytics.domain.models import (
    Breakdown,
    Dimension,
    ForecastResult,
    Label,
    Record,
    RecordKind,
    YearComparison,
)
from barangay_analytics.domain.reports import DashboardReport
from barangay_analytics.domain.vocabulary import Vocabulary
from barangay_analytics.forecasting.forecaster import (
    ExponentialSmoothingEstimator,
    Forecaster,
)
from barangay_analytics.forecasting.insights import InsightSummarizer
from barangay_analytics.utils.timeutils import local_now, resolve_timezone, to_local

# Dimensions each dashboard charts, ranks and compares year over year.
_BREAKDOWNS: Dict[RecordKind, Tuple[Dimension, ...]] = {
    RecordKind.REQUEST: (
        Dimension.STATUS,
        Dimension.CATEGORY,
        Dimension.ZONE,
        Dimension.GENDER,
        Dimension.EMPLOYMENT,
    ),
    RecordKind.CASE: (
        Dimension.STATUS,
        Dimension.CATEGORY,
        Dimension.ZONE,
        Dimension.GENDER,
        Dimension.RESPONDENT_GENDER,
    ),
}

_RANKINGS: Dict[RecordKind, Tuple[Dimension, ...]] = {
    RecordKind.REQUEST: (
        Dimension.SUBJECT_NAME,
        Dimension.AGE,
        Dimension.ZONE,
        Dimension.WEEKDAY,
    ),
    RecordKind.CASE: (
        Dimension.CATEGORY,
        Dimension.AGE,
        Dimension.ZONE,
        Dimension.WEEKDAY,
    ),
}

_YEAR_COMPARISONS: Dict[RecordKind, Tuple[Dimension, ...]] = {
    RecordKind.REQUEST: (Dimension.CATEGORY,),
    RecordKind.CASE: (Dimension.ZONE, Dimension.STATUS),
}


class DashboardService:
    """High-level API for dashboard views over one record kind.

    Records are fetched from the accessor once and held; every ``analyze``
    call reruns the pure pipeline over that list. Call ``refresh`` to pick up
    new records.
    """

    def __init__(
        self,
        accessor: IRecordAccessor,
        kind: RecordKind,
        *,
        config: Optional[AnalyticsConfig] = None,
        filter_engine: Optional[FilterEngine] = None,
        aggregator: Optional[Aggregator] = None,
        series_builder: Optional[TimeSeriesBuilder] = None,
        forecaster: Optional[IForecaster] = None,
        summarizer: Optional[IInsightSummarizer] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config or AnalyticsConfig()
        self._accessor = accessor
        self._kind = kind
        self._tz = resolve_timezone(self._config.timezone)
        self._filter_engine = filter_engine or FilterEngine(
            senior_age=self._config.senior_age, timezone=self._tz
        )
        self._aggregator = aggregator or Aggregator(
            Vocabulary.for_kind(kind), senior_age=self._config.senior_age
        )
        self._series_builder = series_builder or TimeSeriesBuilder(self._tz)
        self._forecaster = forecaster or Forecaster(
            smoothing=ExponentialSmoothingEstimator(self._config.smoothing_alpha),
            min_history=self._config.min_history,
            trend_gate=self._config.trend_gate,
            divergence_threshold=self._config.divergence_threshold,
        )
        self._summarizer = summarizer or InsightSummarizer()
        self._logger = logger or logging.getLogger(__name__)
        self._records: Optional[List[Record]] = None

    @property
    def kind(self) -> RecordKind:
        return self._kind

    @property
    def config(self) -> AnalyticsConfig:
        return self._config

    @property
    def records(self) -> List[Record]:
        if self._records is None:
            self.refresh()
        return list(self._records or [])

    def refresh(self) -> int:
        """Fetch the record set from the accessor, replacing the held copy."""

        fetched = self._accessor.fetch()
        self._records = [
            self._localize(record) for record in fetched if record.kind is self._kind
        ]
        skipped = len(fetched) - len(self._records)
        self._logger.info(
            "analytics_refresh",
            extra={
                "kind": self._kind.value,
                "records": len(self._records),
                "skipped_other_kind": skipped,
            },
        )
        return len(self._records)

    def filter(
        self, criteria: Optional[FilterCriteria] = None, now: Optional[datetime] = None
    ) -> List[Record]:
        return self._filter_engine.filter(
            self.records, criteria or FilterCriteria(), self._resolve_now(now)
        )

    def analyze(
        self, criteria: Optional[FilterCriteria] = None, now: Optional[datetime] = None
    ) -> DashboardReport:
        criteria = criteria or FilterCriteria()
        evaluated_at = self._resolve_now(now)
        records = self.records
        subset = self._filter_engine.filter(records, criteria, evaluated_at)

        series = self._series_builder.build_series(subset)
        forecast = self._forecaster.forecast(series)
        year = evaluated_at.year
        report = DashboardReport(
            kind=self._kind,
            generated_at=evaluated_at,
            criteria=criteria,
            total_records=len(records),
            filtered_records=len(subset),
            status_summary=self._aggregator.status_summary(subset),
            breakdowns=self._breakdowns(subset),
            rankings=self._rankings(subset, evaluated_at),
            year_comparisons=self._year_comparisons(subset, year),
            monthly_status=self._aggregator.status_by_month(subset),
            annual_status=self._aggregator.status_by_year(subset, (year, year - 1)),
            monthly_volume=self._series_builder.build_fixed_monthly_series(subset, year),
            priority_counts=(
                self._aggregator.priority_counts(subset)
                if self._kind is RecordKind.REQUEST
                else {}
            ),
            pwd_categories=(
                self._aggregator.pwd_categories(subset)
                if self._kind is RecordKind.REQUEST
                else {}
            ),
            series=series,
            sparkline=self._series_builder.sparkline(series),
            forecast=forecast,
            insights=self._summarizer.summarize(series),
        )
        self._logger.info(
            "analytics_run",
            extra={
                "kind": self._kind.value,
                "records": len(records),
                "filtered": len(subset),
                "periods": len(series),
                "has_forecast": forecast.has_forecast,
            },
        )
        return report

    def summary_report(self, now: Optional[datetime] = None) -> DashboardReport:
        """Unfiltered view used by the printable summary pages."""

        return self.analyze(FilterCriteria(), now)

    def forecast(
        self, criteria: Optional[FilterCriteria] = None, now: Optional[datetime] = None
    ) -> ForecastResult:
        subset = self.filter(criteria, now)
        return self._forecaster.forecast(self._series_builder.build_series(subset))

    def to_dataframe(
        self, criteria: Optional[FilterCriteria] = None, now: Optional[datetime] = None
    ) -> Any:
        """Export the filtered records to a flat pandas DataFrame."""

        try:
            import pandas as pd  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pandas is required for dataframe export") from exc

        rows = []
        for record in self.filter(criteria, now):
            row = record.model_dump(mode="json", exclude={"subject", "respondent"})
            row.update(
                {f"subject_{key}": value for key, value in record.subject.model_dump().items()}
            )
            rows.append(row)
        return pd.DataFrame(rows)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _localize(self, record: Record) -> Record:
        """Store aware timestamps as local wall-clock time, once per fetch."""

        if record.created_at.tzinfo is None:
            return record
        return record.model_copy(
            update={"created_at": to_local(record.created_at, self._tz)}
        )

    def _resolve_now(self, now: Optional[datetime]) -> datetime:
        if now is None:
            return local_now(self._tz)
        return to_local(now, self._tz)

    def _breakdowns(self, subset: Sequence[Record]) -> Dict[Dimension, Breakdown]:
        return {
            dimension: self._aggregator.count_by(subset, dimension)
            for dimension in _BREAKDOWNS[self._kind]
        }

    def _rankings(
        self, subset: Sequence[Record], now: datetime
    ) -> Dict[Dimension, List[Label]]:
        window = self._config.ranking_window_days
        ranked = list(subset)
        if window is not None:
            start = now - timedelta(days=window)
            ranked = [record for record in subset if start <= record.created_at <= now]
        return {
            dimension: self._aggregator.top_n(ranked, dimension, self._config.top_n)
            for dimension in _RANKINGS[self._kind]
        }

    def _year_comparisons(
        self, subset: Sequence[Record], year: int
    ) -> Dict[Dimension, List[YearComparison]]:
        return {
            dimension: self._aggregator.compare_years_all(subset, dimension, year)
            for dimension in _YEAR_COMPARISONS[self._kind]
        }
