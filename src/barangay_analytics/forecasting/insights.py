"""Descriptive statistics over a monthly series."""

from __future__ import annotations

from statistics import fmean
from typing import Sequence

from barangay_analytics.domain.interfaces import IInsightSummarizer
from barangay_analytics.domain.models import InsightSummary, SeriesPoint, Trend
from barangay_analytics.utils.numbers import round_half_up


class InsightSummarizer(IInsightSummarizer):
    """Average, extrema and month-over-month change; no minimum length."""

    def summarize(self, series: Sequence[SeriesPoint]) -> InsightSummary:
        if not series:
            return InsightSummary()

        counts = [point.count for point in series]
        # max()/min() return the first extremum, so ties keep the earliest period.
        highest = max(series, key=lambda point: point.count)
        lowest = min(series, key=lambda point: point.count)

        mom_change = None
        mom_trend = Trend.FLAT
        if len(counts) >= 2:
            mom_change = counts[-1] - counts[-2]
            mom_trend = Trend.from_delta(mom_change)

        return InsightSummary(
            period_count=len(series),
            average=round_half_up(fmean(counts)),
            highest_period=highest,
            lowest_period=lowest,
            mom_change=mom_change,
            mom_trend=mom_trend,
        )
