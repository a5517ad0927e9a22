from typing import List

from barangay_analytics.domain.models import PeriodKey, SeriesPoint, Trend
from barangay_analytics.forecasting.insights import InsightSummarizer


def _series(counts: List[int]) -> List[SeriesPoint]:
    return [
        SeriesPoint(period=PeriodKey(2024, month), count=count)
        for month, count in enumerate(counts, start=1)
    ]


def test_month_over_month_change():
    summary = InsightSummarizer().summarize(_series([5, 8]))

    assert summary.mom_change == 3
    assert summary.mom_trend is Trend.UP


def test_scenario_summary():
    summary = InsightSummarizer().summarize(_series([3, 4, 2, 5, 6, 1, 7]))

    assert summary.period_count == 7
    assert summary.average == 4
    assert summary.highest_period.period == PeriodKey(2024, 7)
    assert summary.highest_period.count == 7
    assert summary.lowest_period.period == PeriodKey(2024, 6)
    assert summary.lowest_period.count == 1
    assert summary.mom_change == 6
    assert summary.mom_trend is Trend.UP


def test_ties_keep_the_earliest_period():
    summary = InsightSummarizer().summarize(_series([2, 9, 9, 2]))

    assert summary.highest_period.period == PeriodKey(2024, 2)
    assert summary.lowest_period.period == PeriodKey(2024, 1)
    assert summary.mom_trend is Trend.DOWN


def test_average_rounds_half_up():
    assert InsightSummarizer().summarize(_series([1, 2])).average == 2


def test_single_point_has_no_month_over_month():
    summary = InsightSummarizer().summarize(_series([4]))

    assert summary.average == 4
    assert summary.mom_change is None
    assert summary.mom_trend is Trend.FLAT


def test_empty_series():
    summary = InsightSummarizer().summarize([])

    assert summary.period_count == 0
    assert summary.average is None
    assert summary.highest_period is None
    assert summary.mom_change is None
    assert summary.mom_trend is Trend.FLAT
