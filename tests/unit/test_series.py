from datetime import datetime, timezone

from barangay_analytics.analytics.series import TimeSeriesBuilder
from barangay_analytics.domain.models import PeriodKey, Record, RecordKind

SCENARIO_COUNTS = [3, 4, 2, 5, 6, 1, 7]


def _record(idx: int, created_at: datetime) -> Record:
    return Record(id=f"r{idx}", kind=RecordKind.REQUEST, created_at=created_at)


def _scenario_records() -> list[Record]:
    records = []
    for month, count in enumerate(SCENARIO_COUNTS, start=1):
        for day in range(count):
            records.append(_record(len(records), datetime(2024, month, day + 1, 10)))
    # Shuffle-ish order to prove the series is sorted by period.
    return records[::-1]


def test_build_series_matches_scenario_counts():
    series = TimeSeriesBuilder().build_series(_scenario_records())

    assert [point.period for point in series] == [
        PeriodKey(2024, month) for month in range(1, 8)
    ]
    assert [point.count for point in series] == SCENARIO_COUNTS


def test_build_series_does_not_fill_gaps():
    records = [
        _record(1, datetime(2023, 11, 3)),
        _record(2, datetime(2024, 2, 3)),
        _record(3, datetime(2024, 2, 9)),
    ]
    series = TimeSeriesBuilder().build_series(records)

    assert [(p.period.label, p.count) for p in series] == [
        ("2023-11", 1),
        ("2024-02", 2),
    ]


def test_build_series_of_nothing_is_empty():
    assert TimeSeriesBuilder().build_series([]) == []


def test_fixed_monthly_series_is_zero_filled_for_one_year():
    records = [
        _record(1, datetime(2024, 3, 1)),
        _record(2, datetime(2024, 3, 2)),
        _record(3, datetime(2023, 3, 2)),
        _record(4, datetime(2024, 12, 31, 23, 59)),
    ]
    series = TimeSeriesBuilder().build_fixed_monthly_series(records, 2024)

    assert len(series) == 12
    assert [p.count for p in series] == [0, 0, 2, 0, 0, 0, 0, 0, 0, 0, 0, 1]
    assert all(p.period.year == 2024 for p in series)


def test_multi_year_series_is_ordered_by_year():
    records = [_record(1, datetime(2023, 1, 5)), _record(2, datetime(2024, 1, 5))]
    series = TimeSeriesBuilder().build_multi_year_series(records, [2024, 2023])

    assert len(series) == 24
    assert series[0].period == PeriodKey(2023, 1)
    assert series[12].period == PeriodKey(2024, 1)
    assert series[0].count == series[12].count == 1


def test_sparkline_keeps_the_latest_points():
    series = TimeSeriesBuilder().build_series(_scenario_records())

    assert [p.count for p in TimeSeriesBuilder.sparkline(series, 3)] == [6, 1, 7]
    assert TimeSeriesBuilder.sparkline(series) == series
    assert TimeSeriesBuilder.sparkline(series, 0) == []


def test_aware_timestamps_are_bucketed_by_local_month():
    records = [
        # 2024-01-31 20:00 UTC is already February in Manila.
        _record(1, datetime(2024, 1, 31, 20, tzinfo=timezone.utc)),
        _record(2, datetime(2024, 1, 15, 8)),
    ]
    builder = TimeSeriesBuilder("Asia/Manila")

    assert [(p.period.label, p.count) for p in builder.build_series(records)] == [
        ("2024-01", 1),
        ("2024-02", 1),
    ]
    monthly = builder.build_fixed_monthly_series(records, 2024)
    assert [p.count for p in monthly[:2]] == [1, 1]
    assert TimeSeriesBuilder("UTC").build_series(records)[0].count == 2
