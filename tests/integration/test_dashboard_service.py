from datetime import datetime, timezone
from typing import List

import pytest

from barangay_analytics.core.config import AnalyticsConfig
from barangay_analytics.core.container import DIContainer
from barangay_analytics.core.service import DashboardService
from barangay_analytics.domain.criteria import FilterCriteria, TimeWindow
from barangay_analytics.domain.models import (
    Dimension,
    Record,
    RecordKind,
    Status,
    SubjectSnapshot,
    Trend,
)
from barangay_analytics.domain.vocabulary import DEFAULT_ZONES

pytestmark = pytest.mark.integration

MONTHLY_COUNTS = [3, 4, 2, 5, 6, 1, 7]
NOW = datetime(2024, 7, 20, 10, 0)
NAMES = ["Ana Cruz", "Ben Santos", "Cara Lim"]


class CountingAccessor:
    def __init__(self, records: List[Record]):
        self.records = records
        self.calls = 0

    def fetch(self) -> List[Record]:
        self.calls += 1
        return list(self.records)


def _request_records() -> List[Record]:
    records: List[Record] = []
    for month, count in enumerate(MONTHLY_COUNTS, start=1):
        for day in range(count):
            i = len(records)
            records.append(
                Record(
                    id=f"doc-{i}",
                    kind=RecordKind.REQUEST,
                    created_at=datetime(2024, month, day + 1, 10),
                    category="Barangay Clearance" if i % 2 else "Business Permit",
                    status=Status.APPROVED if i % 4 == 0 else Status.PENDING,
                    subject=SubjectSnapshot(
                        full_name=NAMES[i % 3],
                        zone=f"purok{i % 7 + 1}",
                        age=20 + i,
                        gender="female" if i % 2 else "MALE",
                        employment_status="employed",
                        pwd=i == 5,
                        pwd_type="Hearing" if i == 5 else None,
                        solo_parent=i == 6,
                    ),
                )
            )
    return records


def _request_service(**config) -> DashboardService:
    return DIContainer.create_service(
        RecordKind.REQUEST,
        config=AnalyticsConfig(**config),
        records=_request_records(),
    )


def test_request_dashboard_end_to_end():
    report = _request_service().analyze(FilterCriteria(), NOW)

    assert report.total_records == 28
    assert report.filtered_records == 28
    assert [point.count for point in report.series] == MONTHLY_COUNTS
    assert [point.count for point in report.monthly_volume] == MONTHLY_COUNTS + [0] * 5

    assert report.insights.average == 4
    assert report.insights.highest_period.period.month == 7
    assert report.insights.lowest_period.period.month == 6
    assert report.insights.mom_change == 6
    assert report.insights.mom_trend is Trend.UP

    assert report.forecast.has_forecast is True
    assert report.forecast.next_period_estimate == 5
    assert report.forecast.trend is Trend.FLAT
    assert report.forecast.method == ("linear_regression",)

    assert report.status_summary.count(Status.APPROVED) == 7
    assert report.status_summary.count(Status.PENDING) == 21
    assert {card.status: card.percent for card in report.status_summary.cards}[
        Status.APPROVED
    ] == 25

    zones = report.breakdowns[Dimension.ZONE]
    assert zones.labels == list(DEFAULT_ZONES)
    assert all(count == 4 for count in zones.counts.values())
    for breakdown in report.breakdowns.values():
        assert breakdown.total == 28

    assert report.rankings[Dimension.SUBJECT_NAME] == NAMES
    assert report.rankings[Dimension.ZONE] == ["Purok 1", "Purok 2", "Purok 3"]
    assert report.priority_counts["PWD"] == 1
    assert report.priority_counts["Solo Parent"] == 1
    assert report.pwd_categories["Hearing Disability"] == 1
    assert [bucket.label for bucket in report.annual_status] == ["2024", "2023"]
    assert report.annual_status[0].total == 28


def test_filtered_dashboard_falls_back_to_insufficient_forecast():
    service = _request_service()
    report = service.analyze(FilterCriteria(time_window=TimeWindow.THIS_MONTH), NOW)

    assert report.filtered_records == 7
    assert len(report.series) == 1
    assert report.forecast.has_forecast is False
    assert report.insights.mom_change is None
    assert report.breakdowns[Dimension.ZONE].labels == list(DEFAULT_ZONES)


def test_empty_filter_result_yields_zero_percentages():
    report = _request_service().analyze(FilterCriteria(zone="Purok 9"), NOW)

    assert report.filtered_records == 0
    assert all(card.percent == 0 for card in report.status_summary.cards)
    assert report.breakdowns[Dimension.ZONE].percentages() == {
        zone: 0 for zone in DEFAULT_ZONES
    }
    assert report.insights.average is None


def test_analyze_is_repeatable_and_fetches_once():
    accessor = CountingAccessor(_request_records())
    service = DashboardService(accessor, RecordKind.REQUEST)
    criteria = FilterCriteria.from_query({"gender": "Female", "age": "30+"})

    first = service.analyze(criteria, NOW)
    second = service.analyze(criteria, NOW)

    assert first == second
    assert accessor.calls == 1


def test_refresh_picks_up_new_records_and_skips_other_kinds():
    accessor = CountingAccessor(_request_records())
    service = DashboardService(accessor, RecordKind.REQUEST)
    assert service.analyze(now=NOW).total_records == 28

    accessor.records.append(
        Record(id="case-1", kind=RecordKind.CASE, created_at=datetime(2024, 7, 1))
    )
    accessor.records.append(
        Record(id="doc-new", kind=RecordKind.REQUEST, created_at=datetime(2024, 7, 19))
    )

    assert service.refresh() == 29
    assert accessor.calls == 2
    assert service.analyze(now=NOW).total_records == 29


def test_ranking_window_limits_rankings_only():
    records = [
        Record(
            id=f"old-{i}",
            kind=RecordKind.REQUEST,
            created_at=datetime(2024, 5, i + 1),
            subject=SubjectSnapshot(full_name="Old Timer"),
        )
        for i in range(3)
    ]
    records.append(
        Record(
            id="new",
            kind=RecordKind.REQUEST,
            created_at=datetime(2024, 7, 18),
            subject=SubjectSnapshot(full_name="Newcomer"),
        )
    )

    unbounded = DIContainer.create_service(
        RecordKind.REQUEST, config=AnalyticsConfig(), records=records
    ).analyze(now=NOW)
    windowed = DIContainer.create_service(
        RecordKind.REQUEST,
        config=AnalyticsConfig(ranking_window_days=7),
        records=records,
    ).analyze(now=NOW)

    assert unbounded.rankings[Dimension.SUBJECT_NAME] == ["Old Timer", "Newcomer"]
    assert windowed.rankings[Dimension.SUBJECT_NAME] == ["Newcomer"]
    assert windowed.filtered_records == 4


def test_case_dashboard_compares_years():
    def case(idx, created_at, zone, status, respondent=None):
        return Record(
            id=f"case-{idx}",
            kind=RecordKind.CASE,
            created_at=created_at,
            category="Property Dispute",
            status=status,
            subject=SubjectSnapshot(zone=zone, gender="male"),
            respondent=respondent,
        )

    records = [
        case(1, datetime(2024, 2, 1), "Purok 1", Status.SETTLED),
        case(2, datetime(2024, 3, 1), "purok1", Status.SETTLED),
        case(3, datetime(2023, 3, 1), "Purok 1", Status.PENDING),
        case(4, datetime(2024, 4, 1), "Purok 3", Status.ONGOING, SubjectSnapshot(gender="FEMALE")),
    ]
    service = DIContainer.create_service(
        RecordKind.CASE, config=AnalyticsConfig(), records=records
    )

    # 02:00 UTC is 10:00 in Manila.
    report = service.analyze(now=datetime(2024, 6, 15, 2, tzinfo=timezone.utc))

    assert report.generated_at == datetime(2024, 6, 15, 10, 0)
    zone_comparison = report.year_comparisons[Dimension.ZONE]
    assert [c.label for c in zone_comparison] == list(DEFAULT_ZONES)
    assert (zone_comparison[0].this_year, zone_comparison[0].last_year) == (2, 1)
    status_comparison = {c.label: c for c in report.year_comparisons[Dimension.STATUS]}
    assert status_comparison["Settled"].this_year == 2
    assert status_comparison["Pending"].last_year == 1

    respondents = report.breakdowns[Dimension.RESPONDENT_GENDER]
    assert respondents.counts == {"Female": 1}
    assert respondents.unknown == 3
    assert report.rankings[Dimension.CATEGORY] == ["Property Dispute"]
    assert report.priority_counts == {}
    assert report.pwd_categories == {}


def test_to_dataframe_flattens_subject_fields():
    pytest.importorskip("pandas")
    service = _request_service()

    frame = service.to_dataframe(FilterCriteria(time_window=TimeWindow.THIS_MONTH), NOW)

    assert len(frame) == 7
    assert {"id", "status", "category", "subject_zone", "subject_age"} <= set(frame.columns)
    assert set(frame["subject_zone"]) <= {f"purok{n}" for n in range(1, 8)}


def test_aware_record_timestamps_follow_local_calendar():
    utc = timezone.utc
    records = [
        # 20:00 UTC on 05-15 is 04:00 on 05-16 in Manila.
        Record(id="late", kind=RecordKind.REQUEST, created_at=datetime(2024, 5, 15, 20, tzinfo=utc)),
        Record(id="early", kind=RecordKind.REQUEST, created_at=datetime(2024, 5, 15, 1, tzinfo=utc)),
    ]
    service = DIContainer.create_service(
        RecordKind.REQUEST, config=AnalyticsConfig(), records=records
    )
    now = datetime(2024, 5, 16, 2, tzinfo=utc)  # 10:00 in Manila

    week = service.analyze(FilterCriteria(time_window=TimeWindow.THIS_WEEK), now=now)
    today = service.analyze(FilterCriteria(time_window=TimeWindow.TODAY), now=now)

    assert week.filtered_records == 2
    assert today.filtered_records == 1
    assert service.records[0].created_at == datetime(2024, 5, 16, 4, 0)
    assert [(p.period.label, p.count) for p in week.series] == [("2024-05", 2)]
