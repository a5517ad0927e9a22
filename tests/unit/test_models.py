from datetime import datetime

import pytest
from pydantic import ValidationError

from barangay_analytics.domain.models import (
    Breakdown,
    Dimension,
    ForecastResult,
    PeriodKey,
    Record,
    RecordKind,
    Status,
    Trend,
)


@pytest.mark.parametrize(
    "flags,expected",
    [
        ({}, Status.PENDING),
        ({"verified": True}, Status.VERIFIED),
        ({"verified": True, "approved": True}, Status.APPROVED),
        ({"approved": True, "declined": True}, Status.DECLINED),
        ({"verified": True, "approved": True, "declined": True}, Status.DECLINED),
    ],
)
def test_status_from_flags_uses_priority_order(flags, expected):
    assert Status.from_flags(**flags) is expected


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("on-going", Status.ONGOING),
        ("Ongoing", Status.ONGOING),
        ("ON GOING", Status.ONGOING),
        ("settled", Status.SETTLED),
        ("Endorsed", Status.ENDORSED),
        ("archived", None),
        (None, None),
    ],
)
def test_status_from_label_ignores_case_and_separators(raw, expected):
    assert Status.from_label(raw) is expected


def test_record_is_immutable():
    record = Record(id="r1", kind=RecordKind.REQUEST, created_at=datetime(2024, 3, 5))
    with pytest.raises(ValidationError):
        record.category = "Business Permit"  # type: ignore[misc]


def test_record_period_uses_creation_month():
    record = Record(id="r1", kind=RecordKind.CASE, created_at=datetime(2024, 11, 30, 23))
    assert record.period == PeriodKey(year=2024, month=11)


def test_period_keys_order_by_year_then_month():
    keys = [PeriodKey(2024, 1), PeriodKey(2023, 12), PeriodKey(2024, 2)]
    assert sorted(keys) == [PeriodKey(2023, 12), PeriodKey(2024, 1), PeriodKey(2024, 2)]
    assert PeriodKey(2024, 3).label == "2024-03"
    assert PeriodKey(2024, 3).display == "Mar 2024"


def test_period_key_rejects_invalid_month():
    with pytest.raises(ValidationError):
        PeriodKey(2024, 13)


def test_breakdown_percentages_include_unknown():
    breakdown = Breakdown(
        dimension=Dimension.GENDER, counts={"Male": 2, "Female": 1}, unknown=1
    )
    assert breakdown.total == 4
    assert breakdown.percentages() == {"Male": 50, "Female": 25, "Unknown": 25}
    assert breakdown.get("Unknown") == 1
    assert breakdown.get("Other") == 0


def test_empty_breakdown_percentages_are_zero():
    breakdown = Breakdown(dimension=Dimension.ZONE, counts={"Purok 1": 0, "Purok 2": 0})
    assert breakdown.percentages() == {"Purok 1": 0, "Purok 2": 0}


def test_breakdown_keeps_integer_age_keys():
    breakdown = Breakdown(dimension=Dimension.AGE, counts={24: 3, 31: 1})
    assert breakdown.labels == [24, 31]


def test_forecast_result_sentinel_has_no_estimate():
    result = ForecastResult.insufficient(3)
    assert result.has_forecast is False
    assert result.next_period_estimate is None
    assert result.history_length == 3


def test_forecast_result_requires_estimate_when_present():
    with pytest.raises(ValidationError):
        ForecastResult(has_forecast=True, history_length=6)


def test_trend_from_delta_respects_gate():
    assert Trend.from_delta(0.6, 0.5) is Trend.UP
    assert Trend.from_delta(-0.6, 0.5) is Trend.DOWN
    assert Trend.from_delta(0.5, 0.5) is Trend.FLAT
    assert Trend.from_delta(1) is Trend.UP
