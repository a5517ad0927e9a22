import pytest

from barangay_analytics.domain.criteria import AgeFilter, FilterCriteria, TimeWindow
from barangay_analytics.domain.models import PriorityFlag, Status


def test_age_filter_exact_and_or_above():
    exact = AgeFilter.parse("30")
    above = AgeFilter.parse("24+")

    assert exact.matches(30) and not exact.matches(31)
    assert above.or_above is True
    assert above.matches(24) and above.matches(70) and not above.matches(23)
    assert not above.matches(None)


def test_age_filter_rejects_garbage():
    with pytest.raises(ValueError):
        AgeFilter.parse("twenty")


def test_month_requires_custom_window():
    with pytest.raises(ValueError):
        FilterCriteria(time_window=TimeWindow.THIS_YEAR, month=3)

    criteria = FilterCriteria(time_window=TimeWindow.CUSTOM, month=3)
    assert criteria.month == 3


def test_from_query_treats_all_and_blank_as_unset():
    criteria = FilterCriteria.from_query(
        {"date": "All", "purok": "All", "documentType": "", "gender": None}
    )
    assert criteria.is_empty()


def test_from_query_parses_dashboard_values():
    criteria = FilterCriteria.from_query(
        {
            "date": "This Week",
            "purok": "Purok 3",
            "documentType": "Barangay Clearance",
            "workingStatus": "employed",
            "gender": "female",
            "priority": "4Ps",
            "age": "24+",
            "status": "approved",
        }
    )

    assert criteria.time_window is TimeWindow.THIS_WEEK
    assert criteria.zone == "Purok 3"
    assert criteria.category == "Barangay Clearance"
    assert criteria.employment_status == "employed"
    assert criteria.gender == "female"
    assert criteria.priority is PriorityFlag.FOUR_PS
    assert criteria.age == AgeFilter(value=24, or_above=True)
    assert criteria.status is Status.APPROVED


def test_from_query_month_and_year_imply_custom_window():
    criteria = FilterCriteria.from_query({"month": "2", "year": "2024"})
    assert criteria.time_window is TimeWindow.CUSTOM
    assert (criteria.month, criteria.year) == (2, 2024)


@pytest.mark.parametrize(
    "params",
    [{"date": "yesterday"}, {"priority": "veteran"}, {"status": "lost"}],
)
def test_from_query_rejects_unknown_values(params):
    with pytest.raises(ValueError):
        FilterCriteria.from_query(params)


def test_from_query_names_month_conflicting_with_relative_window():
    with pytest.raises(ValueError, match="custom date filter"):
        FilterCriteria.from_query({"date": "Today", "month": "3"})

    criteria = FilterCriteria.from_query({"date": "custom", "year": "2023"})
    assert criteria.time_window is TimeWindow.CUSTOM
    assert criteria.year == 2023
