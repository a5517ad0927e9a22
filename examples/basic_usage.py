"""Basic dashboard example using the built-in DI container."""

from datetime import datetime

from barangay_analytics.core.container import DIContainer
from barangay_analytics.domain.criteria import FilterCriteria
from barangay_analytics.domain.models import Dimension, Record, RecordKind, Status, SubjectSnapshot


def _sample_records() -> list[Record]:
    records = []
    for month, count in enumerate([3, 4, 2, 5, 6, 1, 7], start=1):
        for day in range(count):
            records.append(
                Record(
                    id=f"doc-{len(records)}",
                    kind=RecordKind.REQUEST,
                    created_at=datetime(2024, month, day + 1, 9),
                    category="Barangay Clearance",
                    status=Status.PENDING,
                    subject=SubjectSnapshot(zone=f"Purok {day % 7 + 1}", gender="Female"),
                )
            )
    return records


def main() -> None:
    service = DIContainer.create_service(RecordKind.REQUEST, records=_sample_records())

    report = service.analyze(
        FilterCriteria.from_query({"date": "All", "purok": "All"}),
        now=datetime(2024, 7, 20, 10),
    )
    print("Records:", report.filtered_records)
    print("By zone:", report.breakdowns[Dimension.ZONE].as_dict())
    if report.forecast.has_forecast:
        print("Next month:", report.forecast.next_period_estimate, report.forecast.trend.value)
    else:
        print("Not enough history to forecast")
    print("Average per month:", report.insights.average)


if __name__ == "__main__":
    main()
