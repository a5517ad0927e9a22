"""Domain layer: records, criteria, result objects and contracts."""

from .criteria import AgeFilter, FilterCriteria, TimeWindow
from .models import (
    UNKNOWN_LABEL,
    Breakdown,
    Dimension,
    ForecastResult,
    InsightSummary,
    PeriodKey,
    PriorityFlag,
    Record,
    RecordKind,
    SeriesPoint,
    Status,
    SubjectSnapshot,
    Trend,
)

__all__ = [
    "UNKNOWN_LABEL",
    "AgeFilter",
    "Breakdown",
    "Dimension",
    "FilterCriteria",
    "ForecastResult",
    "InsightSummary",
    "PeriodKey",
    "PriorityFlag",
    "Record",
    "RecordKind",
    "SeriesPoint",
    "Status",
    "SubjectSnapshot",
    "TimeWindow",
    "Trend",
]
