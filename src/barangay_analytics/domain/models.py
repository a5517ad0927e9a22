"""Domain value objects for barangay records and the analytics they produce."""

from __future__ import annotations

import calendar
import re
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.dataclasses import dataclass as pydantic_dataclass

from barangay_analytics.utils.numbers import percentage

Label = Union[int, str]

UNKNOWN_LABEL = "Unknown"


class RecordKind(str, Enum):
    """The two record families the dashboards analyze."""

    REQUEST = "request"
    CASE = "case"


class Status(str, Enum):
    """Effective lifecycle state of a record, resolved once at ingestion."""

    PENDING = "Pending"
    VERIFIED = "Verified"
    APPROVED = "Approved"
    DECLINED = "Declined"
    ONGOING = "On-going"
    SETTLED = "Settled"
    ENDORSED = "Endorsed"

    @classmethod
    def from_flags(
        cls, *, declined: bool = False, approved: bool = False, verified: bool = False
    ) -> "Status":
        """Collapse independent request flags by decline > approve > verify > pending."""

        if declined:
            return cls.DECLINED
        if approved:
            return cls.APPROVED
        if verified:
            return cls.VERIFIED
        return cls.PENDING

    @classmethod
    def from_label(cls, value: object) -> Optional["Status"]:
        """Match a free-form status string, ignoring case, spaces and dashes."""

        if value is None:
            return None
        key = re.sub(r"[\s_-]+", "", str(value)).lower()
        return _STATUS_ALIASES.get(key)


_STATUS_ALIASES = {
    re.sub(r"[\s_-]+", "", status.value).lower(): status for status in Status
}


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"

    @classmethod
    def from_delta(cls, delta: float, gate: float = 0.0) -> "Trend":
        if delta > gate:
            return cls.UP
        if delta < -gate:
            return cls.DOWN
        return cls.FLAT


class PriorityFlag(str, Enum):
    """Priority-sector markers on the subject snapshot."""

    PWD = "pwd"
    FOUR_PS = "four_ps"
    SOLO_PARENT = "solo_parent"
    SENIOR = "senior"


class Dimension(str, Enum):
    """Attributes the aggregator can group records by."""

    STATUS = "status"
    CATEGORY = "category"
    ZONE = "zone"
    GENDER = "gender"
    RESPONDENT_GENDER = "respondent_gender"
    EMPLOYMENT = "employment"
    WEEKDAY = "weekday"
    AGE = "age"
    SUBJECT_NAME = "subject_name"
    MONTH = "month"
    YEAR = "year"


class SubjectSnapshot(BaseModel):
    """Person attributes as they were when the record was filed."""

    model_config = ConfigDict(frozen=True)

    full_name: Optional[str] = None
    zone: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    employment_status: Optional[str] = None
    pwd: bool = False
    pwd_type: Optional[str] = None
    four_ps_beneficiary: bool = False
    solo_parent: bool = False


class Record(BaseModel):
    """Immutable request or case entry supplied by a record accessor."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: RecordKind
    created_at: datetime
    category: Optional[str] = None
    status: Optional[Status] = None
    subject: SubjectSnapshot = Field(default_factory=SubjectSnapshot)
    respondent: Optional[SubjectSnapshot] = None

    @property
    def period(self) -> "PeriodKey":
        return PeriodKey.from_datetime(self.created_at)


@pydantic_dataclass(frozen=True, order=True)
class PeriodKey:
    """Calendar month bucket ordered by (year, month)."""

    year: int
    month: int = Field(..., ge=1, le=12)

    @classmethod
    def from_datetime(cls, value: datetime) -> "PeriodKey":
        return cls(year=value.year, month=value.month)

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def display(self) -> str:
        return f"{calendar.month_abbr[self.month]} {self.year}"


class SeriesPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: PeriodKey
    count: int = Field(..., ge=0)


class Breakdown(BaseModel):
    """Counts per label for one dimension, with an explicit unknown bucket.

    ``counts`` holds the known labels in display order; records whose value is
    missing or outside a fixed vocabulary are tallied in ``unknown`` so that
    ``total`` always equals the number of records aggregated.
    """

    model_config = ConfigDict(frozen=True)

    dimension: Dimension
    counts: Dict[Label, int] = Field(default_factory=dict)
    unknown: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return sum(self.counts.values()) + self.unknown

    @property
    def labels(self) -> List[Label]:
        return list(self.counts)

    def get(self, label: Label) -> int:
        if label == UNKNOWN_LABEL:
            return self.unknown
        return self.counts.get(label, 0)

    def as_dict(self, *, include_unknown: bool = True) -> Dict[Label, int]:
        data: Dict[Label, int] = dict(self.counts)
        if include_unknown and self.unknown:
            data[UNKNOWN_LABEL] = self.unknown
        return data

    def percentages(self) -> Dict[Label, int]:
        total = self.total
        return {
            label: percentage(count, total) for label, count in self.as_dict().items()
        }


class YearComparison(BaseModel):
    """Side-by-side count of one label for a year and the year before it."""

    model_config = ConfigDict(frozen=True)

    label: Label
    year: int
    this_year: int = Field(..., ge=0)
    last_year: int = Field(..., ge=0)

    @property
    def change(self) -> int:
        return self.this_year - self.last_year


class StatusCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Status
    count: int
    percent: int


class StatusSummary(BaseModel):
    """Summary cards: one per status plus the overall total."""

    model_config = ConfigDict(frozen=True)

    cards: Tuple[StatusCard, ...]
    total: int
    unknown: int = 0

    def count(self, status: Status) -> int:
        for card in self.cards:
            if card.status is status:
                return card.count
        return 0


class StatusBucket(BaseModel):
    """Per-status counts for one bar of a monthly or annual status chart."""

    model_config = ConfigDict(frozen=True)

    label: str
    counts: Dict[str, int]

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class ForecastResult(BaseModel):
    """Next-period estimate; ``has_forecast`` must be checked before reading it."""

    model_config = ConfigDict(frozen=True)

    has_forecast: bool
    history_length: int = Field(..., ge=0)
    next_period_estimate: Optional[int] = None
    trend: Optional[Trend] = None
    method: Tuple[str, ...] = ()
    slope: Optional[float] = None
    intercept: Optional[float] = None
    regression_estimate: Optional[int] = None
    smoothing_estimate: Optional[int] = None
    secondary_estimate: Optional[int] = None
    diverged: bool = False

    @model_validator(mode="after")
    def ensure_estimate_present(self) -> "ForecastResult":
        if self.has_forecast and self.next_period_estimate is None:
            raise ValueError("a forecast must carry a next period estimate")
        if not self.has_forecast and self.next_period_estimate is not None:
            raise ValueError("an insufficient-data result cannot carry an estimate")
        return self

    @classmethod
    def insufficient(cls, history_length: int) -> "ForecastResult":
        return cls(has_forecast=False, history_length=history_length)


class InsightSummary(BaseModel):
    """Descriptive statistics over a monthly series."""

    model_config = ConfigDict(frozen=True)

    period_count: int = 0
    average: Optional[int] = None
    highest_period: Optional[SeriesPoint] = None
    lowest_period: Optional[SeriesPoint] = None
    mom_change: Optional[int] = None
    mom_trend: Trend = Trend.FLAT
