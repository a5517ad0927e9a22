"""Filter criteria accepted by the filter engine."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .models import PriorityFlag, Status

# Dashboard select boxes use these values for "no filter".
_NO_FILTER_VALUES = {"", "all"}


class TimeWindow(str, Enum):
    ALL = "all"
    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    THIS_YEAR = "this_year"
    CUSTOM = "custom"


_TIME_WINDOW_ALIASES = {
    "today": TimeWindow.TODAY,
    "week": TimeWindow.THIS_WEEK,
    "this week": TimeWindow.THIS_WEEK,
    "this_week": TimeWindow.THIS_WEEK,
    "month": TimeWindow.THIS_MONTH,
    "this month": TimeWindow.THIS_MONTH,
    "this_month": TimeWindow.THIS_MONTH,
    "year": TimeWindow.THIS_YEAR,
    "this year": TimeWindow.THIS_YEAR,
    "this_year": TimeWindow.THIS_YEAR,
    "custom": TimeWindow.CUSTOM,
}

_PRIORITY_ALIASES = {
    "pwd": PriorityFlag.PWD,
    "4ps": PriorityFlag.FOUR_PS,
    "four_ps": PriorityFlag.FOUR_PS,
    "solo parent": PriorityFlag.SOLO_PARENT,
    "solo_parent": PriorityFlag.SOLO_PARENT,
    "senior": PriorityFlag.SENIOR,
    "senior citizen": PriorityFlag.SENIOR,
}


class AgeFilter(BaseModel):
    """Exact age match, or an open-ended "N or above" match."""

    model_config = ConfigDict(frozen=True)

    value: int = Field(..., ge=0)
    or_above: bool = False

    def matches(self, age: Optional[int]) -> bool:
        if age is None:
            return False
        if self.or_above:
            return age >= self.value
        return age == self.value

    @classmethod
    def parse(cls, raw: str | int) -> "AgeFilter":
        """Parse ``"24"`` as exact and ``"24+"`` as 24 or above."""

        if isinstance(raw, int):
            return cls(value=raw)
        text = raw.strip()
        or_above = text.endswith("+")
        digits = text[:-1].strip() if or_above else text
        if not digits.isdigit():
            raise ValueError(f"Invalid age filter: {raw!r}")
        return cls(value=int(digits), or_above=or_above)


class FilterCriteria(BaseModel):
    """Independently optional predicates combined by logical AND.

    Every option left at ``None`` is skipped entirely, so records missing the
    corresponding attribute are not excluded by it.
    """

    model_config = ConfigDict(frozen=True)

    time_window: TimeWindow = TimeWindow.ALL
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=1)
    status: Optional[Status] = None
    category: Optional[str] = None
    zone: Optional[str] = None
    gender: Optional[str] = None
    employment_status: Optional[str] = None
    priority: Optional[PriorityFlag] = None
    age: Optional[AgeFilter] = None

    @model_validator(mode="after")
    def validate_custom_window(self) -> "FilterCriteria":
        has_custom_fields = self.month is not None or self.year is not None
        if has_custom_fields and self.time_window is not TimeWindow.CUSTOM:
            raise ValueError("month and year require the custom time window")
        return self

    @classmethod
    def from_query(cls, params: Mapping[str, Any]) -> "FilterCriteria":
        """Build criteria from dashboard query values ("All" or "" mean unset)."""

        values = {
            key: value for key, value in params.items() if not _is_unset(value)
        }
        data: dict[str, Any] = {}

        window = values.get("date") or values.get("time_window")
        if window is not None:
            data["time_window"] = _parse_time_window(window)
        for key in ("month", "year"):
            if key in values:
                data[key] = int(values[key])
                data.setdefault("time_window", TimeWindow.CUSTOM)
                if data["time_window"] is not TimeWindow.CUSTOM:
                    raise ValueError(
                        f"{key} filter conflicts with date filter {window!r}; "
                        "month and year only apply to the custom date filter"
                    )
        if "status" in values:
            status = Status.from_label(values["status"])
            if status is None:
                raise ValueError(f"Unknown status filter: {values['status']!r}")
            data["status"] = status
        for key, aliases in (
            ("category", ("category", "documentType", "natureOfComplaint")),
            ("zone", ("zone", "purok")),
            ("gender", ("gender",)),
            ("employment_status", ("employment_status", "employment", "workingStatus")),
        ):
            for alias in aliases:
                if alias in values:
                    data[key] = str(values[alias])
                    break
        if "priority" in values:
            data["priority"] = _parse_priority(values["priority"])
        if "age" in values:
            data["age"] = AgeFilter.parse(values["age"])
        return cls(**data)

    def is_empty(self) -> bool:
        return self == FilterCriteria()


def _is_unset(value: Any) -> bool:
    return value is None or (
        isinstance(value, str) and value.strip().lower() in _NO_FILTER_VALUES
    )


def _parse_time_window(raw: Any) -> TimeWindow:
    if isinstance(raw, TimeWindow):
        return raw
    try:
        return _TIME_WINDOW_ALIASES[str(raw).strip().lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown date filter: {raw!r}") from exc


def _parse_priority(raw: Any) -> PriorityFlag:
    if isinstance(raw, PriorityFlag):
        return raw
    try:
        return _PRIORITY_ALIASES[str(raw).strip().lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown priority filter: {raw!r}") from exc
