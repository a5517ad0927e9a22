"""Conjunctive record filtering over an already-fetched record list."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Callable, List, Sequence

from barangay_analytics.domain.criteria import FilterCriteria, TimeWindow
from barangay_analytics.domain.interfaces import IFilterEngine
from barangay_analytics.domain.models import PriorityFlag, Record
from barangay_analytics.utils.text import normalize_label, normalize_zone
from barangay_analytics.utils.timeutils import resolve_timezone, to_local, week_start

Predicate = Callable[[Record], bool]

DEFAULT_SENIOR_AGE = 60

DEFAULT_TIMEZONE = "Asia/Manila"


class FilterEngine(IFilterEngine):
    """Applies every set option of a ``FilterCriteria`` as an AND of predicates.

    The evaluation instant is always passed in, never read from the clock, so
    the same records, criteria and ``now`` always give the same subset.
    Timezone-aware timestamps are compared as local wall-clock time in
    ``timezone``.
    """

    def __init__(
        self,
        *,
        senior_age: int = DEFAULT_SENIOR_AGE,
        timezone: tzinfo | str = DEFAULT_TIMEZONE,
    ) -> None:
        self._senior_age = senior_age
        self._tz = resolve_timezone(timezone) if isinstance(timezone, str) else timezone

    def filter(
        self, records: Sequence[Record], criteria: FilterCriteria, now: datetime
    ) -> List[Record]:
        predicates = self._build_predicates(criteria, to_local(now, self._tz))
        if not predicates:
            return list(records)
        return [
            record
            for record in records
            if all(predicate(record) for predicate in predicates)
        ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _build_predicates(
        self, criteria: FilterCriteria, now: datetime
    ) -> List[Predicate]:
        predicates: List[Predicate] = []

        window = self._time_window_predicate(criteria, now)
        if window is not None:
            predicates.append(window)

        if criteria.status is not None:
            status = criteria.status
            predicates.append(lambda record: record.status is status)

        if criteria.category is not None:
            category = criteria.category
            predicates.append(lambda record: record.category == category)

        if criteria.zone is not None:
            zone = normalize_zone(criteria.zone)
            predicates.append(lambda record: normalize_zone(record.subject.zone) == zone)

        if criteria.gender is not None:
            gender = normalize_label(criteria.gender)
            predicates.append(
                lambda record: normalize_label(record.subject.gender) == gender
            )

        if criteria.employment_status is not None:
            employment = normalize_label(criteria.employment_status)
            predicates.append(
                lambda record: normalize_label(record.subject.employment_status)
                == employment
            )

        if criteria.priority is not None:
            predicates.append(self._priority_predicate(criteria.priority))

        if criteria.age is not None:
            age_filter = criteria.age
            predicates.append(lambda record: age_filter.matches(record.subject.age))

        return predicates

    def _time_window_predicate(
        self, criteria: FilterCriteria, now: datetime
    ) -> Predicate | None:
        window = criteria.time_window
        if window is TimeWindow.ALL:
            return None

        def created(record: Record) -> datetime:
            return to_local(record.created_at, self._tz)

        if window is TimeWindow.TODAY:
            today = now.date()
            return lambda record: created(record).date() == today
        if window is TimeWindow.THIS_WEEK:
            start = week_start(now)
            return lambda record: start <= created(record) <= now
        if window is TimeWindow.THIS_MONTH:
            return lambda record: (
                created(record).year == now.year and created(record).month == now.month
            )
        if window is TimeWindow.THIS_YEAR:
            return lambda record: created(record).year == now.year

        month, year = criteria.month, criteria.year
        if month is None and year is None:
            return None
        return lambda record: (month is None or created(record).month == month) and (
            year is None or created(record).year == year
        )

    def _priority_predicate(self, flag: PriorityFlag) -> Predicate:
        if flag is PriorityFlag.PWD:
            return lambda record: record.subject.pwd
        if flag is PriorityFlag.FOUR_PS:
            return lambda record: record.subject.four_ps_beneficiary
        if flag is PriorityFlag.SOLO_PARENT:
            return lambda record: record.subject.solo_parent
        senior_age = self._senior_age
        return lambda record: (
            record.subject.age is not None and record.subject.age >= senior_age
        )
