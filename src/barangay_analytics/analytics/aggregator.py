"""Pure business-logic helpers for categorical aggregation."""

from __future__ import annotations

import calendar
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from barangay_analytics.domain.exceptions import UnsupportedDimensionError
from barangay_analytics.domain.interfaces import IAggregator
from barangay_analytics.domain.models import (
    Breakdown,
    Dimension,
    Label,
    Record,
    Status,
    StatusBucket,
    StatusCard,
    StatusSummary,
    YearComparison,
)
from barangay_analytics.domain.vocabulary import (
    MONTH_LABELS,
    PWD_CATEGORIES,
    Vocabulary,
    classify_pwd_type,
)
from barangay_analytics.utils.numbers import percentage
from barangay_analytics.utils.text import normalize_label, normalize_zone

DEFAULT_SENIOR_AGE = 60

PRIORITY_LABELS = ("Senior Citizen", "Solo Parent", "4Ps Beneficiary", "PWD")


class Aggregator(IAggregator):
    """Performs read-only counting over a filtered record subset.

    Every breakdown accounts for each record exactly once: values that are
    missing, blank or outside a fixed vocabulary land in the unknown bucket.
    """

    def __init__(
        self, vocabulary: Vocabulary, *, senior_age: int = DEFAULT_SENIOR_AGE
    ) -> None:
        self._vocabulary = vocabulary
        self._senior_age = senior_age
        self._extractors: Dict[Dimension, Callable[[Record], Optional[Label]]] = {
            Dimension.STATUS: self._status_label,
            Dimension.CATEGORY: self._category_label,
            Dimension.ZONE: self._zone_label,
            Dimension.GENDER: lambda record: normalize_label(record.subject.gender),
            Dimension.RESPONDENT_GENDER: self._respondent_gender_label,
            Dimension.EMPLOYMENT: lambda record: normalize_label(
                record.subject.employment_status
            ),
            Dimension.WEEKDAY: lambda record: calendar.day_name[
                record.created_at.weekday()
            ],
            Dimension.AGE: self._age_label,
            Dimension.SUBJECT_NAME: self._name_label,
            Dimension.MONTH: lambda record: MONTH_LABELS[record.created_at.month - 1],
            Dimension.YEAR: lambda record: record.created_at.year,
        }

    @property
    def vocabulary(self) -> Vocabulary:
        return self._vocabulary

    def count_by(self, records: Sequence[Record], dimension: Dimension | str) -> Breakdown:
        dimension = self._resolve_dimension(dimension)
        extract = self._extractors[dimension]
        counts: Dict[Label, int] = {
            label: 0 for label in self.fixed_labels(dimension) or ()
        }
        unknown = 0
        for record in records:
            label = extract(record)
            if label is None:
                unknown += 1
            else:
                counts[label] = counts.get(label, 0) + 1
        return Breakdown(dimension=dimension, counts=counts, unknown=unknown)

    def top_n(
        self, records: Sequence[Record], dimension: Dimension | str, n: int = 3
    ) -> List[Label]:
        if n <= 0:
            return []
        dimension = self._resolve_dimension(dimension)
        extract = self._extractors[dimension]
        counts = self.count_by(records, dimension).counts
        # Ties keep the order in which labels first appear in ``records``.
        first_seen: Dict[Label, int] = {}
        for record in records:
            label = extract(record)
            if label is not None:
                first_seen.setdefault(label, len(first_seen))
        ranked = sorted(
            (label for label in first_seen if counts.get(label, 0) > 0),
            key=lambda label: (-counts[label], first_seen[label]),
        )
        return ranked[:n]

    def compare_years(
        self,
        records: Sequence[Record],
        dimension: Dimension | str,
        value: Label,
        current_year: int,
    ) -> YearComparison:
        dimension = self._resolve_dimension(dimension)
        target = self._normalize_value(dimension, value)
        extract = self._extractors[dimension]
        this_year = last_year = 0
        for record in records:
            if extract(record) != target:
                continue
            if record.created_at.year == current_year:
                this_year += 1
            elif record.created_at.year == current_year - 1:
                last_year += 1
        return YearComparison(
            label=target, year=current_year, this_year=this_year, last_year=last_year
        )

    def compare_years_all(
        self, records: Sequence[Record], dimension: Dimension | str, current_year: int
    ) -> List[YearComparison]:
        """This-year vs last-year counts for every label of ``dimension``."""

        dimension = self._resolve_dimension(dimension)
        labels = self.fixed_labels(dimension)
        if labels is None:
            labels = self.count_by(records, dimension).labels
        return [
            self.compare_years(records, dimension, label, current_year)
            for label in labels
        ]

    def status_summary(self, records: Sequence[Record]) -> StatusSummary:
        breakdown = self.count_by(records, Dimension.STATUS)
        total = len(records)
        cards = tuple(
            StatusCard(
                status=status,
                count=breakdown.get(status.value),
                percent=percentage(breakdown.get(status.value), total),
            )
            for status in self._vocabulary.statuses
        )
        return StatusSummary(cards=cards, total=total, unknown=breakdown.unknown)

    def status_by_month(
        self, records: Sequence[Record], year: Optional[int] = None
    ) -> List[StatusBucket]:
        """Twelve month bars of per-status counts; all years pooled unless ``year``."""

        scoped = [
            record for record in records if year is None or record.created_at.year == year
        ]
        return [
            self._status_bucket(
                label,
                (record for record in scoped if record.created_at.month == index + 1),
            )
            for index, label in enumerate(MONTH_LABELS)
        ]

    def status_by_year(
        self, records: Sequence[Record], years: Iterable[int]
    ) -> List[StatusBucket]:
        return [
            self._status_bucket(
                str(year),
                (record for record in records if record.created_at.year == year),
            )
            for year in years
        ]

    def priority_counts(self, records: Sequence[Record]) -> Dict[str, int]:
        """Counts per priority sector; a record may belong to several sectors."""

        counts = {label: 0 for label in PRIORITY_LABELS}
        for record in records:
            subject = record.subject
            if subject.age is not None and subject.age >= self._senior_age:
                counts["Senior Citizen"] += 1
            if subject.solo_parent:
                counts["Solo Parent"] += 1
            if subject.four_ps_beneficiary:
                counts["4Ps Beneficiary"] += 1
            if subject.pwd:
                counts["PWD"] += 1
        return counts

    def pwd_categories(self, records: Sequence[Record]) -> Dict[str, int]:
        counts = {category: 0 for category in PWD_CATEGORIES}
        for record in records:
            if not record.subject.pwd:
                continue
            category = classify_pwd_type(record.subject.pwd_type)
            if category is not None:
                counts[category] += 1
        return counts

    def fixed_labels(self, dimension: Dimension) -> Optional[List[Label]]:
        """Labels always emitted for ``dimension``, or None for open dimensions."""

        if dimension is Dimension.STATUS:
            return [status.value for status in self._vocabulary.statuses]
        if dimension is Dimension.CATEGORY:
            return list(self._vocabulary.categories)
        if dimension is Dimension.ZONE:
            return list(self._vocabulary.zones)
        if dimension is Dimension.MONTH:
            return list(MONTH_LABELS)
        return None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _resolve_dimension(dimension: Dimension | str) -> Dimension:
        try:
            return Dimension(dimension)
        except ValueError as exc:
            raise UnsupportedDimensionError(
                context={"dimension": dimension}
            ) from exc

    def _normalize_value(self, dimension: Dimension, value: Label) -> Label:
        if isinstance(value, Status):
            return value.value
        if dimension is Dimension.ZONE:
            return normalize_zone(value) or value
        if dimension in {
            Dimension.GENDER,
            Dimension.RESPONDENT_GENDER,
            Dimension.EMPLOYMENT,
        }:
            return normalize_label(value) or value
        if dimension is Dimension.STATUS:
            status = Status.from_label(value)
            return status.value if status is not None else value
        return value

    def _status_bucket(self, label: str, records: Iterable[Record]) -> StatusBucket:
        counts = {status.value: 0 for status in self._vocabulary.statuses}
        for record in records:
            status_label = self._status_label(record)
            if status_label is not None:
                counts[status_label] += 1
        return StatusBucket(label=label, counts=counts)

    def _status_label(self, record: Record) -> Optional[str]:
        if record.status is None or record.status not in self._vocabulary.statuses:
            return None
        return record.status.value

    def _category_label(self, record: Record) -> Optional[str]:
        if record.category in self._vocabulary.categories:
            return record.category
        return None

    def _zone_label(self, record: Record) -> Optional[str]:
        zone = normalize_zone(record.subject.zone)
        if zone in self._vocabulary.zones:
            return zone
        return None

    @staticmethod
    def _respondent_gender_label(record: Record) -> Optional[str]:
        if record.respondent is None:
            return None
        return normalize_label(record.respondent.gender)

    @staticmethod
    def _age_label(record: Record) -> Optional[int]:
        age = record.subject.age
        if age is None or age < 0:
            return None
        return age

    @staticmethod
    def _name_label(record: Record) -> Optional[str]:
        name = (record.subject.full_name or "").strip()
        return name or None
