"""Fixed label sets that keep dashboard charts stable across filters."""

from __future__ import annotations

import calendar
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from .models import RecordKind, Status

REQUEST_STATUSES: Tuple[Status, ...] = (
    Status.PENDING,
    Status.VERIFIED,
    Status.APPROVED,
    Status.DECLINED,
)

CASE_STATUSES: Tuple[Status, ...] = (
    Status.PENDING,
    Status.ONGOING,
    Status.SETTLED,
    Status.ENDORSED,
)

REQUEST_CATEGORIES: Tuple[str, ...] = (
    "Barangay Clearance",
    "Barangay Indigency",
    "Barangay Residency",
    "Business Permit",
)

CASE_CATEGORIES: Tuple[str, ...] = (
    "Physical Harm",
    "Verbal Abuse",
    "Property Dispute",
    "Noise Disturbance",
    "Vandalism/Theft",
    "Family Conflict",
    "Animal Nuisance",
    "Business-Related",
    "Youth-Related",
    "Illegal Activities",
    "Barangay Ordinance Violation",
)

DEFAULT_ZONES: Tuple[str, ...] = tuple(f"Purok {number}" for number in range(1, 8))

MONTH_LABELS: Tuple[str, ...] = tuple(calendar.month_abbr[month] for month in range(1, 13))

PWD_CATEGORIES: Tuple[str, ...] = (
    "Visual Disability",
    "Hearing Disability",
    "Speech and Language Disability",
    "Orthopedic Disability",
    "Mental Disability",
    "Psychosocial Disability",
    "Learning Disability",
    "Multiple Disabilities",
    "Chronic Illness",
    "Others",
)

# Checked in order; legacy free-text types are matched by keyword.
_PWD_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("visual", "Visual Disability"),
    ("hearing", "Hearing Disability"),
    ("speech", "Speech and Language Disability"),
    ("orthopedic", "Orthopedic Disability"),
    ("mental", "Mental Disability"),
    ("psychosocial", "Psychosocial Disability"),
    ("learning", "Learning Disability"),
    ("multiple", "Multiple Disabilities"),
    ("chronic", "Chronic Illness"),
    ("other", "Others"),
)


def classify_pwd_type(raw: Optional[str]) -> Optional[str]:
    """Map a recorded disability type onto one of the fixed PWD categories."""

    if not raw:
        return None
    lowered = raw.lower()
    for keyword, category in _PWD_KEYWORDS:
        if keyword in lowered:
            return category
    return None


class Vocabulary(BaseModel):
    """Known statuses, categories and zones for one record kind."""

    model_config = ConfigDict(frozen=True)

    kind: RecordKind
    statuses: Tuple[Status, ...]
    categories: Tuple[str, ...]
    zones: Tuple[str, ...] = DEFAULT_ZONES

    @field_validator("zones")
    @classmethod
    def validate_zones(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(set(value)) != len(value):
            raise ValueError("zones must be unique")
        return value

    @classmethod
    def for_kind(
        cls, kind: RecordKind, zones: Tuple[str, ...] = DEFAULT_ZONES
    ) -> "Vocabulary":
        if kind is RecordKind.REQUEST:
            return cls(
                kind=kind,
                statuses=REQUEST_STATUSES,
                categories=REQUEST_CATEGORIES,
                zones=zones,
            )
        return cls(
            kind=kind, statuses=CASE_STATUSES, categories=CASE_CATEGORIES, zones=zones
        )
