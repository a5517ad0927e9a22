"""Composite result handed to dashboard and export renderers."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .criteria import FilterCriteria
from .models import (
    Breakdown,
    Dimension,
    ForecastResult,
    InsightSummary,
    Label,
    RecordKind,
    SeriesPoint,
    StatusBucket,
    StatusSummary,
    YearComparison,
)


class DashboardReport(BaseModel):
    """Everything one dashboard view renders for a single filter selection."""

    model_config = ConfigDict(frozen=True)

    kind: RecordKind
    generated_at: datetime
    criteria: FilterCriteria
    total_records: int = Field(..., ge=0)
    filtered_records: int = Field(..., ge=0)
    status_summary: StatusSummary
    breakdowns: Dict[Dimension, Breakdown] = Field(default_factory=dict)
    rankings: Dict[Dimension, List[Label]] = Field(default_factory=dict)
    year_comparisons: Dict[Dimension, List[YearComparison]] = Field(
        default_factory=dict
    )
    monthly_status: List[StatusBucket] = Field(default_factory=list)
    annual_status: List[StatusBucket] = Field(default_factory=list)
    monthly_volume: List[SeriesPoint] = Field(default_factory=list)
    priority_counts: Dict[str, int] = Field(default_factory=dict)
    pwd_categories: Dict[str, int] = Field(default_factory=dict)
    series: List[SeriesPoint] = Field(default_factory=list)
    sparkline: List[SeriesPoint] = Field(default_factory=list)
    forecast: ForecastResult
    insights: InsightSummary
