"""Filtering, aggregation and time-series construction."""

from .aggregator import Aggregator
from .filters import FilterEngine
from .series import TimeSeriesBuilder

__all__ = ["Aggregator", "FilterEngine", "TimeSeriesBuilder"]
