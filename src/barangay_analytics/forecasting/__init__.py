"""Next-period forecasting and descriptive insights."""

from .forecaster import (
    ExponentialSmoothingEstimator,
    Forecaster,
    LinearRegressionEstimator,
)
from .insights import InsightSummarizer

__all__ = [
    "ExponentialSmoothingEstimator",
    "Forecaster",
    "InsightSummarizer",
    "LinearRegressionEstimator",
]
