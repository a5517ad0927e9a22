"""Short-horizon demand forecasting over a monthly request series."""

from __future__ import annotations

import logging
from statistics import linear_regression
from typing import Optional, Sequence, Tuple

from barangay_analytics.domain.interfaces import IEstimator, IForecaster
from barangay_analytics.domain.models import ForecastResult, SeriesPoint, Trend
from barangay_analytics.utils.numbers import round_half_up

MIN_HISTORY = 6
TREND_GATE = 0.5
DIVERGENCE_THRESHOLD = 0.10
SMOOTHING_ALPHA = 0.5


class LinearRegressionEstimator:
    """Ordinary least squares over index positions 0..n-1."""

    name = "linear_regression"

    def fit(self, counts: Sequence[int]) -> Tuple[float, float]:
        """Return ``(slope, intercept)``; needs at least two counts."""

        if len(counts) < 2:
            raise ValueError("linear regression needs at least two points")
        positions = list(range(len(counts)))
        slope, intercept = linear_regression(positions, [float(c) for c in counts])
        return slope, intercept

    def estimate(self, counts: Sequence[int]) -> float:
        slope, intercept = self.fit(counts)
        return intercept + slope * len(counts)


class ExponentialSmoothingEstimator:
    """Simple exponential smoothing seeded with the first observation."""

    name = "exponential_smoothing"

    def __init__(self, alpha: float = SMOOTHING_ALPHA):
        if not 0 < alpha <= 1:
            raise ValueError("alpha must be in (0, 1]")
        self.alpha = alpha

    def estimate(self, counts: Sequence[int]) -> float:
        if not counts:
            raise ValueError("exponential smoothing needs at least one point")
        level = float(counts[0])
        for count in counts[1:]:
            level = self.alpha * count + (1 - self.alpha) * level
        return level


class Forecaster(IForecaster):
    """Reconciles a regression and a smoothing estimate of next-period volume.

    The regression estimate is always primary. When the two estimates differ
    by more than ``divergence_threshold`` of the larger one, the smoothing
    estimate is surfaced too so callers can show the disagreement.
    """

    def __init__(
        self,
        regression: Optional[LinearRegressionEstimator] = None,
        smoothing: Optional[IEstimator] = None,
        *,
        min_history: int = MIN_HISTORY,
        trend_gate: float = TREND_GATE,
        divergence_threshold: float = DIVERGENCE_THRESHOLD,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if min_history < 2:
            raise ValueError("min_history must be at least 2")
        if trend_gate < 0:
            raise ValueError("trend_gate cannot be negative")
        if divergence_threshold < 0:
            raise ValueError("divergence_threshold cannot be negative")
        self._regression = regression or LinearRegressionEstimator()
        self._smoothing = smoothing or ExponentialSmoothingEstimator()
        self._min_history = min_history
        self._trend_gate = trend_gate
        self._divergence_threshold = divergence_threshold
        self._logger = logger or logging.getLogger(__name__)

    @property
    def min_history(self) -> int:
        return self._min_history

    def forecast(self, series: Sequence[SeriesPoint]) -> ForecastResult:
        history = len(series)
        if history < self._min_history:
            self._logger.debug(
                "forecast_insufficient_data",
                extra={"history_length": history, "min_history": self._min_history},
            )
            return ForecastResult.insufficient(history)

        counts = [point.count for point in series]
        slope, intercept = self._regression.fit(counts)
        regression_estimate = round_half_up(intercept + slope * history)
        smoothing_estimate = round_half_up(self._smoothing.estimate(counts))
        diverged = self._diverged(regression_estimate, smoothing_estimate)

        method: Tuple[str, ...] = (self._regression.name,)
        if diverged:
            method = (self._regression.name, self._smoothing.name)

        result = ForecastResult(
            has_forecast=True,
            history_length=history,
            next_period_estimate=regression_estimate,
            trend=Trend.from_delta(slope, self._trend_gate),
            method=method,
            slope=slope,
            intercept=intercept,
            regression_estimate=regression_estimate,
            smoothing_estimate=smoothing_estimate,
            secondary_estimate=smoothing_estimate if diverged else None,
            diverged=diverged,
        )
        self._logger.debug(
            "forecast_computed",
            extra={
                "history_length": history,
                "slope": slope,
                "regression_estimate": regression_estimate,
                "smoothing_estimate": smoothing_estimate,
                "diverged": diverged,
            },
        )
        return result

    def _diverged(self, regression_estimate: int, smoothing_estimate: int) -> bool:
        larger = max(regression_estimate, smoothing_estimate)
        if larger <= 0:
            return False
        gap = abs(regression_estimate - smoothing_estimate)
        return gap / larger > self._divergence_threshold
