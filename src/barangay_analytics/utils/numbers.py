"""Rounding and share helpers used by aggregates and forecasts."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, as dashboard figures do."""

    return int(math.floor(value + 0.5))


def percentage(part: int, total: int) -> int:
    """Whole-number share of ``part`` in ``total``; an empty total yields 0."""

    if total <= 0:
        return 0
    return round_half_up(part / total * 100)
