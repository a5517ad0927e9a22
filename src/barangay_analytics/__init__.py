"""Barangay demand analytics following Clean Architecture layering."""

from .core.container import DIContainer
from .core.service import DashboardService

__all__ = [
    "DashboardService",
    "DIContainer",
    "accessors",
    "analytics",
    "core",
    "domain",
    "forecasting",
    "utils",
]
