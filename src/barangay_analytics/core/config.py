"""Analytics engine configuration management helpers."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def _str_to_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid integer value: {value}") from exc


def _str_to_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Invalid number value: {value}") from exc


def _str_to_optional_int(value: str | None, default: Optional[int]) -> Optional[int]:
    if value is None:
        return default
    if value.strip().lower() in {"", "none", "off"}:
        return None
    return _str_to_int(value, 0)


def _str_or_none(value: str | None, default: Optional[str]) -> Optional[str]:
    if value is None:
        return default
    return value.strip() or None


@dataclass(frozen=True)
class AnalyticsConfig:
    """Immutable configuration object loaded from env or files.

    ``trend_gate`` and ``divergence_threshold`` are tuning constants carried
    over from the dashboards; ``ranking_window_days`` optionally limits the
    top-N rankings to recent records.
    """

    min_history: int = 6
    trend_gate: float = 0.5
    divergence_threshold: float = 0.10
    smoothing_alpha: float = 0.5
    top_n: int = 3
    senior_age: int = 60
    timezone: str = "Asia/Manila"
    ranking_window_days: Optional[int] = None
    api_base_url: Optional[str] = None
    timeout_seconds: int = 30
    max_retries: int = 3

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def from_env(cls) -> "AnalyticsConfig":
        defaults = cls()
        return cls(
            min_history=_str_to_int(
                os.getenv("ANALYTICS_MIN_HISTORY"), defaults.min_history
            ),
            trend_gate=_str_to_float(
                os.getenv("ANALYTICS_TREND_GATE"), defaults.trend_gate
            ),
            divergence_threshold=_str_to_float(
                os.getenv("ANALYTICS_DIVERGENCE_THRESHOLD"),
                defaults.divergence_threshold,
            ),
            smoothing_alpha=_str_to_float(
                os.getenv("ANALYTICS_SMOOTHING_ALPHA"), defaults.smoothing_alpha
            ),
            top_n=_str_to_int(os.getenv("ANALYTICS_TOP_N"), defaults.top_n),
            senior_age=_str_to_int(
                os.getenv("ANALYTICS_SENIOR_AGE"), defaults.senior_age
            ),
            timezone=os.getenv("ANALYTICS_TIMEZONE", defaults.timezone),
            ranking_window_days=_str_to_optional_int(
                os.getenv("ANALYTICS_RANKING_WINDOW_DAYS"),
                defaults.ranking_window_days,
            ),
            api_base_url=_str_or_none(
                os.getenv("ANALYTICS_API_BASE_URL"), defaults.api_base_url
            ),
            timeout_seconds=_str_to_int(
                os.getenv("ANALYTICS_TIMEOUT_SECONDS"), defaults.timeout_seconds
            ),
            max_retries=_str_to_int(
                os.getenv("ANALYTICS_MAX_RETRIES"), defaults.max_retries
            ),
        )

    @classmethod
    def from_file(cls, path: str) -> "AnalyticsConfig":
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        raw = file_path.read_text()
        data: Dict[str, Any]
        suffix = file_path.suffix.lower()
        if suffix == ".json":
            data = json.loads(raw)
        elif suffix in {".yaml", ".yml"}:
            data = cls._load_yaml(raw)
        else:
            raise ValueError("Unsupported config format. Use JSON or YAML.")
        return cls(**cls._merge_with_defaults(data))

    def validate(self) -> None:
        if self.min_history < 2:
            raise ValueError("min_history must be at least 2")
        if self.trend_gate < 0:
            raise ValueError("trend_gate must be non-negative")
        if self.divergence_threshold < 0:
            raise ValueError("divergence_threshold must be non-negative")
        if not 0 < self.smoothing_alpha <= 1:
            raise ValueError("smoothing_alpha must be in (0, 1]")
        if self.top_n <= 0:
            raise ValueError("top_n must be greater than zero")
        if self.senior_age < 0:
            raise ValueError("senior_age must be non-negative")
        if self.ranking_window_days is not None and self.ranking_window_days <= 0:
            raise ValueError("ranking_window_days must be greater than zero")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone '{self.timezone}'") from exc

    @classmethod
    def _merge_with_defaults(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        defaults = cls()
        known = [f.name for f in fields(cls)]
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ValueError(f"Unknown configuration keys: {unknown}")
        return {name: data.get(name, getattr(defaults, name)) for name in known}

    @staticmethod
    def _load_yaml(raw: str) -> Dict[str, Any]:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to parse YAML config files") from exc
        return yaml.safe_load(raw) or {}
