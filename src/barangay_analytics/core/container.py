"""Dependency injection container for building fully-wired dashboard services."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import httpx

from barangay_analytics.accessors.http_accessor import AccessorConfig, HttpRecordAccessor
from barangay_analytics.accessors.memory import InMemoryRecordAccessor
from barangay_analytics.accessors.normalizer import RecordNormalizer
from barangay_analytics.accessors.sqlite_accessor import SQLiteRecordAccessor
from barangay_analytics.analytics.aggregator import Aggregator
from barangay_analytics.analytics.filters import FilterEngine
from barangay_analytics.analytics.series import TimeSeriesBuilder
from barangay_analytics.core.config import AnalyticsConfig
from barangay_analytics.core.service import DashboardService
from barangay_analytics.domain.exceptions import ConfigurationError
from barangay_analytics.domain.interfaces import IRecordAccessor
from barangay_analytics.domain.models import Record, RecordKind
from barangay_analytics.domain.vocabulary import Vocabulary
from barangay_analytics.forecasting.forecaster import (
    ExponentialSmoothingEstimator,
    Forecaster,
)


class DIContainer:
    """Factory helpers that assemble a DashboardService with default wiring."""

    @staticmethod
    def create_service(
        kind: RecordKind | str,
        *,
        config: Optional[AnalyticsConfig] = None,
        accessor: Optional[IRecordAccessor] = None,
        records: Optional[Iterable[Record]] = None,
        db_path: Optional[str | Path] = None,
        http_client: Optional[httpx.Client] = None,
        api_token: Optional[str] = None,
    ) -> DashboardService:
        """Build a service; the record source is chosen in argument order.

        An explicit ``accessor`` wins, then in-memory ``records``, then a
        SQLite snapshot at ``db_path``, then the HTTP API at
        ``config.api_base_url``.
        """

        resolved_kind = DIContainer._resolve_kind(kind)
        cfg = config or AnalyticsConfig.from_env()
        source = accessor or DIContainer._build_accessor(
            resolved_kind,
            cfg,
            records=records,
            db_path=db_path,
            http_client=http_client,
            api_token=api_token,
        )
        return DashboardService(
            source,
            resolved_kind,
            config=cfg,
            filter_engine=FilterEngine(
                senior_age=cfg.senior_age, timezone=cfg.timezone
            ),
            series_builder=TimeSeriesBuilder(cfg.timezone),
            aggregator=Aggregator(
                Vocabulary.for_kind(resolved_kind), senior_age=cfg.senior_age
            ),
            forecaster=DIContainer._build_forecaster(cfg),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _build_accessor(
        kind: RecordKind,
        config: AnalyticsConfig,
        *,
        records: Optional[Iterable[Record]],
        db_path: Optional[str | Path],
        http_client: Optional[httpx.Client],
        api_token: Optional[str],
    ) -> IRecordAccessor:
        if records is not None:
            return InMemoryRecordAccessor(records)
        if db_path is not None:
            return SQLiteRecordAccessor(db_path, kind)
        if config.api_base_url:
            accessor_config = AccessorConfig(
                base_url=config.api_base_url,
                timeout=float(config.timeout_seconds),
                max_retries=config.max_retries,
                api_token=api_token,
            )
            client = http_client or httpx.Client(timeout=accessor_config.timeout)
            return HttpRecordAccessor(
                client,
                accessor_config,
                kind,
                normalizer=RecordNormalizer(config.timezone),
            )
        raise ConfigurationError(
            "No record source configured",
            context={"hint": "pass records, db_path or set api_base_url"},
        )

    @staticmethod
    def _build_forecaster(config: AnalyticsConfig) -> Forecaster:
        return Forecaster(
            smoothing=ExponentialSmoothingEstimator(config.smoothing_alpha),
            min_history=config.min_history,
            trend_gate=config.trend_gate,
            divergence_threshold=config.divergence_threshold,
        )

    @staticmethod
    def _resolve_kind(kind: RecordKind | str) -> RecordKind:
        try:
            return RecordKind(kind)
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown record kind '{kind}'",
                context={"allowed": [k.value for k in RecordKind]},
            ) from exc
