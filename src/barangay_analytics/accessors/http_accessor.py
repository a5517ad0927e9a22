"""HTTP accessor that pulls records from the office application's JSON API."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from barangay_analytics.accessors.normalizer import RecordNormalizer
from barangay_analytics.domain.exceptions import (
    AccessorError,
    AccessorUnavailableError,
)
from barangay_analytics.domain.interfaces import IRecordAccessor
from barangay_analytics.domain.models import Record, RecordKind

ENDPOINTS = {
    RecordKind.REQUEST: "/api/document/get-all-documents",
    RecordKind.CASE: "/api/blotter/get-all-blotters",
}


@dataclass(frozen=True)
class AccessorConfig:
    """Connection settings for the record API."""

    base_url: str
    timeout: float = 30.0
    max_retries: int = 3
    backoff_factor: float = 0.5
    api_token: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must be provided")
        if self.timeout <= 0:
            raise ValueError("timeout must be greater than zero")
        if self.max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        if self.backoff_factor <= 0:
            raise ValueError("backoff_factor must be greater than zero")


class HttpRecordAccessor(IRecordAccessor):
    """Fetches every request or case once per analysis cycle.

    Throttling, server errors and transport failures are retried with
    exponential backoff; any other failure surfaces as ``AccessorError``.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        config: AccessorConfig,
        kind: RecordKind,
        *,
        normalizer: Optional[RecordNormalizer] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.kind = kind
        self._http = http_client
        self._normalizer = normalizer or RecordNormalizer()
        self._endpoint = f"{config.base_url.rstrip('/')}{ENDPOINTS[kind]}"
        self.logger = logger or logging.getLogger(
            f"{__name__}.{self.__class__.__name__}"
        )

    def fetch(self) -> List[Record]:
        for attempt in range(self.config.max_retries + 1):
            self.logger.debug(
                "accessor_fetch",
                extra={"endpoint": self._endpoint, "attempt": attempt},
            )
            try:
                payload = self._request()
            except AccessorUnavailableError as exc:
                if attempt == self.config.max_retries:
                    self.logger.error(
                        "Record source unavailable after retries", exc_info=exc
                    )
                    raise
                delay = self._backoff_delay(attempt)
                self.logger.warning(
                    "Record source unavailable, backing off",
                    extra={"delay": delay, "context": exc.context},
                )
                self._sleep(delay)
                continue
            records = self._normalizer.normalize_many(payload, self.kind)
            self.logger.info(
                "accessor_fetched",
                extra={"kind": self.kind.value, "records": len(records)},
            )
            return records

        raise AccessorError("Failed to fetch records")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _request(self) -> List[Dict[str, Any]]:
        headers = {"Accept": "application/json"}
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        try:
            http_response = self._http.get(
                self._endpoint, headers=headers, timeout=self.config.timeout
            )
        except httpx.TransportError as exc:
            raise AccessorUnavailableError(
                "Record source unreachable", context={"endpoint": self._endpoint}
            ) from exc
        return self._map_response(http_response)

    def _map_response(self, http_response: httpx.Response) -> List[Dict[str, Any]]:
        status = http_response.status_code
        if status == 429 or status >= 500:
            raise AccessorUnavailableError(
                "Record source unavailable", context={"status_code": status}
            )
        if status >= 400:
            raise AccessorError(
                "Record request rejected", context={"status_code": status}
            )

        try:
            data = http_response.json()
        except ValueError as exc:
            raise AccessorError(
                "Record source returned invalid JSON", context={"status_code": status}
            ) from exc

        # Some endpoints return a bare list instead of the success envelope.
        if isinstance(data, list):
            return data
        if not isinstance(data, dict) or data.get("success") is False:
            raise AccessorError(
                "Record source reported failure",
                context={"error": data.get("error") if isinstance(data, dict) else None},
            )
        records = data.get("data")
        if not isinstance(records, list):
            raise AccessorError("Malformed record payload", context={"keys": sorted(data)})
        return records

    def _backoff_delay(self, attempt: int) -> float:
        return self.config.backoff_factor * math.pow(2, attempt)

    def _sleep(self, delay: float) -> None:
        time.sleep(delay)
