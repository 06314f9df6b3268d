"""Open-EPI Soil — most probable WRB soil types at the point, with retry.

API: https://api.openepi.io/soil/type (no key required)
Returns ``properties.probabilities``: [{soil_type, probability}, ...].

Invariants:
    - Retries only on HTTP status or transport failure, never on a missing field
    - Sleeps policy.delay_for(n) after failed attempt n; never after the last
    - Exhaustion → SourceErr naming the attempt count and last failure detail
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx

from greenpoint.core.domain_types import SourceName
from greenpoint.core.errors import (
    ErrorContext, ProviderStatusError, SourceError, TransportError,
)
from greenpoint.core.retry_policy import RetryPolicy
from greenpoint.core.source_result import SourceOk, SourceResult
from greenpoint.infrastructure.sources.base import SourceClient, dig

logger = logging.getLogger(__name__)

TOP_K = 3

Sleep = Callable[[float], Awaitable[None]]


class SoilTypeClient(SourceClient):
    source = SourceName.SOIL_PROBABILITIES
    provider = "Soil API"

    def __init__(
        self,
        http: httpx.AsyncClient,
        url: str,
        timeout_seconds: float,
        policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        super().__init__(http, url, timeout_seconds)
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def _run(self, latitude: float, longitude: float) -> SourceResult:
        attempts = self.policy.max_attempts
        last_error: SourceError | None = None
        for attempt in range(1, attempts + 1):
            try:
                return SourceOk(await self._fetch_once(latitude, longitude))
            except (ProviderStatusError, TransportError) as e:
                last_error = e
                logger.warning(
                    f"Soil API error (attempt {attempt}/{attempts}): {e.message}",
                    extra={"source": self.source.value, "attempt": attempt},
                )
            if self.policy.should_retry(attempt):
                await self._sleep(self.policy.delay_for(attempt))

        raise SourceError(
            f"Soil API failed after {attempts} attempts: {_failure_detail(last_error)}",
            self.source.value,
            raw=last_error.raw if last_error else None,
            context=ErrorContext(attempt=attempts),
        )

    def build_params(self, latitude: float, longitude: float) -> dict[str, Any]:
        return {"lon": str(longitude), "lat": str(latitude), "top_k": str(TOP_K)}

    def extract(self, data: Any) -> Any:
        probabilities = dig(data, "properties", "probabilities")
        if not probabilities:
            raise self._missing("Soil probability data", data)
        return probabilities


def _failure_detail(error: SourceError | None) -> str:
    if isinstance(error, ProviderStatusError):
        return str(error.status_code)
    if error is not None:
        return error.message
    return "unknown error"
