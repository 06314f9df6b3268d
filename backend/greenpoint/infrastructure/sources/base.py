"""Source Client Base — shared request, error-body and extraction handling.

Invariants:
    - Non-2xx → ProviderStatusError carrying the parsed (or synthesized) body
    - httpx transport failures (connect, read, timeout) → TransportError
    - 2xx without the expected sub-structure → MissingFieldError
    - fetch() converts every SourceError into SourceErr; nothing escapes

Design Decisions:
    - Errors raised internally, captured once in fetch(): subclasses read like
      straight-line code (build params → get → extract)
    - Unexpected exceptions also captured (logged with traceback): one broken
      provider must never fail the whole aggregation
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from greenpoint.core.domain_types import SourceName
from greenpoint.core.errors import (
    MissingFieldError, ProviderStatusError, SourceError, SourceTimeoutError,
    TransportError,
)
from greenpoint.core.source_result import SourceErr, SourceOk, SourceResult

logger = logging.getLogger(__name__)


class SourceClient(ABC):
    """Adapter over one environmental data provider."""

    source: SourceName
    provider: str

    def __init__(self, http: httpx.AsyncClient, url: str, timeout_seconds: float):
        self.http = http
        self.url = url
        self.timeout_seconds = timeout_seconds

    async def fetch(self, latitude: float, longitude: float) -> SourceResult:
        """Fetch and normalize. Always returns a SourceResult."""
        try:
            return await self._run(latitude, longitude)
        except SourceError as e:
            logger.warning(
                f"{self.provider} fetch failed: {e.message}",
                extra={"source": self.source.value, "error_code": e.code},
            )
            return SourceErr(e.message, e.raw)
        except Exception as e:
            logger.error(
                f"Unexpected error in {self.provider} client: {e}",
                exc_info=True, extra={"source": self.source.value},
            )
            return SourceErr(f"Failed to fetch {self.provider} data: {e}")

    async def _run(self, latitude: float, longitude: float) -> SourceResult:
        """Single attempt. Overridden by clients with a retry policy."""
        return SourceOk(await self._fetch_once(latitude, longitude))

    async def _fetch_once(self, latitude: float, longitude: float) -> Any:
        logger.info(
            f"Fetching {self.provider} data for lat: {latitude}, lon: {longitude}",
            extra={"source": self.source.value},
        )
        data = await self._get_json(self.build_params(latitude, longitude))
        return self.extract(data)

    @abstractmethod
    def build_params(self, latitude: float, longitude: float) -> dict[str, Any]:
        """Provider-specific query parameters."""

    @abstractmethod
    def extract(self, data: Any) -> Any:
        """Pull the needed sub-structure or raise MissingFieldError."""

    async def _get_json(self, params: dict[str, Any]) -> Any:
        try:
            response = await self.http.get(
                self.url, params=params, timeout=self.timeout_seconds,
            )
        except httpx.TimeoutException:
            raise SourceTimeoutError(
                f"{self.provider} request timed out after {self.timeout_seconds}s",
                self.source.value,
            )
        except httpx.TransportError as e:
            raise TransportError(
                f"Failed to fetch {self.provider} data: {str(e) or type(e).__name__}",
                self.source.value,
            )

        if not response.is_success:
            raise ProviderStatusError(
                self.provider, self.source.value, response.status_code,
                error_body(response, self.provider),
            )
        try:
            return response.json()
        except ValueError:
            raise MissingFieldError(
                f"{self.provider} returned a non-JSON body",
                self.source.value, raw=response.text[:500],
            )

    def _missing(self, what: str, data: Any) -> MissingFieldError:
        return MissingFieldError(
            f"{what} not found in {self.provider} response",
            self.source.value, raw=data,
        )


def error_body(response: httpx.Response, provider: str) -> Any:
    """Parsed JSON error body, or a synthesized message with the status."""
    try:
        return response.json()
    except ValueError:
        return {
            "message": (
                f"{provider} responded with {response.status_code} "
                f"{response.reason_phrase}"
            ).strip(),
        }


def dig(data: Any, *keys: str) -> Any:
    """Walk nested dicts; None as soon as a level is missing."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data
