"""Anthropic Analysis Client — AsyncAnthropic behind a bounded retry loop.

Invariants:
    - 429 and transient failures (5xx, 529 overloaded, connection) are retried
      up to max_retries; Retry-After wins over computed backoff when present
    - Timeouts and other 4xx fail on the first attempt
    - Every failure leaves as AnthropicAPIError; SDK exceptions never escape

Design Decisions:
    - SDK retries disabled (max_retries=0): one retry loop, one log line per attempt
    - Classification is a pure function of the SDK exception, tested without I/O
    - sleep and jitter injected, same seam as the soil client
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable

import anthropic
from anthropic import APIConnectionError, APIError, APIStatusError, APITimeoutError, RateLimitError

from greenpoint.core.errors import AnthropicAPIError
from greenpoint.core.retry_policy import jittered_exponential_ms

logger = logging.getLogger(__name__)

RATE_LIMIT = "rate_limit"
TRANSIENT = "transient"

_OVERLOADED_STATUS = 529


def classify_api_error(e: APIError) -> str | None:
    """RATE_LIMIT, TRANSIENT, or None for errors that must not be retried."""
    if isinstance(e, RateLimitError):
        return RATE_LIMIT
    if isinstance(e, APIConnectionError):
        return TRANSIENT
    if isinstance(e, APIStatusError) and (
        e.status_code >= 500 or e.status_code == _OVERLOADED_STATUS
    ):
        return TRANSIENT
    return None


def retry_after_ms(e: APIError) -> int | None:
    """Retry-After header in milliseconds, if the response carried one."""
    response = getattr(e, "response", None)
    if response is None:
        return None
    try:
        val = response.headers.get("retry-after")
        return int(float(val) * 1000) if val else None
    except ValueError:
        return None


class ResilientAnthropicClient:
    """Sends one analysis request, retrying rate limits and transient failures."""

    def __init__(
        self,
        api_key: str,
        max_retries: int = 2,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 20_000,
        timeout_seconds: float = 90.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        jitter: Callable[[], float] = lambda: random.uniform(0.75, 1.25),  # nosec B311
    ):
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key, timeout=timeout_seconds, max_retries=0,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._sleep = sleep
        self._jitter = jitter

    async def create_message(
        self, *, model: str, max_tokens: int, temperature: float,
        system: str, messages: list,
    ):
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                response = await self.client.messages.create(
                    model=model,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    system=system,
                    messages=messages,
                )
            except APITimeoutError:
                raise AnthropicAPIError("API timeout", "timeout")
            except APIError as e:
                kind = classify_api_error(e)
                if kind is None:
                    raise AnthropicAPIError(str(e), "client_error")
                hinted = retry_after_ms(e) if kind == RATE_LIMIT else None
                if attempt >= attempts:
                    raise AnthropicAPIError(
                        f"{kind} after {attempts} attempts: {e}", kind,
                        retry_after_ms=hinted,
                    )
                delay_ms = hinted or self.backoff_ms(attempt)
                logger.warning(
                    f"Analysis backend {kind}, retrying in {delay_ms}ms",
                    extra={
                        "source": "anthropic", "attempt": attempt,
                        "status_code": getattr(e, "status_code", None),
                    },
                )
                await self._sleep(delay_ms / 1000)
                continue

            usage = getattr(response, "usage", None)
            logger.info(
                "Analysis backend responded",
                extra={
                    "source": "anthropic", "attempt": attempt,
                    "input_tokens": getattr(usage, "input_tokens", None),
                    "output_tokens": getattr(usage, "output_tokens", None),
                },
            )
            return response

    def backoff_ms(self, attempt: int) -> int:
        return jittered_exponential_ms(
            attempt, self.base_delay_ms, self.max_delay_ms, self._jitter(),
        )
