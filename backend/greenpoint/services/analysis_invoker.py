"""Analysis Invoker — one generative-text call per request, failures captured.

Invariants:
    - analyze() always returns an AnalysisResult, never raises
    - No client (no credential) → NOT_CONFIGURED immediately, zero network calls
    - Backend exception → BACKEND_ERROR with the message in details
    - Own timeout → TIMEOUT; never re-triggers aggregation
    - Empty or refused content → EMPTY_RESPONSE with stop_reason in details;
      an empty success is never returned

Design Decisions:
    - Optional client injected in the constructor: behavior fully determined at
      construction, no ambient settings lookup at call time
    - Fixed low temperature and bounded max_tokens (ADR: reproducible analyses)
"""

import asyncio
import logging
from typing import Protocol

from greenpoint.config import Settings
from greenpoint.core.domain_types import AnalysisCode
from greenpoint.core.records import AggregatedRecord, AnalysisResult
from greenpoint.core.scoring import extract_scores
from greenpoint.infrastructure.anthropic_client import ResilientAnthropicClient
from greenpoint.services.analysis_prompt import SYSTEM_PROMPT, build_user_message

logger = logging.getLogger(__name__)

_REFUSAL_STOP_REASONS = {"refusal"}


class MessageClient(Protocol):
    async def create_message(
        self, *, model: str, max_tokens: int, temperature: float,
        system: str, messages: list,
    ): ...


class AnalysisInvoker:
    """Wraps the generative backend behind a never-raising analyze()."""

    def __init__(
        self,
        client: MessageClient | None,
        model: str,
        max_tokens: int = 4096,
        temperature: float = 0.1,
        timeout_seconds: float = 90.0,
    ) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def analyze(self, record: AggregatedRecord) -> AnalysisResult:
        if self.client is None:
            logger.warning(
                "Analysis backend not configured (ANTHROPIC_API_KEY missing), "
                "returning placeholder result",
                extra={"error_code": AnalysisCode.NOT_CONFIGURED.value},
            )
            return AnalysisResult.failed(
                AnalysisCode.NOT_CONFIGURED,
                "Analysis backend not configured",
                "Set ANTHROPIC_API_KEY to enable AI suitability analysis.",
            )

        messages = [{"role": "user", "content": build_user_message(record)}]
        try:
            response = await asyncio.wait_for(
                self.client.create_message(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    system=SYSTEM_PROMPT,
                    messages=messages,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Analysis call timed out after {self.timeout_seconds}s",
                extra={"error_code": AnalysisCode.TIMEOUT.value},
            )
            return AnalysisResult.failed(
                AnalysisCode.TIMEOUT,
                "Failed to get analysis from AI backend.",
                f"Timed out after {self.timeout_seconds}s",
            )
        except Exception as e:
            logger.error(
                f"Calling analysis backend failed: {e}",
                extra={"error_code": AnalysisCode.BACKEND_ERROR.value},
            )
            return AnalysisResult.failed(
                AnalysisCode.BACKEND_ERROR,
                "Failed to get analysis from AI backend.",
                str(e) or type(e).__name__,
            )

        return _result_from_response(response)


def _result_from_response(response: object) -> AnalysisResult:
    text = "\n".join(
        b.text for b in getattr(response, "content", None) or []
        if getattr(b, "type", None) == "text" and getattr(b, "text", None)
    ).strip()
    stop_reason = getattr(response, "stop_reason", None)

    if not text or stop_reason in _REFUSAL_STOP_REASONS:
        logger.warning(
            f"Analysis backend returned no usable content (stop_reason={stop_reason})",
            extra={"error_code": AnalysisCode.EMPTY_RESPONSE.value},
        )
        return AnalysisResult.failed(
            AnalysisCode.EMPTY_RESPONSE,
            "AI backend returned an empty or blocked response.",
            f"stop_reason={stop_reason}",
        )
    return AnalysisResult.ok(text, extract_scores(text))


def build_analysis_invoker(settings: Settings) -> AnalysisInvoker:
    """Construct the invoker; client is None when no key is configured."""
    client = None
    if settings.anthropic_api_key:
        client = ResilientAnthropicClient(
            api_key=settings.anthropic_api_key,
            max_retries=settings.anthropic_max_retries,
            base_delay_ms=settings.anthropic_base_delay_ms,
            max_delay_ms=settings.anthropic_max_delay_ms,
            timeout_seconds=settings.analysis_timeout_seconds,
        )
    return AnalysisInvoker(
        client,
        model=settings.analysis_model,
        max_tokens=settings.analysis_max_tokens,
        temperature=settings.analysis_temperature,
        timeout_seconds=settings.analysis_timeout_seconds,
    )
