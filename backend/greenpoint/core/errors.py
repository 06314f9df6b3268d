"""Error Hierarchy — typed, categorized exceptions for all GreenPoint failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Request errors (400-level) stop the pipeline before any network call
    - Source and analysis errors never cross the API boundary raw: they are
      captured into SourceErr slots / AnalysisResult by their owners
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with GreenPointError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    scientific_name: str | None = None
    source: str | None = None
    attempt: int | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class GreenPointError(Exception):
    """Base exception for all GreenPoint errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "scientific_name": self.context.scientific_name,
                    "source": self.context.source,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Request Errors (400-level) ─────────────────────────────────

class ValidationError(GreenPointError):
    """Request field missing or malformed."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class SpeciesNotFoundError(GreenPointError):
    """Scientific name not present in the species table."""
    def __init__(self, scientific_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.scientific_name = scientific_name
        super().__init__(
            f"Plant data not found for {scientific_name}.",
            "SPECIES_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.scientific_name = scientific_name


class NoMatchingPlantsError(GreenPointError):
    """Plant search matched nothing."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No plants found matching your query.",
            "NO_MATCHING_PLANTS", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, context, 404,
        )


# ─── External Errors (captured, never surfaced raw) ─────────────

class SourceError(GreenPointError):
    """An environmental data provider failed."""
    def __init__(
        self, message: str, source: str, raw: Any = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.source = source
        super().__init__(
            message, "SOURCE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, ctx, 502,
        )
        self.source = source
        self.raw = raw


class ProviderStatusError(SourceError):
    """Provider answered with a non-success HTTP status."""
    def __init__(
        self, provider: str, source: str, status_code: int, body: Any,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{provider} request failed: {status_code}", source, body, context,
        )
        self.code = "PROVIDER_STATUS_ERROR"
        self.status_code = status_code


class MissingFieldError(SourceError):
    """Provider answered 2xx but without the expected sub-structure."""
    def __init__(
        self, message: str, source: str, raw: Any = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message, source, raw, context)
        self.code = "MISSING_FIELD"


class TransportError(SourceError):
    """Provider could not be reached (connection, DNS, timeout)."""
    def __init__(self, message: str, source: str, context: ErrorContext | None = None):
        super().__init__(message, source, None, context)
        self.code = "TRANSPORT_ERROR"


class SourceTimeoutError(TransportError):
    """Provider did not answer within its per-call timeout."""
    def __init__(self, message: str, source: str, context: ErrorContext | None = None):
        super().__init__(message, source, context)
        self.code = "SOURCE_TIMEOUT"
        self.category = ErrorCategory.TIMEOUT


class AnthropicAPIError(GreenPointError):
    """Anthropic API call failed."""
    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"Anthropic API error ({api_error_type}): {message}",
            "ANTHROPIC_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.api_error_type = api_error_type


# ─── Infrastructure Errors (500-level) ──────────────────────────

class SpeciesTableUnavailableError(GreenPointError):
    """Species table failed to load at startup."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Plant data is not available. Check server logs.",
            "SPECIES_TABLE_UNAVAILABLE", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 503,
        )


class PipelineError(GreenPointError):
    """Unexpected orchestration failure. Message is redacted for clients."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.user_message = "Failed to perform suitability analysis."
        ctx.debug_info = {"detail": detail}
        super().__init__(
            f"Suitability pipeline failed: {detail}",
            "PIPELINE_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
