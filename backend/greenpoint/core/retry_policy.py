"""Retry Policy — pure backoff and deadline arithmetic for source fetches.

Invariants:
    - Attempts are 1-based; delay before attempt n+1 is n × unit (linear)
    - No delay is scheduled after the final attempt
    - outer_deadline() bounds one aggregation even if a source hangs
    - Analysis backoff doubles per attempt, capped, then scaled by jitter

Design Decisions:
    - Policy separated from I/O: backoff timing testable without real sleeps
    - Linear growth for the soil API: outages are short, 3 attempts max
    - Exponential growth for the analysis backend: rate limits need room to drain
"""

from dataclasses import dataclass

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_UNIT_SECONDS = 1.5
DEADLINE_MARGIN_SECONDS = 5.0


def linear_backoff(attempt: int, unit: float = DEFAULT_BACKOFF_UNIT_SECONDS) -> float:
    """Delay after a failed 1-based attempt."""
    if attempt < 1:
        raise ValueError(f"attempt must be >= 1, got {attempt}")
    return attempt * unit


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    unit_seconds: float = DEFAULT_BACKOFF_UNIT_SECONDS

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.unit_seconds < 0:
            raise ValueError("unit_seconds must be >= 0")

    def should_retry(self, attempt: int) -> bool:
        return attempt < self.max_attempts

    def delay_for(self, attempt: int) -> float:
        return linear_backoff(attempt, self.unit_seconds)

    def total_backoff(self) -> float:
        """Sum of every sleep when all attempts fail."""
        return sum(self.delay_for(a) for a in range(1, self.max_attempts))


def outer_deadline(
    max_client_timeout: float,
    policy: RetryPolicy,
    margin: float = DEADLINE_MARGIN_SECONDS,
) -> float:
    """Worst-case budget of the slowest source, plus margin."""
    return max_client_timeout * policy.max_attempts + policy.total_backoff() + margin


def jittered_exponential_ms(
    attempt: int, base_ms: int, cap_ms: int, jitter: float = 1.0,
) -> int:
    """Delay after a failed 1-based analysis call; jitter in [0.75, 1.25]."""
    if attempt < 1:
        raise ValueError(f"attempt must be >= 1, got {attempt}")
    return int(min(cap_ms, (2 ** (attempt - 1)) * base_ms) * jitter)
