"""Shared HTTP Client — one pooled httpx.AsyncClient per process.

Invariants:
    - Created in the lifespan, closed on shutdown (never at import time)
    - Per-request timeouts are passed by each source client (no global default wins)

Design Decisions:
    - httpx.AsyncClient over per-call clients: connection reuse across the
      three concurrent fetches of every request
    - Transport injectable: tests pass httpx.MockTransport, no network
"""

import httpx

USER_AGENT = "greenpoint/1.0 (+plant suitability analysis)"
DEFAULT_TIMEOUT_SECONDS = 30.0


def create_http_client(
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> httpx.AsyncClient:
    """Build the shared async client with default headers and timeout."""
    return httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(timeout),
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        follow_redirects=True,
    )
