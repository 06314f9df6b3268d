"""Anthropic Analysis Client — retry and error mapping with the SDK call patched out.

Invariants tested:
    - Transient 5xx retried up to max_retries, then AnthropicAPIError("transient")
    - 429 honours Retry-After over computed backoff
    - 4xx (non-429) and timeouts fail on the first attempt
    - temperature/system/messages forwarded to messages.create
"""

import httpx
import pytest
import anthropic

from greenpoint.core.errors import AnthropicAPIError
from greenpoint.infrastructure.anthropic_client import (
    RATE_LIMIT, TRANSIENT, ResilientAnthropicClient, classify_api_error, retry_after_ms,
)
from tests.services.mock_anthropic import text_response

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _status_error(cls, status, headers=None):
    response = httpx.Response(status, request=_REQUEST, headers=headers)
    return cls(f"status {status}", response=response, body=None)


class _ScriptedCreate:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def sleep():
    return FakeSleep()


@pytest.fixture
def client(sleep):
    return ResilientAnthropicClient(
        api_key="sk-ant-test-fake-key", max_retries=2,
        base_delay_ms=1000, max_delay_ms=20_000,
        sleep=sleep, jitter=lambda: 1.0,
    )


def _script(monkeypatch, rc, *outcomes):
    create = _ScriptedCreate(*outcomes)
    monkeypatch.setattr(rc.client.messages, "create", create)
    return create


async def _call(rc):
    return await rc.create_message(
        model="claude-test", max_tokens=100, temperature=0.1,
        system="sys", messages=[{"role": "user", "content": "hi"}],
    )


async def test_success_forwards_decoding_policy(client, monkeypatch, sleep):
    create = _script(monkeypatch, client, text_response("ok"))
    response = await _call(client)

    assert response.content[0].text == "ok"
    assert create.calls[0]["temperature"] == 0.1
    assert create.calls[0]["max_tokens"] == 100
    assert create.calls[0]["system"] == "sys"
    assert sleep.delays == []


async def test_transient_error_retried_then_succeeds(client, monkeypatch, sleep):
    create = _script(
        monkeypatch, client,
        _status_error(anthropic.InternalServerError, 500),
        text_response("recovered"),
    )
    response = await _call(client)

    assert len(create.calls) == 2
    assert response.content[0].text == "recovered"
    assert sleep.delays == [1.0]


async def test_transient_error_exhausts_retries(client, monkeypatch, sleep):
    create = _script(
        monkeypatch, client,
        *[_status_error(anthropic.InternalServerError, 500) for _ in range(3)],
    )
    with pytest.raises(AnthropicAPIError) as exc_info:
        await _call(client)

    assert len(create.calls) == 3
    assert exc_info.value.api_error_type == TRANSIENT
    assert sleep.delays == [1.0, 2.0]


async def test_rate_limit_uses_retry_after(client, monkeypatch, sleep):
    _script(
        monkeypatch, client,
        _status_error(anthropic.RateLimitError, 429, headers={"retry-after": "3"}),
        text_response("ok"),
    )
    await _call(client)
    assert sleep.delays == [3.0]


async def test_client_error_not_retried(client, monkeypatch):
    create = _script(monkeypatch, client, _status_error(anthropic.BadRequestError, 400))
    with pytest.raises(AnthropicAPIError) as exc_info:
        await _call(client)

    assert len(create.calls) == 1
    assert exc_info.value.api_error_type == "client_error"


async def test_timeout_not_retried(client, monkeypatch):
    create = _script(monkeypatch, client, anthropic.APITimeoutError(request=_REQUEST))
    with pytest.raises(AnthropicAPIError) as exc_info:
        await _call(client)

    assert len(create.calls) == 1
    assert exc_info.value.api_error_type == "timeout"


@pytest.mark.parametrize("error,expected", [
    (_status_error(anthropic.RateLimitError, 429), RATE_LIMIT),
    (_status_error(anthropic.InternalServerError, 503), TRANSIENT),
    (_status_error(anthropic.APIStatusError, 529), TRANSIENT),
    (anthropic.APIConnectionError(request=_REQUEST), TRANSIENT),
    (_status_error(anthropic.AuthenticationError, 401), None),
    (_status_error(anthropic.BadRequestError, 400), None),
])
def test_classify_api_error(error, expected):
    assert classify_api_error(error) == expected


def test_retry_after_parsing():
    assert retry_after_ms(
        _status_error(anthropic.RateLimitError, 429, headers={"retry-after": "1.5"}),
    ) == 1500
    assert retry_after_ms(_status_error(anthropic.RateLimitError, 429)) is None
    assert retry_after_ms(
        _status_error(anthropic.RateLimitError, 429, headers={"retry-after": "soon"}),
    ) is None


def test_backoff_is_capped():
    rc = ResilientAnthropicClient(
        api_key="sk-ant-test-fake-key", base_delay_ms=1000, max_delay_ms=3000,
        jitter=lambda: 1.25,
    )
    assert [rc.backoff_ms(a) for a in range(1, 5)] == [1250, 2500, 3750, 3750]
