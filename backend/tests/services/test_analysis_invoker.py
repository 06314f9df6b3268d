"""Analysis Invoker — failure mapping, decoding policy and prompt serialization.

Invariants tested:
    - No client → NOT_CONFIGURED, zero calls
    - Backend raises → BACKEND_ERROR with message in details
    - Backend slower than timeout → TIMEOUT
    - Empty / refused content → EMPTY_RESPONSE with stop_reason, never empty success
    - Success → raw text plus advisory scores
"""

import json

from greenpoint.config import Settings
from greenpoint.core.domain_types import AnalysisCode
from greenpoint.core.errors import AnthropicAPIError
from greenpoint.core.records import AggregatedRecord, Conditions, UserInput
from greenpoint.core.source_result import SourceErr, SourceOk
from greenpoint.services.analysis_invoker import AnalysisInvoker, build_analysis_invoker
from greenpoint.services.analysis_prompt import (
    SYSTEM_PROMPT, build_user_message, serialize_record,
)

from tests.services.mock_anthropic import (
    ANALYSIS_TEXT, MockAnthropicClient, empty_response, text_response,
)


def _record(zea_mays):
    return AggregatedRecord(
        user_input=UserInput(10.315, 123.885, "small home plot"),
        conditions=Conditions(
            nasa_power=SourceOk({"T2M": {"20240101": 27.1}}),
            open_weather=SourceOk({"main": {"temp": 24.75}}),
            soil_probabilities=SourceErr("Soil API failed after 3 attempts: 503"),
        ),
        species_requirements=zea_mays,
    )


def _invoker(client, timeout=5.0):
    return AnalysisInvoker(client, model="claude-test", max_tokens=512, timeout_seconds=timeout)


async def test_not_configured_returns_placeholder_without_calls(zea_mays):
    invoker = _invoker(None)
    result = await invoker.analyze(_record(zea_mays))

    assert result.success is False
    assert result.code == AnalysisCode.NOT_CONFIGURED
    assert result.text is None
    assert result.scores == {"feasibility": None, "sustainability": None}
    assert invoker.configured is False


async def test_not_configured_from_settings_makes_zero_calls(zea_mays):
    invoker = build_analysis_invoker(Settings(anthropic_api_key=None))
    assert invoker.client is None
    result = await invoker.analyze(_record(zea_mays))
    assert result.code == AnalysisCode.NOT_CONFIGURED


def test_blank_key_means_not_configured():
    assert Settings(anthropic_api_key="   ").anthropic_api_key is None


async def test_success_returns_text_and_scores(zea_mays):
    client = MockAnthropicClient([text_response(ANALYSIS_TEXT)])
    result = await _invoker(client).analyze(_record(zea_mays))

    assert result.success is True
    assert result.text == ANALYSIS_TEXT.strip()
    assert result.scores == {"feasibility": 7, "sustainability": 6}
    assert result.code is None
    assert len(client.calls) == 1


async def test_request_uses_low_temperature_and_bounded_tokens(zea_mays):
    client = MockAnthropicClient([text_response("Feasibility Score: 5/10")])
    await _invoker(client).analyze(_record(zea_mays))

    call = client.calls[0]
    assert call["temperature"] == 0.1
    assert call["max_tokens"] == 512
    assert call["model"] == "claude-test"
    assert call["system"] == SYSTEM_PROMPT
    assert call["messages"] == [{"role": "user", "content": build_user_message(_record(zea_mays))}]


async def test_backend_exception_captured_in_details(zea_mays):
    client = MockAnthropicClient([AnthropicAPIError("overloaded", "transient")])
    result = await _invoker(client).analyze(_record(zea_mays))

    assert result.success is False
    assert result.code == AnalysisCode.BACKEND_ERROR
    assert "overloaded" in result.details


async def test_unexpected_exception_captured(zea_mays):
    client = MockAnthropicClient([ValueError("bad payload")])
    result = await _invoker(client).analyze(_record(zea_mays))

    assert result.code == AnalysisCode.BACKEND_ERROR
    assert result.details == "bad payload"


async def test_timeout_captured(zea_mays):
    client = MockAnthropicClient([text_response("late")], delay=1.0)
    result = await _invoker(client, timeout=0.05).analyze(_record(zea_mays))

    assert result.success is False
    assert result.code == AnalysisCode.TIMEOUT


async def test_blocked_response_is_not_an_empty_success(zea_mays):
    client = MockAnthropicClient([empty_response("refusal")])
    result = await _invoker(client).analyze(_record(zea_mays))

    assert result.success is False
    assert result.code == AnalysisCode.EMPTY_RESPONSE
    assert result.details == "stop_reason=refusal"


async def test_whitespace_only_text_is_empty(zea_mays):
    client = MockAnthropicClient([text_response("   \n", stop_reason="max_tokens")])
    result = await _invoker(client).analyze(_record(zea_mays))

    assert result.code == AnalysisCode.EMPTY_RESPONSE
    assert "max_tokens" in result.details


def test_serialized_record_is_stable_and_complete(zea_mays):
    first = serialize_record(_record(zea_mays))
    assert first == serialize_record(_record(zea_mays))
    data = json.loads(first)
    assert data["conditions"]["soilProbabilities"] == {
        "ok": False, "error": "Soil API failed after 3 attempts: 503", "details": None,
    }
    assert data["speciesRequirements"]["minTemp"] == 10.0


def test_user_message_embeds_json_block(zea_mays):
    message = build_user_message(_record(zea_mays))
    assert "```json" in message
    assert '"planDescription": "small home plot"' in message
