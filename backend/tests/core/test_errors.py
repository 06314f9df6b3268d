"""Error Hierarchy — codes, HTTP statuses and REST envelope."""

from greenpoint.core.errors import (
    ErrorCategory,
    GreenPointError,
    MissingFieldError,
    NoMatchingPlantsError,
    PipelineError,
    ProviderStatusError,
    SourceError,
    SpeciesNotFoundError,
    SpeciesTableUnavailableError,
    SourceTimeoutError,
    TransportError,
    ValidationError,
)


def test_request_errors_are_400_level():
    assert ValidationError("latitude is required", "latitude").http_status == 400
    assert SpeciesNotFoundError("Unobtainium vulgaris").http_status == 404


def test_source_errors_share_base_and_carry_source():
    for err in (
        ProviderStatusError("Soil API", "soil_probabilities", 503, {"message": "x"}),
        MissingFieldError("missing", "nasa_power"),
        TransportError("timed out", "open_weather"),
    ):
        assert isinstance(err, SourceError)
        assert isinstance(err, GreenPointError)
        assert err.category == ErrorCategory.EXTERNAL_API
        assert err.context.source == err.source


def test_provider_status_error_message_and_body():
    err = ProviderStatusError("Soil API", "soil_probabilities", 503, {"message": "down"})
    assert err.message == "Soil API request failed: 503"
    assert err.status_code == 503
    assert err.raw == {"message": "down"}
    assert err.code == "PROVIDER_STATUS_ERROR"


def test_to_response_envelope():
    body = SpeciesNotFoundError("Unobtainium vulgaris").to_response()
    error = body["error"]
    assert error["code"] == "SPECIES_NOT_FOUND"
    assert error["category"] == "resource_not_found"
    assert error["context"]["scientific_name"] == "Unobtainium vulgaris"
    assert "Unobtainium vulgaris" in error["message"]


def test_pipeline_error_redacts_detail():
    err = PipelineError("KeyError: 'secret internal'")
    body = err.to_response()
    assert body["error"]["message"] == "Failed to perform suitability analysis."
    assert "secret" not in str(body)
    assert err.context.debug_info == {"detail": "KeyError: 'secret internal'"}
    assert err.http_status == 500


def test_species_table_unavailable_is_503():
    assert SpeciesTableUnavailableError().http_status == 503


def test_source_timeout_is_transport_error_with_timeout_category():
    err = SourceTimeoutError("NASA POWER API request timed out after 20s", "nasa_power")
    assert isinstance(err, TransportError)
    assert err.category == ErrorCategory.TIMEOUT
    assert err.code == "SOURCE_TIMEOUT"


def test_no_matching_plants_is_404():
    err = NoMatchingPlantsError()
    assert err.http_status == 404
    assert err.to_response()["error"]["code"] == "NO_MATCHING_PLANTS"
