"""Pipeline Records — the merged per-request bundle and the analysis outcome.

Invariants:
    - AggregatedRecord only exists for a resolved SpeciesRecord
    - All three condition slots are always set (SourceOk or SourceErr)
    - Records are frozen: written once, after every producing task completed
    - AnalysisResult.success is False whenever code is set
    - scores always carries both keys; a failed analysis reports them as None

Design Decisions:
    - Frozen dataclasses over pydantic models: core stays free of validation
      machinery; pydantic lives at the API boundary (schemas/)
    - to_dict() emits the camelCase wire shape the UI consumes
"""

from dataclasses import dataclass, field

from greenpoint.core.domain_types import AnalysisCode, Latitude, Longitude, Score
from greenpoint.core.scoring import extract_scores
from greenpoint.core.source_result import SourceResult
from greenpoint.core.species import SpeciesRecord


@dataclass(frozen=True)
class UserInput:
    latitude: Latitude
    longitude: Longitude
    plan_description: str

    def to_dict(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "planDescription": self.plan_description,
        }


@dataclass(frozen=True)
class Conditions:
    nasa_power: SourceResult
    open_weather: SourceResult
    soil_probabilities: SourceResult

    def to_dict(self) -> dict:
        return {
            "nasaPower": self.nasa_power.to_dict(),
            "openWeather": self.open_weather.to_dict(),
            "soilProbabilities": self.soil_probabilities.to_dict(),
        }


@dataclass(frozen=True)
class AggregatedRecord:
    user_input: UserInput
    conditions: Conditions
    species_requirements: SpeciesRecord

    def to_dict(self) -> dict:
        return {
            "userInput": self.user_input.to_dict(),
            "conditions": self.conditions.to_dict(),
            "speciesRequirements": self.species_requirements.to_dict(),
        }


@dataclass(frozen=True)
class AnalysisResult:
    success: bool
    text: str | None = None
    error: str | None = None
    details: str | None = None
    code: AnalysisCode | None = None
    scores: dict[str, Score | None] = field(default_factory=dict)

    @classmethod
    def ok(cls, text: str, scores: dict[str, Score | None]) -> "AnalysisResult":
        return cls(success=True, text=text, scores=scores)

    @classmethod
    def failed(
        cls, code: AnalysisCode, error: str, details: str | None = None,
    ) -> "AnalysisResult":
        return cls(
            success=False, error=error, details=details, code=code,
            scores=extract_scores(None),
        )

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "text": self.text,
            "error": self.error,
            "details": self.details,
            "code": self.code.value if self.code else None,
            "scores": dict(self.scores),
        }
