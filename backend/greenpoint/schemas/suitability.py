"""Suitability Schemas — request body for the combined analysis endpoint.

Invariants:
    - latitude in [-90, 90], longitude in [-180, 180]
    - scientificName and planDescription required, stripped, non-empty
    - Legacy "plantScientificName" accepted for scientificName

Design Decisions:
    - AliasChoices: camelCase wire names, snake_case attributes
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class SuitabilityRequest(BaseModel):
    """Inbound analysis request from the map UI."""
    model_config = ConfigDict(populate_by_name=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    scientific_name: str = Field(
        min_length=1, max_length=200,
        validation_alias=AliasChoices(
            "scientificName", "plantScientificName", "scientific_name",
        ),
    )
    plan_description: str = Field(
        min_length=1, max_length=5000,
        validation_alias=AliasChoices("planDescription", "plan_description"),
    )

    @field_validator("scientific_name", "plan_description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty or whitespace")
        return v
