"""Suitability — combined environmental data + AI analysis for one point and species.

Invariants:
    - Body validated by Pydantic before the handler runs (400 on missing fields)
    - SpeciesNotFoundError → 404 via global handler; analysis not invoked
    - Degraded sources / analysis still return 200 with explicit error fields
"""

from fastapi import APIRouter, Depends

from greenpoint.api.dependencies import get_pipeline
from greenpoint.schemas.suitability import SuitabilityRequest
from greenpoint.services.suitability_pipeline import SuitabilityPipeline

router = APIRouter(prefix="/api/v1/suitability", tags=["suitability"])


@router.post("")
async def analyze_suitability(
    body: SuitabilityRequest,
    pipeline: SuitabilityPipeline = Depends(get_pipeline),
):
    """Aggregate environmental data for the point and analyze suitability."""
    report = await pipeline.run(
        body.latitude, body.longitude, body.scientific_name, body.plan_description,
    )
    return report.to_dict()
