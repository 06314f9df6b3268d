"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the species table is empty (readiness)
    - Missing credentials do not fail readiness: they degrade to captured errors
    - analysis_backend reflects the wired invoker, not just the raw setting

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from
      load balancer
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from greenpoint.api.dependencies import get_pipeline, get_species_table
from greenpoint.core.species import SpeciesTable
from greenpoint.services.suitability_pipeline import SuitabilityPipeline

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "greenpoint-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(
    request: Request,
    table: SpeciesTable = Depends(get_species_table),
    pipeline: SuitabilityPipeline = Depends(get_pipeline),
):
    """Readiness probe — species table loaded; reports configured backends."""
    settings = request.app.state.settings
    checks = {
        "species_table": len(table),
        "analysis_backend": "configured" if pipeline.analysis.configured else "missing",
        "openweather": "configured" if settings.openweather_api_key else "missing",
    }
    if len(table) == 0:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "species_table_empty",
                "checks": checks,
            },
        )
    return {"status": "ready", "checks": checks}
