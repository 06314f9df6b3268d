"""GreenPoint API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map GreenPointError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Species table, HTTP client, aggregator and analysis invoker built once
      in the lifespan and shared read-only via app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Shared httpx.AsyncClient closed on shutdown (connection pool lifetime = process)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from greenpoint.api.error_handlers import register_error_handlers
from greenpoint.api.routes import health, plants, suitability
from greenpoint.config import get_settings
from greenpoint.infrastructure.http_client import create_http_client
from greenpoint.infrastructure.observability import RequestLoggingMiddleware, setup_logging
from greenpoint.infrastructure.species_loader import load_species_table
from greenpoint.services.aggregator import build_aggregator
from greenpoint.services.analysis_invoker import build_analysis_invoker
from greenpoint.services.suitability_pipeline import SuitabilityPipeline

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    species_table = load_species_table(settings.species_csv_path)
    http = create_http_client()
    app.state.settings = settings
    app.state.species_table = species_table
    app.state.pipeline = SuitabilityPipeline(
        build_aggregator(settings, species_table, http),
        build_analysis_invoker(settings),
    )
    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY not set: analysis will return placeholders")
    if not settings.openweather_api_key:
        logger.warning("OPENWEATHER_API_KEY not set: weather source will be skipped")
    logger.info("GreenPoint API started")
    yield
    await http.aclose()
    logger.info("GreenPoint API shutting down")


app = FastAPI(
    title="GreenPoint API", version="1.0.0", lifespan=lifespan,
)

# CORS from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(RequestLoggingMiddleware)

# Routes, registered explicitly
app.include_router(health.router)
app.include_router(plants.router)
app.include_router(suitability.router)

register_error_handlers(app)
