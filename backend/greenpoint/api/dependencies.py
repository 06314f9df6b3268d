"""Route Dependencies — expose lifespan-built singletons from app.state.

Invariants:
    - Objects are built once in main.lifespan and only read here
    - Tests override by assigning app.state attributes (no monkeypatching modules)
"""

from fastapi import Request

from greenpoint.core.species import SpeciesTable
from greenpoint.services.suitability_pipeline import SuitabilityPipeline


def get_species_table(request: Request) -> SpeciesTable:
    return request.app.state.species_table


def get_pipeline(request: Request) -> SuitabilityPipeline:
    return request.app.state.pipeline
