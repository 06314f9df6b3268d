"""Plants — read-only access to the species table for client-side autocomplete.

Invariants:
    - No network-dependent state; answers come from the in-memory table
    - Empty table (CSV failed to load) → 503 SPECIES_TABLE_UNAVAILABLE
    - /suggest is bounded (SUGGEST_LIMIT); /search is unbounded but 404s on no match
"""

from fastapi import APIRouter, Depends, Query

from greenpoint.api.dependencies import get_species_table
from greenpoint.core.errors import (
    NoMatchingPlantsError, SpeciesTableUnavailableError, ValidationError,
)
from greenpoint.core.species import SpeciesTable

router = APIRouter(prefix="/api/v1/plants", tags=["plants"])


def _loaded_table(
    table: SpeciesTable = Depends(get_species_table),
) -> SpeciesTable:
    if len(table) == 0:
        raise SpeciesTableUnavailableError()
    return table


@router.get("")
async def list_plants(table: SpeciesTable = Depends(_loaded_table)):
    """Full species table."""
    return [r.to_dict() for r in table.records()]


@router.get("/suggest")
async def suggest_plants(
    q: str = Query(..., max_length=100),
    table: SpeciesTable = Depends(_loaded_table),
):
    """Incremental search for autocomplete (scientific name, then common names)."""
    return [s.to_dict() for s in table.suggest(q)]


@router.get("/search")
async def search_plants(
    scientificname: str | None = Query(None, max_length=200),
    commonname: str | None = Query(None, max_length=200),
    table: SpeciesTable = Depends(_loaded_table),
):
    """Substring search by scientific name, or by common name."""
    if not scientificname and not commonname:
        raise ValidationError(
            'Query parameter "scientificname" or "commonname" is required.',
            field="scientificname",
        )
    results = table.search(scientific_name=scientificname, common_name=commonname)
    if not results:
        raise NoMatchingPlantsError()
    return [r.to_dict() for r in results]
