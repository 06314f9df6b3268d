"""Root conftest — shared test configuration and species fixtures."""

import os

import pytest

# Ensure tests never pick up real credentials from the environment or .env
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["OPENWEATHER_API_KEY"] = ""

from greenpoint.core.species import SpeciesRecord, SpeciesTable  # noqa: E402


ZEA_MAYS = SpeciesRecord(
    scientific_name="Zea mays",
    common_names=("maize", "corn", "Indian corn"),
    life_form="herb",
    min_temp=10.0, max_temp=47.0, min_ph=4.5, max_ph=8.5,
)


@pytest.fixture
def zea_mays():
    return ZEA_MAYS


@pytest.fixture
def species_table():
    """Small table in fixed order — suggest() order assertions depend on it."""
    return SpeciesTable([
        ZEA_MAYS,
        SpeciesRecord("Oryza sativa", ("rice", "paddy rice")),
        SpeciesRecord("Zizania aquatica", ("wild rice",)),
        SpeciesRecord("Zea diploperennis", ("perennial teosinte",)),
        SpeciesRecord("Solanum lycopersicum", ("tomato",), "herb", 7.0, 35.0, None, None),
    ])
