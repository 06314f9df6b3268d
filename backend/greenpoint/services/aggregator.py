"""Aggregator — species gate, concurrent source fan-out, bounded fan-in.

Invariants:
    - Species resolved BEFORE any network call; unknown species → SpeciesNotFoundError
    - The three fetches run as independent tasks; one failure never cancels siblings
    - Every slot is filled exactly once: the task's SourceResult, or a timeout
      SourceErr if the outer deadline elapsed first
    - Completed slots are preserved when the deadline cancels pending ones
    - No fetch outlives _fetch_all: cancelling aggregate() cancels and awaits them

Design Decisions:
    - asyncio.wait over tasks (join-all with timeout) instead of gather:
      lets completed results survive a deadline hit
    - Deadline derived from the slowest client's worst case
      (timeout × attempts + backoff + margin) unless configured explicitly
"""

import asyncio
import logging
import time
from typing import Protocol

import httpx

from greenpoint.config import Settings
from greenpoint.core.domain_types import SourceName
from greenpoint.core.records import AggregatedRecord, Conditions, UserInput
from greenpoint.core.retry_policy import RetryPolicy, outer_deadline
from greenpoint.core.source_result import SourceErr, SourceResult
from greenpoint.core.species import SpeciesTable
from greenpoint.infrastructure.sources.nasa_power import NasaPowerClient
from greenpoint.infrastructure.sources.open_weather import OpenWeatherClient
from greenpoint.infrastructure.sources.soil import SoilTypeClient

logger = logging.getLogger(__name__)


class EnvironmentalSource(Protocol):
    async def fetch(self, latitude: float, longitude: float) -> SourceResult: ...


class Aggregator:
    """Merges species requirements with three environmental sources."""

    def __init__(
        self,
        species: SpeciesTable,
        sources: dict[SourceName, EnvironmentalSource],
        deadline_seconds: float,
    ) -> None:
        missing = set(SourceName) - set(sources)
        if missing:
            raise ValueError(f"Missing source clients: {sorted(s.value for s in missing)}")
        self.species = species
        self.sources = sources
        self.deadline_seconds = deadline_seconds

    async def aggregate(
        self,
        latitude: float,
        longitude: float,
        scientific_name: str,
        plan_description: str = "",
    ) -> AggregatedRecord:
        species = self.species.find(scientific_name)
        results = await self._fetch_all(latitude, longitude)
        return AggregatedRecord(
            user_input=UserInput(latitude, longitude, plan_description),
            conditions=Conditions(
                nasa_power=results[SourceName.NASA_POWER],
                open_weather=results[SourceName.OPEN_WEATHER],
                soil_probabilities=results[SourceName.SOIL_PROBABILITIES],
            ),
            species_requirements=species,
        )

    async def _fetch_all(
        self, latitude: float, longitude: float,
    ) -> dict[SourceName, SourceResult]:
        started = time.monotonic()
        tasks = {
            asyncio.create_task(
                client.fetch(latitude, longitude), name=f"fetch-{name.value}",
            ): name
            for name, client in self.sources.items()
        }
        try:
            done, pending = await asyncio.wait(tasks, timeout=self.deadline_seconds)
        finally:
            # also reached when aggregate() itself is cancelled
            unfinished = [task for task in tasks if not task.done()]
            for task in unfinished:
                task.cancel()
            if unfinished:
                await asyncio.gather(*unfinished, return_exceptions=True)

        results: dict[SourceName, SourceResult] = {}
        for task, name in tasks.items():
            if task in pending:
                logger.warning(
                    f"Source {name.value} abandoned at aggregation deadline",
                    extra={"source": name.value},
                )
                results[name] = SourceErr(
                    f"{name.value} timed out after {self.deadline_seconds:g}s",
                )
            elif task.exception() is not None:
                exc = task.exception()
                logger.error(
                    f"Source {name.value} raised unexpectedly: {exc}",
                    exc_info=exc, extra={"source": name.value},
                )
                results[name] = SourceErr(f"{name.value} failed: {exc}")
            else:
                results[name] = task.result()

        logger.info(
            "Environmental sources joined",
            extra={"elapsed_ms": int((time.monotonic() - started) * 1000)},
        )
        return results


def build_aggregator(
    settings: Settings, species: SpeciesTable, http: httpx.AsyncClient,
) -> Aggregator:
    """Wire the three source clients from settings around one shared HTTP client."""
    policy = RetryPolicy(
        max_attempts=settings.soil_max_attempts,
        unit_seconds=settings.soil_backoff_unit_seconds,
    )
    sources = {
        SourceName.NASA_POWER: NasaPowerClient(
            http, settings.nasa_power_url, settings.nasa_power_timeout_seconds,
            start_date=settings.nasa_power_start_date,
        ),
        SourceName.OPEN_WEATHER: OpenWeatherClient(
            http, settings.openweather_url, settings.openweather_timeout_seconds,
            api_key=settings.openweather_api_key,
        ),
        SourceName.SOIL_PROBABILITIES: SoilTypeClient(
            http, settings.soil_url, settings.soil_timeout_seconds, policy=policy,
        ),
    }
    deadline = settings.aggregate_deadline_seconds
    if deadline is None:
        deadline = outer_deadline(
            max(
                settings.nasa_power_timeout_seconds,
                settings.openweather_timeout_seconds,
                settings.soil_timeout_seconds,
            ),
            policy,
        )
    return Aggregator(species, sources, deadline)
