"""OpenWeatherMap — current observed weather at the point.

API: https://api.openweathermap.org/data/2.5/weather (requires OPENWEATHER_API_KEY)
A missing key is reported as SourceErr without issuing any request.
"""

from typing import Any

import httpx

from greenpoint.core.domain_types import SourceName
from greenpoint.core.errors import SourceError
from greenpoint.core.source_result import SourceOk, SourceResult
from greenpoint.infrastructure.sources.base import SourceClient

# Observation keys forwarded to analysis; station metadata (base, id, cod) dropped
OBSERVATION_KEYS = (
    "coord", "weather", "main", "visibility", "wind", "clouds",
    "rain", "dt", "sys", "timezone", "name",
)


class OpenWeatherClient(SourceClient):
    source = SourceName.OPEN_WEATHER
    provider = "OpenWeatherMap API"

    def __init__(
        self,
        http: httpx.AsyncClient,
        url: str,
        timeout_seconds: float,
        api_key: str | None = None,
    ):
        super().__init__(http, url, timeout_seconds)
        self.api_key = api_key

    async def _run(self, latitude: float, longitude: float) -> SourceResult:
        if not self.api_key:
            raise SourceError(
                "OpenWeatherMap API key not configured", self.source.value,
            )
        return SourceOk(await self._fetch_once(latitude, longitude))

    def build_params(self, latitude: float, longitude: float) -> dict[str, Any]:
        return {
            "lat": latitude,
            "lon": longitude,
            "appid": self.api_key,
            "units": "metric",
        }

    def extract(self, data: Any) -> Any:
        if not isinstance(data, dict) or "main" not in data:
            raise self._missing("Weather observation", data)
        return {key: data[key] for key in OBSERVATION_KEYS if key in data}
