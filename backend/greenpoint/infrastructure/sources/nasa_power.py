"""NASA POWER — daily point climatology (temperature, precipitation, humidity).

API: https://power.larc.nasa.gov/api/temporal/daily/point (no key required)
Returns ``properties.parameter``: {PARAM: {YYYYMMDD: value}}.
"""

from datetime import date, datetime, timezone
from typing import Any, Callable

import httpx

from greenpoint.core.domain_types import SourceName
from greenpoint.infrastructure.sources.base import SourceClient, dig

PARAMETERS = "T2M_MAX,T2M_MIN,T2M,PRECTOTCORR,RH2M"
COMMUNITY = "RE"


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class NasaPowerClient(SourceClient):
    source = SourceName.NASA_POWER
    provider = "NASA POWER API"

    def __init__(
        self,
        http: httpx.AsyncClient,
        url: str,
        timeout_seconds: float,
        start_date: str = "20240101",
        today: Callable[[], date] = _utc_today,
    ):
        super().__init__(http, url, timeout_seconds)
        self.start_date = start_date
        self._today = today

    def build_params(self, latitude: float, longitude: float) -> dict[str, Any]:
        return {
            "community": COMMUNITY,
            "start": self.start_date,
            "end": self._today().strftime("%Y%m%d"),
            "latitude": latitude,
            "longitude": longitude,
            "parameters": PARAMETERS,
            "format": "JSON",
        }

    def extract(self, data: Any) -> Any:
        parameter = dig(data, "properties", "parameter")
        if not parameter:
            raise self._missing("Parameter data", data)
        return parameter
