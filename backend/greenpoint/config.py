"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - Missing credentials are None, never placeholders: absence degrades to a
      captured error at the component that needs them
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box locally
"""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

_DEFAULT_SPECIES_CSV = Path(__file__).parent / "data" / "EcoCrop_DB.csv"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Anthropic (analysis backend)
    anthropic_api_key: str | None = None
    anthropic_max_retries: int = 2
    anthropic_base_delay_ms: int = 1000
    anthropic_max_delay_ms: int = 20_000

    # Analysis
    analysis_model: str = "claude-sonnet-4-5"
    analysis_max_tokens: int = 4096
    analysis_temperature: float = 0.1
    analysis_timeout_seconds: float = 90.0

    # NASA POWER
    nasa_power_url: str = "https://power.larc.nasa.gov/api/temporal/daily/point"
    nasa_power_start_date: str = "20240101"
    nasa_power_timeout_seconds: float = 20.0

    # OpenWeatherMap
    openweather_api_key: str | None = None
    openweather_url: str = "https://api.openweathermap.org/data/2.5/weather"
    openweather_timeout_seconds: float = 10.0

    # Open-EPI soil type
    soil_url: str = "https://api.openepi.io/soil/type"
    soil_timeout_seconds: float = 7.0
    soil_max_attempts: int = 3
    soil_backoff_unit_seconds: float = 1.5

    # Aggregation: None derives the deadline from source timeouts and retries
    aggregate_deadline_seconds: float | None = None

    # Species table
    species_csv_path: Path = _DEFAULT_SPECIES_CSV

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("anthropic_api_key", "openweather_api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, v):
        """An empty env var (KEY=) means "not configured"."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("soil_max_attempts")
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("soil_max_attempts must be >= 1")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
