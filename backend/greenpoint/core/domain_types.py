"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Latitude/Longitude wrap floats; bounds enforced at the API boundary
    - Source slots encoded as an Enum — no raw string matching
    - AnalysisCode values are the only failure codes an AnalysisResult carries

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Value Types ─────────────────────────────────────────────────

Latitude = NewType("Latitude", float)     # -90.0–90.0
Longitude = NewType("Longitude", float)   # -180.0–180.0
Score = NewType("Score", int)             # 1–10


# ─── Enums ───────────────────────────────────────────────────────

class SourceName(str, Enum):
    """The 3 environmental source slots. All are present in every record."""
    NASA_POWER = "nasa_power"
    OPEN_WEATHER = "open_weather"
    SOIL_PROBABILITIES = "soil_probabilities"


class AnalysisCode(str, Enum):
    """Machine-readable failure codes for the analysis block."""
    NOT_CONFIGURED = "ANALYSIS_NOT_CONFIGURED"
    BACKEND_ERROR = "ANALYSIS_BACKEND_ERROR"
    TIMEOUT = "ANALYSIS_TIMEOUT"
    EMPTY_RESPONSE = "ANALYSIS_EMPTY_RESPONSE"
