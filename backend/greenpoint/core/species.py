"""Species Lookup — immutable in-memory table of plant requirements.

Invariants:
    - find() is a case-insensitive exact match on the scientific name, no I/O
    - suggest() scans in table order: scientific name first, then common names
    - suggest() returns at most SUGGEST_LIMIT entries, never a duplicate name
    - Unparsable numeric cells are stored as None (never 0.0, never dropped)
    - Table is never mutated after construction (safe for concurrent reads)

Design Decisions:
    - Records in a tuple + MappingProxyType index: read-only sharing across
      requests without locks (ADR: process-wide cache, built once in lifespan)
    - First row wins when the source table repeats a scientific name
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from greenpoint.core.errors import SpeciesNotFoundError

SUGGEST_LIMIT = 7

_NOT_APPLICABLE = {"", "NA", "N/A"}


@dataclass(frozen=True)
class SpeciesRecord:
    """Growing requirements for one species (EcoCrop row)."""
    scientific_name: str
    common_names: tuple[str, ...] = ()
    life_form: str | None = None
    min_temp: float | None = None
    max_temp: float | None = None
    min_ph: float | None = None
    max_ph: float | None = None

    def to_dict(self) -> dict:
        return {
            "scientificName": self.scientific_name,
            "commonNames": list(self.common_names),
            "lifeForm": self.life_form,
            "minTemp": self.min_temp,
            "maxTemp": self.max_temp,
            "minPH": self.min_ph,
            "maxPH": self.max_ph,
        }


@dataclass(frozen=True)
class SpeciesSuggestion:
    scientific_name: str
    matched_common_name: str | None = None

    def to_dict(self) -> dict:
        return {
            "scientificName": self.scientific_name,
            "matchedCommonName": self.matched_common_name,
        }


def parse_optional_float(value: str | None) -> float | None:
    """Parse a numeric cell. NA, empty and garbage all mean "absent"."""
    if value is None:
        return None
    value = value.strip()
    if value.upper() in _NOT_APPLICABLE:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def split_common_names(raw: str | None) -> tuple[str, ...]:
    """Split the comma-separated COMNAME cell, trimming and dropping blanks."""
    if not raw:
        return ()
    return tuple(n.strip() for n in raw.split(",") if n.strip())


def record_from_row(row: Mapping[str, str | None]) -> SpeciesRecord | None:
    """Build a record from an EcoCrop CSV row. Rows without a name yield None."""
    name = (row.get("ScientificName") or "").strip()
    if not name:
        return None
    life_form = (row.get("LIFO") or "").strip() or None
    return SpeciesRecord(
        scientific_name=name,
        common_names=split_common_names(row.get("COMNAME")),
        life_form=life_form,
        min_temp=parse_optional_float(row.get("TMIN")),
        max_temp=parse_optional_float(row.get("TMAX")),
        min_ph=parse_optional_float(row.get("PHMIN")),
        max_ph=parse_optional_float(row.get("PHMAX")),
    )


class SpeciesTable:
    """Read-only species table with point lookup and incremental search."""

    def __init__(self, records: Iterable[SpeciesRecord]):
        self._records = tuple(records)
        index: dict[str, SpeciesRecord] = {}
        for record in self._records:
            index.setdefault(record.scientific_name.lower(), record)
        self._index = MappingProxyType(index)

    def __len__(self) -> int:
        return len(self._records)

    def records(self) -> tuple[SpeciesRecord, ...]:
        return self._records

    def find(self, scientific_name: str) -> SpeciesRecord:
        """Exact, case-insensitive lookup. Raises SpeciesNotFoundError."""
        record = self._index.get(scientific_name.strip().lower())
        if record is None:
            raise SpeciesNotFoundError(scientific_name)
        return record

    def suggest(self, fragment: str) -> list[SpeciesSuggestion]:
        """Autocomplete: first SUGGEST_LIMIT matches in table order."""
        if not fragment.strip():
            return []
        needle = fragment.lower()
        results: list[SpeciesSuggestion] = []
        seen: set[str] = set()
        for record in self._records:
            if len(results) >= SUGGEST_LIMIT:
                break
            key = record.scientific_name.lower()
            if key in seen:
                continue
            if needle in key:
                seen.add(key)
                results.append(SpeciesSuggestion(record.scientific_name))
                continue
            alias = _first_matching_name(record.common_names, needle)
            if alias is not None:
                seen.add(key)
                results.append(SpeciesSuggestion(record.scientific_name, alias))
        return results

    def search(
        self, scientific_name: str | None = None, common_name: str | None = None,
    ) -> list[SpeciesRecord]:
        """Unbounded substring filter. Scientific name takes precedence."""
        if scientific_name:
            needle = scientific_name.lower()
            return [r for r in self._records if needle in r.scientific_name.lower()]
        if common_name:
            needle = common_name.lower()
            return [
                r for r in self._records
                if _first_matching_name(r.common_names, needle) is not None
            ]
        return []


def _first_matching_name(names: tuple[str, ...], needle: str) -> str | None:
    for name in names:
        if needle in name.lower():
            return name
    return None
