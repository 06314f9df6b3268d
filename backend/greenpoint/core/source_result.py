"""SourceResult — per-provider outcome, success payload or captured error.

Invariants:
    - Exactly two variants: SourceOk(payload) and SourceErr(message, raw)
    - Immutable once produced (frozen dataclasses)
    - to_dict() always carries "ok" so consumers can branch without key probing

Design Decisions:
    - Tagged union via two frozen dataclasses + type alias, matched with isinstance
    - payload/raw kept as opaque JSON-like values (providers differ in shape)
"""

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class SourceOk:
    payload: Any

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {"ok": True, "data": self.payload}


@dataclass(frozen=True)
class SourceErr:
    message: str
    raw: Any = None

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.message, "details": self.raw}


SourceResult = Union[SourceOk, SourceErr]
