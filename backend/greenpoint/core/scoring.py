"""Score Extraction — best-effort parsing of 1–10 scores from analysis text.

Invariants:
    - Returns None when no score is found or it falls outside 1–10
    - Never raises on arbitrary text

Design Decisions:
    - Advisory only: the generative backend has no schema guarantee, so scores
      are a convenience for the UI, never a contract
"""

import re

from greenpoint.core.domain_types import Score

FEASIBILITY_LABEL = "Feasibility Score"
SUSTAINABILITY_LABEL = "Sustainability Score"

# label, optional "(1-10)", up to 40 non-digit chars (**, :, newlines), the number
_SCORE_TEMPLATE = r"{label}\s*(?:\(\s*1\s*-\s*10\s*\))?[^0-9]{{0,40}}?(\d{{1,2}})(?:\s*/\s*10)?"


def extract_score(text: str | None, label: str = FEASIBILITY_LABEL) -> Score | None:
    if not text:
        return None
    pattern = _SCORE_TEMPLATE.format(label=re.escape(label))
    match = re.search(pattern, text, re.IGNORECASE)
    if not match:
        return None
    value = int(match.group(1))
    return Score(value) if 1 <= value <= 10 else None


def extract_scores(text: str | None) -> dict[str, Score | None]:
    return {
        "feasibility": extract_score(text, FEASIBILITY_LABEL),
        "sustainability": extract_score(text, SUSTAINABILITY_LABEL),
    }
