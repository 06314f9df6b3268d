"""Tests for best-effort score extraction from analysis text."""

import pytest

from greenpoint.core.scoring import (
    SUSTAINABILITY_LABEL, extract_score, extract_scores,
)


@pytest.mark.parametrize("text,expected", [
    ("... Feasibility Score\n\n7/10 ...", 7),
    ("2. **Feasibility Score (1-10):** 8/10 because", 8),
    ("Feasibility Score: 10/10", 10),
    ("feasibility score - 3", 3),
    ("### Feasibility Score (1-10)\n\n**9/10**", 9),
])
def test_extracts_labelled_score(text, expected):
    assert extract_score(text) == expected


@pytest.mark.parametrize("text", [
    "",
    None,
    "No score given here.",
    "Feasibility Score: 0/10",
    "Feasibility Score: 42",
])
def test_missing_or_out_of_range_score_is_none(text):
    assert extract_score(text) is None


def test_sustainability_label():
    text = "Feasibility Score: 7/10\nSustainability Score (1-10): 5/10"
    assert extract_score(text, SUSTAINABILITY_LABEL) == 5


def test_extract_scores_returns_both_keys():
    assert extract_scores("Feasibility Score: 4/10") == {
        "feasibility": 4, "sustainability": None,
    }
