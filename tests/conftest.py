"""Shared pytest fixtures for LRID tests."""
import copy
from pathlib import Path

import pytest

from lrid.schemas.submission import Submission
from lrid.services.instrument_service import load_instrument
from lrid.services.scoring_service import ScoringService

SHIPPED_INSTRUMENT = Path(__file__).resolve().parent.parent / "schemas" / "instrument.v1.json"


_INSTRUMENT_DOC = {
    "instrument_id": "LRID",
    "instrument_version": "1.0",
    "question_bank": [
        {"question_id": "DI-1", "dimension": "DI", "type": "likert_5", "required": True},
        {"question_id": "DI-2", "dimension": "DI", "type": "likert_5", "reverse_scored": True},
        {"question_id": "RP-1", "dimension": "RP", "type": "likert_5", "required": True},
        {
            "question_id": "RP-2",
            "dimension": "RP",
            "type": "multiple_choice",
            "options": [
                {"label": "Escalate now", "score": 5},
                {"label": "Wait a cycle", "score": 3},
                {"label": "Reframe milestones", "score": 1},
            ],
        },
        {"question_id": "MA-1", "dimension": "MA", "type": "scale", "scale": {"min": 0, "max": 4}},
        {"question_id": "AC-1", "dimension": "AC", "type": "likert_5"},
        {"question_id": "PR-1", "dimension": "PR", "type": "likert_5", "reverse_scored": True},
        {"question_id": "ED-1", "dimension": "ED", "type": "open_text", "min_chars": 20},
    ],
    "bands": {"risk_zone_max": 2.79, "mixed_max": 3.30},
    "consistency_checks": [
        {
            "cc_id": "CC-01",
            "title": "Firm decisions vs. tailored facts",
            "severity": "HIGH",
            "logic": {
                "type": "contradiction_pair",
                "if": [{"question_id": "DI-1", "gte_likert": 4}],
                "and": [{"question_id": "DI-2", "equals": "5"}],
                "message": "Claims firm decisions but tailors facts.",
            },
        },
        {
            "cc_id": "CC-02",
            "title": "Disclosure vs. delay",
            "severity": "MEDIUM",
            "logic": {
                "type": "contradiction_pair",
                "if": [{"question_id": "RP-1", "gte_likert": 4}],
                "and": [{"question_id": "RP-2", "in": ["1", "2"]}],
                "message": "Claims early disclosure but delays escalation.",
            },
        },
        {
            "cc_id": "CC-99",
            "title": "Future rule shape",
            "severity": "LOW",
            "logic": {"type": "weighted_triplet", "terms": []},
        },
    ],
    "confidence_adjustments": {
        "base_confidence": 0.85,
        "per_cc_hit_penalty": {"LOW": 0.03, "MEDIUM": 0.06, "HIGH": 0.10},
        "floor": 0.55,
    },
}


@pytest.fixture
def instrument_doc():
    """A fresh, mutable copy of the test instrument document."""
    return copy.deepcopy(_INSTRUMENT_DOC)


@pytest.fixture
def instrument(instrument_doc):
    return load_instrument(instrument_doc)


@pytest.fixture
def scoring_service(instrument):
    return ScoringService(instrument, min_index_coverage=1)


@pytest.fixture
def make_submission():
    """Build a Submission from ``{question_id: response}`` pairs."""

    def _make(answers, case_id="LRID-20250101-0001", **extra):
        payload = {
            "case_id": case_id,
            "answers": [{"question_id": qid, "response": value} for qid, value in answers],
        }
        payload.update(extra)
        return Submission.model_validate(payload)

    return _make


@pytest.fixture
def complete_answers():
    """One plausible answer for every question in the test instrument."""
    return [
        ("DI-1", 4),
        ("DI-2", "2"),
        ("RP-1", 5),
        ("RP-2", "0"),
        ("MA-1", 3),
        ("AC-1", 4),
        ("PR-1", 2),
        ("ED-1", "I delayed a restructuring and learned to consult earlier."),
    ]


@pytest.fixture
def shipped_instrument_path():
    return SHIPPED_INSTRUMENT
