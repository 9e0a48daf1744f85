"""
LRID — Derived scoring results.

Everything here is recomputable from Instrument + Submission and is never
hand-edited.  Numeric aggregates are already rounded to 2 decimals, so a JSON
dump/parse round trip reproduces the structure exactly.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from lrid.schemas.instrument import QuestionType
from lrid.schemas.submission import RawResponse


class ScoredItem(BaseModel):
    question_id: str
    dimension: str
    type: QuestionType
    response: RawResponse = None
    score: Optional[float] = None


class ScoringResult(BaseModel):
    scored_items: list[ScoredItem] = Field(default_factory=list)
    dimension_scores: dict[str, Optional[float]] = Field(default_factory=dict)
    aggregate_indices: dict[str, Optional[float]] = Field(default_factory=dict)


class ConsistencyHit(BaseModel):
    cc_id: str
    title: str
    severity: str
    message: str


class ConfidenceLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class Confidence(BaseModel):
    score: float
    level: ConfidenceLevel


class ConsistencyResult(BaseModel):
    hits: list[ConsistencyHit] = Field(default_factory=list)
    confidence: Confidence


class ScoringReport(BaseModel):
    """Engine output for one submission."""

    case_id: str
    instrument_id: str
    instrument_version: str
    scoring: ScoringResult
    consistency: ConsistencyResult
