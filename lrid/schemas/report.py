from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, FiniteFloat

from lrid.schemas.scoring import (
    Confidence,
    ConsistencyHit,
    ConsistencyResult,
    ScoringResult,
)


# ── Draft (engine output + intake validation, awaiting review) ───────────────

class DraftMeta(BaseModel):
    case_id: str
    created_at: datetime
    respondent_name: str = ""
    respondent_email: str = ""
    respondent_org: str = ""
    instrument_id: str
    instrument_version: str


class ValidationStatus(str, Enum):
    OK = "OK"
    INCOMPLETE = "INCOMPLETE"


class Completeness(BaseModel):
    expected_questions: int
    answered_questions: int
    missing_required: list[str] = Field(default_factory=list)


class DraftValidation(BaseModel):
    status: ValidationStatus
    completeness: Completeness
    soft_warnings: list[str] = Field(default_factory=list)


class DraftBands(BaseModel):
    dimensions: dict[str, str] = Field(default_factory=dict)
    indices: dict[str, str] = Field(default_factory=dict)


class Draft(BaseModel):
    meta: DraftMeta
    validation: DraftValidation
    scoring: ScoringResult
    consistency: ConsistencyResult
    bands: DraftBands


# ── Approval (written by the reviewing expert) ───────────────────────────────

class DecisionStatus(str, Enum):
    APPROVE = "APPROVE"
    ADJUST = "ADJUST"
    DEBRIEF = "DEBRIEF"


class ApprovalMeta(BaseModel):
    case_id: str
    created_at: datetime
    expert_name: str


class Decision(BaseModel):
    status: DecisionStatus = DecisionStatus.APPROVE
    operator_notes: str = ""


class NarrativeOverrides(BaseModel):
    executive_summary: str = ""
    risk_notes: str = ""
    recommendations: str = ""


class Adjustments(BaseModel):
    dimension_scores_override: dict[str, Optional[FiniteFloat]] = Field(default_factory=dict)


class Approval(BaseModel):
    meta: ApprovalMeta
    decision: Decision = Field(default_factory=Decision)
    overrides: NarrativeOverrides = Field(default_factory=NarrativeOverrides)
    adjustments: Adjustments = Field(default_factory=Adjustments)


# ── Report payload (handed to the renderer / mailer) ─────────────────────────

class SubjectMeta(BaseModel):
    subject_name: str = "Unknown"
    subject_email: str = ""
    organization: str = ""
    expert_name: str


class ReportPayload(BaseModel):
    case_id: str
    generated_at: datetime
    decision_status: DecisionStatus
    meta: SubjectMeta
    dimension_scores: dict[str, Optional[float]]
    dimension_bands: dict[str, str]
    overridden_dimensions: list[str] = Field(default_factory=list)
    aggregate_indices: dict[str, Optional[float]]
    index_bands: dict[str, str]
    confidence: Confidence
    hits: list[ConsistencyHit] = Field(default_factory=list)
    overrides: NarrativeOverrides = Field(default_factory=NarrativeOverrides)
    operator_notes: str = ""
