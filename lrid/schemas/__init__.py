"""
LRID — schema registry.

Re-exports the instrument, submission and result models so callers can write
``from lrid.schemas import Instrument, Submission``.
"""

from lrid.schemas.instrument import (
    Bands,
    BandThreshold,
    ConfidenceConfig,
    ContradictionPairLogic,
    Dimension,
    EqualsPredicate,
    GteLikertPredicate,
    InPredicate,
    Instrument,
    Option,
    Question,
    QuestionType,
    Rule,
    ScaleBounds,
    Severity,
    UnrecognizedLogic,
    UnrecognizedPredicate,
)
from lrid.schemas.report import (
    Approval,
    DecisionStatus,
    Draft,
    ReportPayload,
    ValidationStatus,
)
from lrid.schemas.scoring import (
    Confidence,
    ConfidenceLevel,
    ConsistencyHit,
    ConsistencyResult,
    ScoredItem,
    ScoringReport,
    ScoringResult,
)
from lrid.schemas.submission import Answer, Respondent, Submission, Timestamps

__all__ = [
    "Answer",
    "Approval",
    "Bands",
    "BandThreshold",
    "Confidence",
    "ConfidenceConfig",
    "ConfidenceLevel",
    "ConsistencyHit",
    "ConsistencyResult",
    "ContradictionPairLogic",
    "DecisionStatus",
    "Dimension",
    "Draft",
    "EqualsPredicate",
    "GteLikertPredicate",
    "InPredicate",
    "Instrument",
    "Option",
    "Question",
    "QuestionType",
    "ReportPayload",
    "Respondent",
    "Rule",
    "ScaleBounds",
    "ScoredItem",
    "ScoringReport",
    "ScoringResult",
    "Severity",
    "Submission",
    "Timestamps",
    "UnrecognizedLogic",
    "UnrecognizedPredicate",
    "ValidationStatus",
]
