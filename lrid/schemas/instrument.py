"""
LRID — Instrument definition schema.

The instrument is the versioned, read-only description of one assessment:
question bank, dimensions, aggregate indices, bands, consistency rules and
confidence adjustments.  It is produced by an external compiler and validated
here once, at load time.  All models are frozen.

Consistency rules and their predicates are tagged variants.  The tag is
derived from the document shape (``logic.type`` for rules, the name of the
test field for predicates), so the JSON stays exactly as the compiler
writes it.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


# ──────────────────────────────────────────────────────────────────────────────
# Questions
# ──────────────────────────────────────────────────────────────────────────────

class QuestionType(str, Enum):
    LIKERT_5 = "likert_5"
    MULTIPLE_CHOICE = "multiple_choice"
    OPEN_TEXT = "open_text"
    SCALE = "scale"


_LEGACY_TYPE_NAMES: dict[str, str] = {
    "likert5": QuestionType.LIKERT_5.value,
    "single_choice": QuestionType.MULTIPLE_CHOICE.value,
}


class Option(_Frozen):
    label: str
    score: float


class ScaleBounds(_Frozen):
    low: float = Field(default=1.0, alias="min")
    high: float = Field(default=5.0, alias="max")


class QuestionText(_Frozen):
    en: str = ""
    pl: str = ""


class Question(_Frozen):
    question_id: str = Field(min_length=1)
    dimension: str
    type: QuestionType
    required: bool = False
    reverse_scored: bool = False
    min_chars: int | None = None
    options: tuple[Option, ...] | None = None
    choice_scores: dict[str, float] | None = None
    scale: ScaleBounds | None = None
    text: QuestionText = Field(default_factory=QuestionText)

    @field_validator("type", mode="before")
    @classmethod
    def _accept_legacy_type_names(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return _LEGACY_TYPE_NAMES.get(v, v)
        return v

    @property
    def bounds(self) -> ScaleBounds:
        return self.scale or ScaleBounds()

    @property
    def score_map(self) -> dict[str, float]:
        """Choice value -> score.

        An explicit ``choice_scores`` map wins; otherwise both the option
        index (what the intake form posts) and the option label map to the
        option's score.
        """
        if self.choice_scores is not None:
            return dict(self.choice_scores)
        mapping: dict[str, float] = {}
        for idx, option in enumerate(self.options or ()):
            mapping[str(idx)] = option.score
            mapping.setdefault(option.label.strip(), option.score)
        return mapping


class Dimension(_Frozen):
    code: str
    name: str


DEFAULT_DIMENSIONS: tuple[Dimension, ...] = (
    Dimension(code="DI", name="Decision Integrity"),
    Dimension(code="RP", name="Risk Posture"),
    Dimension(code="MA", name="Moral Autonomy"),
    Dimension(code="AC", name="Adaptive Consistency"),
    Dimension(code="PR", name="Power Response"),
    Dimension(code="ED", name="Ethical Discipline"),
)

DEFAULT_AGGREGATE_INDICES: dict[str, tuple[str, ...]] = {
    "oi": ("DI", "RP", "AC"),
    "hsri": ("DI", "MA", "PR", "ED"),
}


# ──────────────────────────────────────────────────────────────────────────────
# Bands
# ──────────────────────────────────────────────────────────────────────────────

class BandThreshold(_Frozen):
    label: str
    upper: float


class Bands(_Frozen):
    thresholds: tuple[BandThreshold, ...] = (
        BandThreshold(label="Risk Zone", upper=2.79),
        BandThreshold(label="Mixed / Context-dependent", upper=3.30),
    )
    top_label: str = "Functional Strength"
    insufficient_label: str = "Insufficient Data"

    @model_validator(mode="before")
    @classmethod
    def _accept_compiler_shape(cls, data: Any) -> Any:
        # {"risk_zone_max": 2.79, "mixed_max": 3.30} as written by the compiler
        if isinstance(data, dict) and "thresholds" not in data and (
            "risk_zone_max" in data or "mixed_max" in data
        ):
            converted = {k: v for k, v in data.items() if k not in ("risk_zone_max", "mixed_max")}
            converted["thresholds"] = [
                {"label": "Risk Zone", "upper": data.get("risk_zone_max", 2.79)},
                {"label": "Mixed / Context-dependent", "upper": data.get("mixed_max", 3.30)},
            ]
            return converted
        return data

    @model_validator(mode="after")
    def _thresholds_strictly_increasing(self) -> "Bands":
        uppers = [t.upper for t in self.thresholds]
        if any(b <= a for a, b in zip(uppers, uppers[1:])):
            raise ValueError(f"Band thresholds must be strictly increasing, got {uppers}")
        labels = {t.label for t in self.thresholds} | {self.top_label}
        if self.insufficient_label in labels:
            raise ValueError(
                f"insufficient_label {self.insufficient_label!r} collides with a real band"
            )
        return self


# ──────────────────────────────────────────────────────────────────────────────
# Consistency rules: predicate variants
# ──────────────────────────────────────────────────────────────────────────────

class EqualsPredicate(_Frozen):
    kind: Literal["equals"] = "equals"
    question_id: str
    equals: Any


class InPredicate(_Frozen):
    kind: Literal["in"] = "in"
    question_id: str
    members: tuple[Any, ...] = Field(alias="in")


class GteLikertPredicate(_Frozen):
    kind: Literal["gte_likert"] = "gte_likert"
    question_id: str
    gte_likert: float


class UnrecognizedPredicate(_Frozen):
    model_config = ConfigDict(frozen=True, extra="allow")

    kind: Literal["unrecognized"] = "unrecognized"
    question_id: str | None = None


_PREDICATE_TEST_FIELDS = ("equals", "in", "gte_likert")


def _predicate_tag(value: Any) -> str:
    if isinstance(value, dict):
        for key in _PREDICATE_TEST_FIELDS:
            if key in value:
                return key
        return "unrecognized"
    return getattr(value, "kind", "unrecognized")


Predicate = Annotated[
    Union[
        Annotated[EqualsPredicate, Tag("equals")],
        Annotated[InPredicate, Tag("in")],
        Annotated[GteLikertPredicate, Tag("gte_likert")],
        Annotated[UnrecognizedPredicate, Tag("unrecognized")],
    ],
    Discriminator(_predicate_tag),
]


# ──────────────────────────────────────────────────────────────────────────────
# Consistency rules: rule variants
# ──────────────────────────────────────────────────────────────────────────────

class ContradictionPairLogic(_Frozen):
    type: Literal["contradiction_pair"] = "contradiction_pair"
    if_: tuple[Predicate, ...] = Field(default=(), alias="if")
    and_: tuple[Predicate, ...] = Field(default=(), alias="and")
    message: str = ""

    @property
    def predicates(self) -> tuple[Any, ...]:
        return self.if_ + self.and_


class UnrecognizedLogic(_Frozen):
    """Any rule shape this engine does not evaluate yet."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = "unknown"


def _logic_tag(value: Any) -> str:
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return "contradiction_pair" if kind == "contradiction_pair" else "unrecognized"


RuleLogic = Annotated[
    Union[
        Annotated[ContradictionPairLogic, Tag("contradiction_pair")],
        Annotated[UnrecognizedLogic, Tag("unrecognized")],
    ],
    Discriminator(_logic_tag),
]


class Rule(_Frozen):
    cc_id: str
    title: str = ""
    severity: str = "MEDIUM"
    logic: RuleLogic = Field(default_factory=UnrecognizedLogic)

    @field_validator("severity", mode="before")
    @classmethod
    def _upper_severity(cls, v: Any) -> str:
        return str(v or "").strip().upper()

    def referenced_question_ids(self) -> list[str]:
        if not isinstance(self.logic, ContradictionPairLogic):
            return []
        return [p.question_id for p in self.logic.predicates if p.question_id]


# ──────────────────────────────────────────────────────────────────────────────
# Confidence
# ──────────────────────────────────────────────────────────────────────────────

class Severity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


DEFAULT_PENALTY_BY_SEVERITY: dict[str, float] = {
    Severity.LOW.value: 0.03,
    Severity.MEDIUM.value: 0.06,
    Severity.HIGH.value: 0.10,
}


class ConfidenceConfig(_Frozen):
    base_confidence: float = 0.85
    per_cc_hit_penalty: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_PENALTY_BY_SEVERITY)
    )
    floor: float = 0.55
    # Level cut-offs: HIGH >= high_cutoff, MEDIUM >= medium_cutoff, else LOW.
    high_cutoff: float = 0.80
    medium_cutoff: float = 0.65

    @field_validator("per_cc_hit_penalty")
    @classmethod
    def _upper_keys(cls, v: dict[str, float]) -> dict[str, float]:
        return {str(k).strip().upper(): float(p) for k, p in v.items()}

    @model_validator(mode="after")
    def _check_ordering(self) -> "ConfidenceConfig":
        if self.floor > self.base_confidence:
            raise ValueError(
                f"floor ({self.floor}) exceeds base_confidence ({self.base_confidence})"
            )
        if self.medium_cutoff > self.high_cutoff:
            raise ValueError(
                f"medium_cutoff ({self.medium_cutoff}) exceeds high_cutoff ({self.high_cutoff})"
            )
        if any(p < 0 for p in self.per_cc_hit_penalty.values()):
            raise ValueError("per_cc_hit_penalty values must be non-negative")
        return self


# ──────────────────────────────────────────────────────────────────────────────
# Instrument
# ──────────────────────────────────────────────────────────────────────────────

class Instrument(_Frozen):
    instrument_id: str = "LRID"
    instrument_version: str = "1.0"
    min_expected_seconds: int = 900
    dimensions: tuple[Dimension, ...] = DEFAULT_DIMENSIONS
    question_bank: tuple[Question, ...]
    multiple_choice_scores: dict[str, dict[str, float]] = Field(default_factory=dict)
    reverse_scored_question_ids: tuple[str, ...] = ()
    aggregate_indices: dict[str, tuple[str, ...]] = Field(
        default_factory=lambda: dict(DEFAULT_AGGREGATE_INDICES)
    )
    bands: Bands = Field(default_factory=Bands)
    consistency_checks: tuple[Rule, ...] = ()
    confidence_adjustments: ConfidenceConfig = Field(default_factory=ConfidenceConfig)

    @model_validator(mode="before")
    @classmethod
    def _fold_scoring_maps_into_questions(cls, data: Any) -> Any:
        """Copy instrument-level scoring parameters onto their questions.

        The compiler ships reverse-scored ids and multiple-choice score maps
        beside the question bank; the normalizer only sees one question.
        """
        if not isinstance(data, dict):
            return data
        # Malformed sections are left untouched for field validation to report.
        raw_reverse = data.get("reverse_scored_question_ids") or ()
        reverse_ids: set[str] = set()
        if isinstance(raw_reverse, (list, tuple)):
            reverse_ids = {r for r in raw_reverse if isinstance(r, str)}
        mc_scores = data.get("multiple_choice_scores") or {}
        if not isinstance(mc_scores, dict):
            mc_scores = {}
        bank = data.get("question_bank") or ()
        if not isinstance(bank, (list, tuple)) or (not reverse_ids and not mc_scores):
            return data

        folded: list[Any] = []
        for q in bank:
            if isinstance(q, Question):
                qid = q.question_id
            elif isinstance(q, dict):
                qid = q.get("question_id")
            else:
                qid = None
            if not isinstance(qid, str):
                folded.append(q)
                continue
            update: dict[str, Any] = {}
            if qid in reverse_ids:
                update["reverse_scored"] = True
            if qid in mc_scores and isinstance(mc_scores[qid], dict):
                update["choice_scores"] = {str(k): v for k, v in mc_scores[qid].items()}
            if not update:
                folded.append(q)
            elif isinstance(q, Question):
                folded.append(q.model_copy(update=update))
            else:
                folded.append({**q, **update})
        return {**data, "question_bank": folded}

    @model_validator(mode="after")
    def _check_integrity(self) -> "Instrument":
        problems = _integrity_problems(self)
        if problems:
            raise ValueError("Instrument integrity violated: " + "; ".join(problems))
        return self

    # ── Look-ups ──────────────────────────────────────────────────────────

    @property
    def dimension_codes(self) -> list[str]:
        return [d.code for d in self.dimensions]

    def questions_by_id(self) -> dict[str, Question]:
        return {q.question_id: q for q in self.question_bank}

    def dimension_name(self, code: str) -> str:
        for d in self.dimensions:
            if d.code == code:
                return d.name
        return code


def _integrity_problems(instrument: Instrument) -> list[str]:
    problems: list[str] = []
    dimension_codes = set(instrument.dimension_codes)

    if len(dimension_codes) != len(instrument.dimensions):
        problems.append("duplicate dimension codes")

    seen: set[str] = set()
    for q in instrument.question_bank:
        if q.question_id in seen:
            problems.append(f"duplicate question_id {q.question_id!r}")
        seen.add(q.question_id)
        if q.dimension not in dimension_codes:
            problems.append(f"question {q.question_id!r} has unknown dimension {q.dimension!r}")
        if q.scale is not None and q.scale.low >= q.scale.high:
            problems.append(f"question {q.question_id!r} has empty scale bounds")

    for qid in instrument.multiple_choice_scores:
        if qid not in seen:
            problems.append(f"multiple_choice_scores references unknown question {qid!r}")
    for qid in instrument.reverse_scored_question_ids:
        if qid not in seen:
            problems.append(f"reverse_scored_question_ids references unknown question {qid!r}")

    for name, codes in instrument.aggregate_indices.items():
        for code in codes:
            if code not in dimension_codes:
                problems.append(f"aggregate index {name!r} references unknown dimension {code!r}")

    rule_ids: set[str] = set()
    for rule in instrument.consistency_checks:
        if rule.cc_id in rule_ids:
            problems.append(f"duplicate consistency rule {rule.cc_id!r}")
        rule_ids.add(rule.cc_id)
        for qid in rule.referenced_question_ids():
            if qid not in seen:
                problems.append(f"rule {rule.cc_id!r} references unknown question {qid!r}")

    return problems
