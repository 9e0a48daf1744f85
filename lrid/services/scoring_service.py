"""
LRID — Scoring pipeline.

Runs one submission through the engine in a single synchronous pass:

  1. Index answers by question id (last write wins)
  2. Normalise each answered question into an item score
  3. Aggregate item scores into dimension scores and indices
  4. Evaluate consistency rules over the raw answers
  5. Derive the confidence score and level

The service holds only the injected, frozen ``Instrument`` and stateless
collaborators, so one instance can serve any number of concurrent callers.
"""

from __future__ import annotations

from typing import Any

import structlog

from lrid.config import get_settings
from lrid.schemas.instrument import Instrument, QuestionType
from lrid.schemas.scoring import (
    ConsistencyResult,
    ScoredItem,
    ScoringReport,
    ScoringResult,
)
from lrid.schemas.submission import Submission
from lrid.services.aggregator import DimensionAggregator
from lrid.services.confidence_service import ConfidenceScorer
from lrid.services.consistency_service import AnswerIndex, ConsistencyEvaluator
from lrid.services.normalizer import AnswerNormalizer
from lrid.services.submission_service import index_answers

logger = structlog.get_logger("lrid.scoring_service")


class ScoringService:
    """Scores submissions against one instrument.

    Parameters
    ----------
    instrument:
        The loaded, frozen instrument.  Never mutated.
    min_index_coverage:
        Override for ``Settings.MIN_INDEX_COVERAGE``.
    """

    def __init__(self, instrument: Instrument, min_index_coverage: int | None = None) -> None:
        if min_index_coverage is None:
            min_index_coverage = get_settings().MIN_INDEX_COVERAGE
        self.instrument = instrument
        self.normalizer = AnswerNormalizer()
        self.aggregator = DimensionAggregator(
            instrument.dimension_codes,
            instrument.aggregate_indices,
            min_index_coverage=min_index_coverage,
        )
        self.evaluator = ConsistencyEvaluator()
        self.confidence_scorer = ConfidenceScorer()

    def run(self, submission: Submission) -> ScoringReport:
        """Score a validated submission and return the full engine output."""
        log = logger.bind(case_id=submission.case_id)
        answers_by_id, _ = index_answers(submission, log)
        return self.score_indexed(submission.case_id, answers_by_id, log)

    def score_indexed(
        self,
        case_id: str,
        answers_by_id: AnswerIndex,
        log: Any = None,
    ) -> ScoringReport:
        """Steps 2-5 over an already indexed answer set."""
        log = log or logger.bind(case_id=case_id)
        log.info("scoring_start", n_answers=len(answers_by_id))

        scored_items = self.score_items(answers_by_id, log)
        aggregates = self.aggregator.aggregate(scored_items)
        log.info(
            "aggregation_complete",
            scored=sum(1 for i in scored_items if i.score is not None),
            dimension_scores=aggregates["dimension_scores"],
        )

        hits = self.evaluator.evaluate(self.instrument.consistency_checks, answers_by_id, log)
        confidence = self.confidence_scorer.score(hits, self.instrument.confidence_adjustments)
        log.info(
            "scoring_complete",
            hits=len(hits),
            confidence=confidence.score,
            level=confidence.level.value,
        )

        return ScoringReport(
            case_id=case_id,
            instrument_id=self.instrument.instrument_id,
            instrument_version=self.instrument.instrument_version,
            scoring=ScoringResult(
                scored_items=scored_items,
                dimension_scores=aggregates["dimension_scores"],
                aggregate_indices=aggregates["aggregate_indices"],
            ),
            consistency=ConsistencyResult(hits=hits, confidence=confidence),
        )

    def score_items(self, answers_by_id: AnswerIndex, log: Any = None) -> list[ScoredItem]:
        """One ``ScoredItem`` per answered question, in question-bank order."""
        log = log or logger
        questions = self.instrument.questions_by_id()
        for question_id in answers_by_id:
            if question_id not in questions:
                log.warning("unknown_question_ignored", question_id=question_id)

        items: list[ScoredItem] = []
        for question in self.instrument.question_bank:
            answer = answers_by_id.get(question.question_id)
            if answer is None:
                continue
            score = self.normalizer.normalize(question, answer.response)
            if score is None and question.type is not QuestionType.OPEN_TEXT:
                log.debug(
                    "answer_unscorable",
                    question_id=question.question_id,
                    question_type=question.type.value,
                )
            items.append(
                ScoredItem(
                    question_id=question.question_id,
                    dimension=question.dimension,
                    type=question.type,
                    response=answer.response,
                    score=score,
                )
            )
        return items
