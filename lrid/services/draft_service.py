"""
LRID — Draft assessment builder.

A draft is the engine output for one case plus intake validation (completeness
and soft warnings) and band labels, ready for expert review.  Soft warnings
never block the draft; only a missing required answer marks it INCOMPLETE.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog

from lrid.schemas.instrument import Instrument, QuestionType
from lrid.schemas.report import (
    Completeness,
    Draft,
    DraftBands,
    DraftMeta,
    DraftValidation,
    ValidationStatus,
)
from lrid.schemas.scoring import ScoringReport
from lrid.schemas.submission import Submission
from lrid.services.banding import BandClassifier
from lrid.services.consistency_service import AnswerIndex
from lrid.services.scoring_service import ScoringService
from lrid.services.submission_service import index_answers

logger = structlog.get_logger("lrid.draft_service")


class DraftService:
    """Builds review drafts from validated submissions."""

    def __init__(self, instrument: Instrument, scoring_service: ScoringService | None = None) -> None:
        self.instrument = instrument
        self.scoring_service = scoring_service or ScoringService(instrument)
        self.band_classifier = BandClassifier()

    def build_draft(self, submission: Submission) -> Draft:
        log = logger.bind(case_id=submission.case_id)
        log.info("draft_start")

        answers_by_id, duplicates = index_answers(submission, log)
        report = self.scoring_service.score_indexed(submission.case_id, answers_by_id, log)
        validation = self._validate(submission, answers_by_id, duplicates, report)

        bands = self.instrument.bands
        draft = Draft(
            meta=DraftMeta(
                case_id=submission.case_id,
                created_at=datetime.now(timezone.utc),
                respondent_name=submission.respondent.name,
                respondent_email=submission.respondent.email,
                respondent_org=submission.respondent.organization,
                instrument_id=self.instrument.instrument_id,
                instrument_version=self.instrument.instrument_version,
            ),
            validation=validation,
            scoring=report.scoring,
            consistency=report.consistency,
            bands=DraftBands(
                dimensions=self.band_classifier.band_all(report.scoring.dimension_scores, bands),
                indices=self.band_classifier.band_all(report.scoring.aggregate_indices, bands),
            ),
        )
        log.info(
            "draft_complete",
            validation=validation.status.value,
            warnings=len(validation.soft_warnings),
        )
        return draft

    def _validate(
        self,
        submission: Submission,
        answers_by_id: AnswerIndex,
        duplicates: list[str],
        report: ScoringReport,
    ) -> DraftValidation:
        warnings: list[str] = []
        questions = self.instrument.questions_by_id()

        missing_required = [
            q.question_id
            for q in self.instrument.question_bank
            if q.required and _is_blank(answers_by_id.get(q.question_id))
        ]
        warnings.extend(f"missing_required:{qid}" for qid in missing_required)

        for q in self.instrument.question_bank:
            answer = answers_by_id.get(q.question_id)
            if answer is None or q.type is not QuestionType.OPEN_TEXT or not q.min_chars:
                continue
            if len(str(answer.response or "").strip()) < q.min_chars:
                warnings.append(f"below_min_chars:{q.question_id}")

        for item in report.scoring.scored_items:
            if (
                item.score is None
                and item.type is not QuestionType.OPEN_TEXT
                and not _is_blank_value(item.response)
            ):
                warnings.append(f"unscorable:{item.question_id}")

        warnings.extend(f"unknown_question:{qid}" for qid in answers_by_id if qid not in questions)
        warnings.extend(f"duplicate_answer:{qid}" for qid in duplicates)

        elapsed = submission.timestamps.elapsed_seconds if submission.timestamps else None
        if elapsed is not None and elapsed < self.instrument.min_expected_seconds:
            warnings.append("fast_completion")

        answered = sum(
            1 for qid, a in answers_by_id.items() if qid in questions and not _is_blank(a)
        )
        return DraftValidation(
            status=ValidationStatus.INCOMPLETE if missing_required else ValidationStatus.OK,
            completeness=Completeness(
                expected_questions=len(self.instrument.question_bank),
                answered_questions=answered,
                missing_required=missing_required,
            ),
            soft_warnings=warnings,
        )


def _is_blank_value(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_blank(answer: Any) -> bool:
    return answer is None or _is_blank_value(answer.response)
