"""
LRID — Submission intake.

Validates raw payloads against the version-1 ``Submission`` schema and
indexes answers by question id.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from lrid.schemas.submission import Answer, Submission

logger = structlog.get_logger("lrid.submission_service")


class SubmissionRejected(ValueError):
    """The payload does not conform to the submission schema."""


def parse_submission(payload: dict[str, Any] | str | bytes) -> Submission:
    """Validate a submission payload (parsed dict or raw JSON text)."""
    try:
        if isinstance(payload, (str, bytes)):
            return Submission.model_validate_json(payload)
        return Submission.model_validate(payload)
    except ValidationError as exc:
        logger.warning("submission_rejected", errors=exc.error_count())
        raise SubmissionRejected(f"Submission does not match schema v1:\n{exc}") from exc


def load_submission(path: str | Path) -> Submission:
    return parse_submission(Path(path).read_bytes())


def index_answers(
    submission: Submission,
    log: Any = None,
) -> tuple[dict[str, Answer], list[str]]:
    """Map question id -> answer, last write wins.

    Returns
    -------
    tuple[dict[str, Answer], list[str]]
        The answer index and the ids that appeared more than once.
    """
    log = log or logger.bind(case_id=submission.case_id)
    by_id: dict[str, Answer] = {}
    duplicates: list[str] = []
    for answer in submission.answers:
        if answer.question_id in by_id and answer.question_id not in duplicates:
            duplicates.append(answer.question_id)
            log.warning("duplicate_answer", question_id=answer.question_id)
        by_id[answer.question_id] = answer
    return by_id, duplicates
