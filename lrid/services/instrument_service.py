"""
LRID — Instrument loading.

The instrument is read and validated once per process and shared read-only
afterwards.  Any integrity problem (unknown dimension, dangling question
reference, non-monotonic bands ...) is a broken deployment, so loading fails
loudly instead of degrading.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from lrid.config import get_settings
from lrid.schemas.instrument import (
    ContradictionPairLogic,
    Instrument,
    QuestionType,
)

logger = structlog.get_logger("lrid.instrument_service")


class InstrumentIntegrityError(ValueError):
    """The instrument document is malformed or internally inconsistent."""


def load_instrument(source: str | Path | dict[str, Any]) -> Instrument:
    """Validate an instrument document and return the frozen ``Instrument``.

    Parameters
    ----------
    source:
        Path to the compiled instrument JSON, or the already-parsed document.

    Raises
    ------
    InstrumentIntegrityError
        If the JSON cannot be parsed or the document violates any integrity
        invariant.  ``FileNotFoundError`` propagates unchanged.
    """
    origin = "<dict>" if isinstance(source, dict) else str(source)
    log = logger.bind(source=origin)

    if isinstance(source, dict):
        data = source
    else:
        try:
            data = json.loads(Path(source).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            log.error("instrument_json_invalid", error=str(exc))
            raise InstrumentIntegrityError(f"Instrument {origin} is not valid JSON: {exc}") from exc

    try:
        instrument = Instrument.model_validate(data)
    except ValidationError as exc:
        log.error("instrument_invalid", errors=exc.error_count())
        raise InstrumentIntegrityError(f"Instrument {origin} failed validation:\n{exc}") from exc

    _warn_on_soft_issues(instrument, log)
    log.info(
        "instrument_loaded",
        instrument_id=instrument.instrument_id,
        version=instrument.instrument_version,
        questions=len(instrument.question_bank),
        rules=len(instrument.consistency_checks),
    )
    return instrument


@lru_cache(maxsize=1)
def get_instrument() -> Instrument:
    """Return the process-wide instrument, loading it on first use.

    The path comes from ``Settings.INSTRUMENT_PATH``.  Tests and hosts that
    need a different instrument call ``load_instrument`` and inject it.
    """
    return load_instrument(get_settings().INSTRUMENT_PATH)


def _warn_on_soft_issues(instrument: Instrument, log: Any) -> None:
    """Log configuration smells that do not justify refusing to start."""
    for rule in instrument.consistency_checks:
        if not isinstance(rule.logic, ContradictionPairLogic):
            log.warning(
                "unrecognized_rule_shape",
                cc_id=rule.cc_id,
                logic_type=rule.logic.type,
            )
    for q in instrument.question_bank:
        if q.type is QuestionType.MULTIPLE_CHOICE and not q.score_map:
            log.warning("choice_question_without_scores", question_id=q.question_id)
