"""
LRID — Answer normalisation.

Turns one heterogeneous raw answer into a canonical numeric score, or None
when the answer is absent or cannot be scored.  A bad answer is never an
error: it simply does not contribute to its dimension.
"""

from __future__ import annotations

from typing import Any, Callable

from lrid.schemas.instrument import Question, QuestionType
from lrid.utils.coercion import as_number, as_text


class AnswerNormalizer:
    """Pure per-question scoring rules, dispatched on ``Question.type``."""

    LIKERT_MIN: int = 1
    LIKERT_MAX: int = 5

    # Five-point agreement labels -> position on the Likert ladder.
    LIKERT_LABELS: dict[str, int] = {
        "strongly disagree": 1,
        "disagree": 2,
        "neutral": 3,
        "neither agree nor disagree": 3,
        "agree": 4,
        "strongly agree": 5,
    }
    AFFIRMATIVE: frozenset[str] = frozenset({"yes", "y", "true"})
    NEGATIVE: frozenset[str] = frozenset({"no", "n", "false"})

    def __init__(self) -> None:
        self._handlers: dict[QuestionType, Callable[[Question, Any], float | None]] = {
            QuestionType.LIKERT_5: self._likert_5,
            QuestionType.MULTIPLE_CHOICE: self._multiple_choice,
            QuestionType.OPEN_TEXT: self._open_text,
            QuestionType.SCALE: self._scale,
        }

    def normalize(self, question: Question, raw: Any) -> float | None:
        """Return the canonical score for ``raw`` under ``question``'s rule."""
        handler = self._handlers.get(question.type)
        if handler is None:
            return None
        return handler(question, raw)

    # ── Per-type rules ────────────────────────────────────────────────────

    def _likert_5(self, question: Question, raw: Any) -> float | None:
        """Integer 1..5, mirrored to ``6 - v`` when reverse-scored."""
        number = as_number(raw)
        if number is None or not number.is_integer():
            return None
        value = int(number)
        if not self.LIKERT_MIN <= value <= self.LIKERT_MAX:
            return None
        if question.reverse_scored:
            value = (self.LIKERT_MIN + self.LIKERT_MAX) - value
        return float(value)

    @staticmethod
    def _multiple_choice(question: Question, raw: Any) -> float | None:
        if raw is None:
            return None
        score = question.score_map.get(as_text(raw))
        return None if score is None else float(score)

    @staticmethod
    def _open_text(question: Question, raw: Any) -> float | None:
        # Free text is kept for narrative review only.
        return None

    def _scale(self, question: Question, raw: Any) -> float | None:
        """Bounded numeric, or a yes/no or agreement label mapped onto the bounds."""
        low, high = question.bounds.low, question.bounds.high

        if isinstance(raw, bool):
            value: float | None = high if raw else low
        else:
            number = as_number(raw)
            if number is not None:
                value = number if low <= number <= high else None
            else:
                value = self._scale_from_label(as_text(raw), low, high)

        if value is None:
            return None
        if question.reverse_scored:
            value = low + high - value
        return float(value)

    def _scale_from_label(self, text: str, low: float, high: float) -> float | None:
        label = " ".join(text.lower().split())
        if label in self.AFFIRMATIVE:
            return high
        if label in self.NEGATIVE:
            return low
        position = self.LIKERT_LABELS.get(label)
        if position is None:
            return None
        span = self.LIKERT_MAX - self.LIKERT_MIN
        return low + (position - self.LIKERT_MIN) / span * (high - low)
