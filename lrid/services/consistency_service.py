"""
LRID — Consistency / contradiction rule evaluation.

Rules and predicates are tagged variants (see ``lrid.schemas.instrument``).
Evaluation dispatches through two registries keyed on the tag, so a new
predicate or rule kind is supported by adding a schema variant and one
registry entry; ``ConsistencyEvaluator`` itself does not change.

Missing answers make a predicate false.  Rule shapes without a registered
evaluator are skipped.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

import structlog

from lrid.schemas.instrument import (
    ContradictionPairLogic,
    EqualsPredicate,
    GteLikertPredicate,
    InPredicate,
    Rule,
)
from lrid.schemas.scoring import ConsistencyHit
from lrid.schemas.submission import Answer
from lrid.utils.coercion import as_number, as_text

logger = structlog.get_logger("lrid.consistency_service")

AnswerIndex = Mapping[str, Answer]


# ──────────────────────────────────────────────────────────────────────────────
# Predicate tests: (predicate, raw response) -> bool
# ──────────────────────────────────────────────────────────────────────────────

def _test_equals(predicate: EqualsPredicate, response: Any) -> bool:
    return as_text(response) == as_text(predicate.equals)


def _test_in(predicate: InPredicate, response: Any) -> bool:
    return as_text(response) in {as_text(m) for m in predicate.members}


def _test_gte_likert(predicate: GteLikertPredicate, response: Any) -> bool:
    number = as_number(response)
    return number is not None and number >= predicate.gte_likert


PREDICATE_TESTS: dict[str, Callable[[Any, Any], bool]] = {
    "equals": _test_equals,
    "in": _test_in,
    "gte_likert": _test_gte_likert,
}


def evaluate_predicate(predicate: Any, answers_by_id: AnswerIndex) -> bool:
    """True iff the referenced answer exists and passes the predicate's test."""
    question_id = getattr(predicate, "question_id", None)
    answer = answers_by_id.get(question_id) if question_id else None
    if answer is None:
        return False
    test = PREDICATE_TESTS.get(predicate.kind)
    if test is None:
        return False
    return test(predicate, answer.response)


# ──────────────────────────────────────────────────────────────────────────────
# Rule evaluators: (logic, answers) -> fired?
# ──────────────────────────────────────────────────────────────────────────────

def _evaluate_contradiction_pair(logic: ContradictionPairLogic, answers_by_id: AnswerIndex) -> bool:
    # all() of an empty group is True, which is the intended vacuous truth.
    return all(evaluate_predicate(p, answers_by_id) for p in logic.if_) and all(
        evaluate_predicate(p, answers_by_id) for p in logic.and_
    )


RULE_EVALUATORS: dict[str, Callable[[Any, AnswerIndex], bool]] = {
    "contradiction_pair": _evaluate_contradiction_pair,
}


class ConsistencyEvaluator:
    """Runs every consistency rule, in declaration order, over one submission."""

    def evaluate(
        self,
        rules: Iterable[Rule],
        answers_by_id: AnswerIndex,
        log: Any = None,
    ) -> list[ConsistencyHit]:
        """Return one hit per rule whose full predicate set matches.

        All matching rules are reported, not just the first.
        """
        log = log or logger
        hits: list[ConsistencyHit] = []
        for rule in rules:
            evaluator = RULE_EVALUATORS.get(rule.logic.type)
            if evaluator is None:
                log.debug("rule_shape_skipped", cc_id=rule.cc_id, logic_type=rule.logic.type)
                continue
            if evaluator(rule.logic, answers_by_id):
                hits.append(
                    ConsistencyHit(
                        cc_id=rule.cc_id,
                        title=rule.title,
                        severity=rule.severity,
                        message=getattr(rule.logic, "message", ""),
                    )
                )
        log.debug("consistency_evaluated", hits=[h.cc_id for h in hits])
        return hits
