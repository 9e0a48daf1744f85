"""End-to-end tests for ScoringService.run."""
import pytest

from lrid.config import get_settings
from lrid.schemas.instrument import Instrument
from lrid.schemas.scoring import ConfidenceLevel, ScoringReport
from lrid.services.scoring_service import ScoringService
from lrid.services.submission_service import parse_submission


def _single_question_service(reverse=False):
    instrument = Instrument.model_validate(
        {
            "question_bank": [
                {"question_id": "DI-1", "dimension": "DI", "type": "likert5", "reverse_scored": reverse}
            ]
        }
    )
    return ScoringService(instrument, min_index_coverage=1)


class TestSingleQuestion:

    def test_plain_likert(self, make_submission):
        """A single Likert 4 gives DI = 4.00."""
        report = _single_question_service().run(make_submission([("DI-1", 4)]))
        assert report.scoring.dimension_scores["DI"] == 4.00

    def test_reverse_likert(self, make_submission):
        """Reverse-scored 4 scores 2."""
        report = _single_question_service(reverse=True).run(make_submission([("DI-1", 4)]))
        assert report.scoring.scored_items[0].score == 2
        assert report.scoring.dimension_scores["DI"] == 2.00

    def test_non_numeric_answer_scores_null(self, make_submission):
        """Text on a Likert item scores None and leaves DI empty."""
        report = _single_question_service().run(make_submission([("DI-1", "banana")]))
        assert report.scoring.scored_items[0].score is None
        assert report.scoring.dimension_scores["DI"] is None


class TestFullRun:

    def test_complete_answers(self, scoring_service, make_submission, complete_answers):
        """The full fixture set: dimensions, indices and HIGH confidence."""
        report = scoring_service.run(make_submission(complete_answers))
        assert report.case_id == "LRID-20250101-0001"
        assert report.instrument_id == "LRID"
        assert report.scoring.dimension_scores == {
            "DI": 4.0, "RP": 5.0, "MA": 3.0, "AC": 4.0, "PR": 4.0, "ED": None,
        }
        assert report.scoring.aggregate_indices == {"oi": 4.33, "hsri": 3.67}
        assert report.consistency.hits == []
        assert report.consistency.confidence.score == 0.85
        assert report.consistency.confidence.level is ConfidenceLevel.HIGH

    def test_unscorable_answer_leaves_mean_unaffected(
        self, scoring_service, make_submission, complete_answers
    ):
        """A None item does not drag the DI mean down."""
        answers = complete_answers + [("DI-2", "banana")]
        report = scoring_service.run(make_submission(answers))
        assert report.scoring.dimension_scores["DI"] == 4.0

    def test_oversized_integer_answer_scores_null(self, scoring_service):
        """An integer beyond float range is unscorable and does not abort the run."""
        payload = (
            '{"case_id": "LRID-20250101-0002", "answers": ['
            '{"question_id": "DI-1", "value": 1' + "0" * 400 + '},'
            '{"question_id": "RP-1", "value": 4}]}'
        )
        report = scoring_service.run(parse_submission(payload))
        items = {i.question_id: i.score for i in report.scoring.scored_items}
        assert items["DI-1"] is None
        assert report.scoring.dimension_scores["DI"] is None
        assert report.scoring.dimension_scores["RP"] == 4.0
        assert report.consistency.hits == []

    def test_items_in_question_bank_order(self, scoring_service, make_submission, complete_answers):
        """Scored items follow the bank, not the answer order."""
        report = scoring_service.run(make_submission(list(reversed(complete_answers))))
        assert [i.question_id for i in report.scoring.scored_items] == [
            "DI-1", "DI-2", "RP-1", "RP-2", "MA-1", "AC-1", "PR-1", "ED-1",
        ]

    def test_unanswered_questions_have_no_item(self, scoring_service, make_submission):
        """Only answered questions produce scored items."""
        report = scoring_service.run(make_submission([("DI-1", 3)]))
        assert [i.question_id for i in report.scoring.scored_items] == ["DI-1"]
        assert report.scoring.dimension_scores["RP"] is None
        assert report.scoring.aggregate_indices["oi"] == 3.0

    def test_unknown_question_ignored(self, scoring_service, make_submission):
        """Answers outside the bank are not scored."""
        report = scoring_service.run(make_submission([("DI-1", 3), ("ZZ-9", 5)]))
        assert "ZZ-9" not in {i.question_id for i in report.scoring.scored_items}

    def test_empty_submission(self, scoring_service, make_submission):
        """No answers: every score None, confidence at base."""
        report = scoring_service.run(make_submission([]))
        assert all(v is None for v in report.scoring.dimension_scores.values())
        assert all(v is None for v in report.scoring.aggregate_indices.values())
        assert report.consistency.confidence.score == 0.85


class TestConsistencyInRun:

    def test_contradiction_lowers_confidence(self, scoring_service, make_submission):
        """One HIGH hit: 0.85 - 0.10 = 0.75, MEDIUM."""
        report = scoring_service.run(make_submission([("DI-1", 5), ("DI-2", "5")]))
        assert [h.cc_id for h in report.consistency.hits] == ["CC-01"]
        assert report.consistency.confidence.score == 0.75
        assert report.consistency.confidence.level is ConfidenceLevel.MEDIUM

    def test_rules_read_raw_answers(self, scoring_service, make_submission):
        """RP-2 index "1" scores 3 but the rule matches the raw value."""
        report = scoring_service.run(make_submission([("RP-1", 4), ("RP-2", "1")]))
        assert [h.cc_id for h in report.consistency.hits] == ["CC-02"]
        assert report.consistency.confidence.score == 0.79

    def test_both_rules(self, scoring_service, make_submission):
        """HIGH plus MEDIUM: 0.85 - 0.10 - 0.06 = 0.69."""
        answers = [("DI-1", 4), ("DI-2", 5), ("RP-1", 5), ("RP-2", 2)]
        report = scoring_service.run(make_submission(answers))
        assert [h.cc_id for h in report.consistency.hits] == ["CC-01", "CC-02"]
        assert report.consistency.confidence.score == 0.69


class TestDeterminism:

    def test_same_input_same_output(self, scoring_service, make_submission, complete_answers):
        """Repeated runs on one submission are identical."""
        submission = make_submission(complete_answers)
        assert scoring_service.run(submission) == scoring_service.run(submission)

    def test_instrument_untouched(self, instrument, scoring_service, make_submission, complete_answers):
        """Scoring never mutates the shared instrument."""
        before = instrument.model_dump()
        scoring_service.run(make_submission(complete_answers))
        assert instrument.model_dump() == before

    def test_json_round_trip(self, scoring_service, make_submission, complete_answers):
        report = scoring_service.run(make_submission(complete_answers))
        assert ScoringReport.model_validate_json(report.model_dump_json()) == report


class TestCoverageSetting:

    def test_falls_back_to_settings(self, instrument, monkeypatch):
        """Without an argument the coverage comes from LRID_MIN_INDEX_COVERAGE."""
        monkeypatch.setenv("LRID_MIN_INDEX_COVERAGE", "2")
        get_settings.cache_clear()
        try:
            service = ScoringService(instrument)
            assert service.aggregator.min_index_coverage == 2
        finally:
            get_settings.cache_clear()

    @pytest.mark.parametrize("coverage, expected", [(1, 3.0), (2, None)])
    def test_coverage_applied(self, instrument, make_submission, coverage, expected):
        """One dimension is enough at coverage 1, not at 2."""
        service = ScoringService(instrument, min_index_coverage=coverage)
        report = service.run(make_submission([("DI-1", 3)]))
        assert report.scoring.aggregate_indices["oi"] == expected
