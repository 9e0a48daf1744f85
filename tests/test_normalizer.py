"""Unit tests for AnswerNormalizer: per-type answer scoring."""
import pytest

from lrid.schemas.instrument import Question
from lrid.services.normalizer import AnswerNormalizer


@pytest.fixture
def normalizer():
    return AnswerNormalizer()


def _likert(reverse=False):
    return Question(question_id="DI-1", dimension="DI", type="likert_5", reverse_scored=reverse)


class TestLikert5:
    """Likert 1-5 items, plain and reverse-scored."""

    @pytest.mark.parametrize("raw, expected", [(1, 1.0), (3, 3.0), ("5", 5.0), (4.0, 4.0), (" 2 ", 2.0)])
    def test_valid_values(self, normalizer, raw, expected):
        """Integers 1-5, integral floats and numeric strings are accepted."""
        assert normalizer.normalize(_likert(), raw) == expected

    @pytest.mark.parametrize("raw", [0, 6, -1, 4.5, "banana", "", None, True, float("nan"), [4], 10**400])
    def test_invalid_values_are_null(self, normalizer, raw):
        """Out of range, non-integral or non-numeric answers score None, never raise."""
        assert normalizer.normalize(_likert(), raw) is None

    @pytest.mark.parametrize("v", [1, 2, 3, 4, 5])
    def test_reverse_is_six_minus_v(self, normalizer, v):
        """Reverse-scored Likert maps v to 6 - v."""
        assert normalizer.normalize(_likert(reverse=True), v) == 6 - v

    @pytest.mark.parametrize("v", [1, 2, 3, 4, 5])
    def test_reverse_is_an_involution(self, normalizer, v):
        """Reversing twice returns the original value."""
        q = _likert(reverse=True)
        once = normalizer.normalize(q, v)
        assert normalizer.normalize(q, once) == v

    def test_legacy_type_name_accepted(self, normalizer):
        q = Question(question_id="DI-1", dimension="DI", type="likert5")
        assert normalizer.normalize(q, 4) == 4.0


class TestMultipleChoice:
    """Choice look-ups against explicit and option-derived score maps."""

    def _question(self, **kwargs):
        return Question(
            question_id="RP-2",
            dimension="RP",
            type="multiple_choice",
            options=[{"label": "Escalate", "score": 5}, {"label": "Wait", "score": 2}],
            **kwargs,
        )

    def test_option_index(self, normalizer):
        """The intake form posts the option index."""
        assert normalizer.normalize(self._question(), "1") == 2.0
        assert normalizer.normalize(self._question(), 0) == 5.0

    def test_integral_float_matches_index(self, normalizer):
        """1.0 looks up the same option as "1"."""
        assert normalizer.normalize(self._question(), 1.0) == 2.0

    def test_option_label(self, normalizer):
        """The option label maps to the option score too."""
        assert normalizer.normalize(self._question(), "Escalate") == 5.0

    def test_explicit_map_wins_over_options(self, normalizer):
        """choice_scores replaces the option-derived map entirely."""
        q = self._question(choice_scores={"a": 4, "b": 1})
        assert normalizer.normalize(q, "a") == 4.0
        assert normalizer.normalize(q, "0") is None

    @pytest.mark.parametrize("raw", ["7", "Maybe", None, ""])
    def test_unmapped_is_null(self, normalizer, raw):
        """Values outside the map score None."""
        assert normalizer.normalize(self._question(), raw) is None


class TestOpenText:

    def test_never_scored(self, normalizer):
        """Open text is collected but never scored."""
        q = Question(question_id="ED-2", dimension="ED", type="open_text")
        assert normalizer.normalize(q, "A long, thoughtful answer.") is None
        assert normalizer.normalize(q, 5) is None


class TestScale:
    """Bounded numeric scale with textual equivalents."""

    def _question(self, low=0, high=100, reverse=False):
        return Question(
            question_id="MA-2",
            dimension="MA",
            type="scale",
            scale={"min": low, "max": high},
            reverse_scored=reverse,
        )

    def test_numeric_within_bounds(self, normalizer):
        assert normalizer.normalize(self._question(), 72.5) == 72.5
        assert normalizer.normalize(self._question(), "0") == 0.0

    def test_numeric_out_of_bounds_is_null(self, normalizer):
        """Values outside [min, max] score None."""
        assert normalizer.normalize(self._question(), 101) is None
        assert normalizer.normalize(self._question(), -3) is None

    @pytest.mark.parametrize("raw, expected", [("yes", 100.0), ("No", 0.0), (True, 100.0), (False, 0.0)])
    def test_yes_no(self, normalizer, raw, expected):
        """yes/true map to max, no/false to min."""
        assert normalizer.normalize(self._question(), raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [("strongly disagree", 0.0), ("Disagree", 25.0), ("neutral", 50.0), ("agree", 75.0), ("Strongly  Agree", 100.0)],
    )
    def test_likert_labels_projected_onto_bounds(self, normalizer, raw, expected):
        """Five Likert labels spread linearly from min to max."""
        assert normalizer.normalize(self._question(), raw) == expected

    def test_reverse_mirrors_within_bounds(self, normalizer):
        """Reverse scale maps v to min + max - v."""
        assert normalizer.normalize(self._question(reverse=True), 30) == 70.0

    def test_default_bounds_are_one_to_five(self, normalizer):
        """Without a scale block the bounds are 1..5."""
        q = Question(question_id="MA-2", dimension="MA", type="scale")
        assert normalizer.normalize(q, 5) == 5.0
        assert normalizer.normalize(q, 0) is None

    def test_unknown_text_is_null(self, normalizer):
        assert normalizer.normalize(self._question(), "sometimes") is None
