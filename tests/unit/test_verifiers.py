"""
Unit tests for the question formats and their verifiers.

Covers the verifier registry plus check() and hint() for every format.

Run: pytest tests/unit/test_verifiers.py -v
"""

import pytest
from pydantic import ValidationError

from playquiz.questions import VERIFIERS, QuestionType, get_verifier
from playquiz.questions.arithmetic import ArithmeticQuestion
from playquiz.questions.comparison import OPERATORS, ComparisonQuestion
from playquiz.questions.fill_in_blank import FillInBlankQuestion
from playquiz.questions.missing_number import MissingNumberQuestion
from playquiz.questions.multiple_choice import MultipleChoiceQuestion
from playquiz.questions.reading import ReadingQuestion
from playquiz.questions.sorting import NumberSortQuestion, SentenceSortQuestion


def check(question, answer):
    return get_verifier(question.type).check(question, answer)


def hint(question, attempt):
    return get_verifier(question.type).hint(question, attempt)


class TestRegistry:
    """Test verifier lookup by tag."""

    def test_every_type_registered(self):
        assert set(VERIFIERS) == set(QuestionType)

    def test_lookup_by_string(self):
        assert get_verifier("multiple_choice") is VERIFIERS[QuestionType.MULTIPLE_CHOICE]
        assert get_verifier("READING") is VERIFIERS[QuestionType.READING]

    def test_unknown_type(self):
        assert get_verifier("essay") is None

    def test_retry_policies(self):
        assert get_verifier("reading").retry_policy.bounded
        assert get_verifier("sentence_sort").retry_policy.reshuffle
        assert get_verifier("number_sort").retry_policy.reshuffle
        assert not get_verifier("multiple_choice").retry_policy.bounded


class TestMultipleChoice:
    """Test multiple choice questions."""

    @pytest.fixture
    def question(self):
        return MultipleChoiceQuestion(
            question="What color is the sky?",
            options=["Red", "Blue", "Green"],
            answer="Blue",
        )

    def test_exact_match(self, question):
        assert check(question, "Blue").correct
        assert not check(question, "Red").correct

    def test_match_is_case_sensitive(self, question):
        assert not check(question, "blue").correct

    def test_canonical_is_question_text(self, question):
        assert question.canonical == "What color is the sky?"
        assert question.choices() == ("Red", "Blue", "Green")
        assert question.answer_order() == ()

    def test_hints_rule_out_wrong_options(self, question):
        assert hint(question, 1) == "'Red' is NOT the answer"
        assert hint(question, 2) == "'Green' is NOT the answer"
        assert hint(question, 3) is None

    def test_answer_must_be_an_option(self):
        with pytest.raises(ValidationError):
            MultipleChoiceQuestion(question="?", options=["a", "b"], answer="c")

    def test_options_must_be_unique(self):
        with pytest.raises(ValidationError):
            MultipleChoiceQuestion(question="?", options=["a", "a"], answer="a")


class TestComparison:
    """Test numeric comparison questions."""

    def test_operator_derived_from_operands(self):
        assert ComparisonQuestion(left=5, right=3).correct_operator == ">"
        assert ComparisonQuestion(left=2, right=9).correct_operator == "<"
        assert ComparisonQuestion(left=4, right=4).correct_operator == "="

    def test_check(self):
        question = ComparisonQuestion(left=5, right=3)
        assert check(question, ">").correct
        assert check(question, " > ").correct
        assert not check(question, "<").correct

    def test_prompt_and_canonical(self):
        question = ComparisonQuestion(left=5, right=3.5)
        assert question.prompt == "5 ? 3.5"
        assert question.canonical == "5 > 3.5"
        assert question.choices() == OPERATORS

    def test_wrong_authored_operator_rejected(self):
        with pytest.raises(ValidationError):
            ComparisonQuestion(left=5, right=3, operator="<")

    def test_hints(self):
        question = ComparisonQuestion(left=5, right=3)
        assert hint(question, 2) == "5 is the bigger number."
        assert hint(ComparisonQuestion(left=1, right=1), 2) == "Both numbers are the same."


class TestFillInBlank:
    """Test fill-in-the-blank questions."""

    @pytest.fixture
    def question(self):
        return FillInBlankQuestion(
            sentence="The cat sat on the mat.",
            missing_word="mat",
            word_bank=["mat", "hat", "bat"],
        )

    def test_case_insensitive(self, question):
        assert check(question, "MAT").correct
        assert check(question, "  mat ").correct
        assert not check(question, "hat").correct

    def test_prompt_blanks_the_word(self, question):
        assert question.prompt == "The cat sat on the _________."
        assert question.canonical == "The cat sat on the mat."

    def test_word_must_appear_in_sentence(self):
        with pytest.raises(ValidationError):
            FillInBlankQuestion(sentence="The cat sat.", missing_word="dog")

    def test_whole_word_only(self):
        """'at' inside 'cat' does not count as the blank."""
        with pytest.raises(ValidationError):
            FillInBlankQuestion(sentence="The cat sat.", missing_word="at")

    def test_hints(self, question):
        assert hint(question, 1) == "Starts with: m..."
        assert hint(question, 2) == "The word has 3 letters"
        assert hint(question, 3) == "Starts with 'm', ends with 't'"
        assert hint(question, 4) is None


class TestSentenceSort:
    """Test sentence sorting."""

    @pytest.fixture
    def question(self):
        return SentenceSortQuestion(sentence="I like green apples")

    def test_full_order_required(self, question):
        assert check(question, ["I", "like", "green", "apples"]).correct
        assert check(question, "I like green apples").correct
        assert not check(question, "like I green apples").correct

    def test_no_partial_credit(self, question):
        assert not check(question, ["I", "like", "green"]).correct

    def test_canonical(self, question):
        assert question.canonical == "I like green apples"

    def test_answer_order(self, question):
        assert question.answer_order() == ("I", "like", "green", "apples")

    def test_single_word_rejected(self):
        with pytest.raises(ValidationError):
            SentenceSortQuestion(sentence="Hello")


class TestNumberSort:
    """Test number sorting."""

    def test_ascending(self):
        question = NumberSortQuestion(numbers=[3, 1, 2])
        assert check(question, "1, 2, 3").correct
        assert check(question, [1, 2, 3]).correct
        assert not check(question, "3 2 1").correct

    def test_descending(self):
        question = NumberSortQuestion(numbers=[3, 1, 2], order="descending")
        assert question.target == [3, 2, 1]
        assert check(question, "3 2 1").correct

    def test_non_numeric_is_incorrect(self):
        verdict = check(NumberSortQuestion(numbers=[3, 1, 2]), "1 2 x")
        assert not verdict.correct
        assert not verdict.incomplete
        assert verdict.feedback == "Use only numbers."

    def test_canonical(self):
        assert NumberSortQuestion(numbers=[3, 1, 2]).canonical == "3, 1, 2 (ascending)"

    def test_answer_order(self):
        question = NumberSortQuestion(numbers=[8, 3, 5, 1], order="descending")
        assert question.choices() == ("8", "3", "5", "1")
        assert question.answer_order() == ("8", "5", "3", "1")
        assert NumberSortQuestion(numbers=[2.5, 1]).answer_order() == ("1", "2.5")

    def test_hints(self):
        question = NumberSortQuestion(numbers=[3, 1, 2], order="descending")
        assert hint(question, 1) == "Start with the biggest number: 3"
        assert hint(question, 2) == "The last number is 1"


class TestMissingNumber:
    """Test missing-number sequences."""

    @pytest.fixture
    def question(self):
        return MissingNumberQuestion(original=[1, 2, 3, 4], numbers=[1, 2, None, 4])

    def test_gap_values_only(self, question):
        assert check(question, "3").correct
        assert check(question, [3]).correct
        assert not check(question, "5").correct

    def test_full_sequence(self, question):
        assert check(question, [1, 2, 3, 4]).correct
        assert check(question, "1, 2, 3, 4").correct

    def test_empty_gap_is_incomplete(self, question):
        verdict = check(question, [1, 2, None, 4])
        assert not verdict.correct
        assert verdict.incomplete
        assert verdict.feedback == "Fill in all the gaps first."

        assert check(question, "").incomplete

    def test_non_numeric_fill_is_incorrect(self, question):
        verdict = check(question, "three")
        assert not verdict.correct
        assert not verdict.incomplete

    def test_several_gaps(self):
        question = MissingNumberQuestion(original=[2, 4, 6, 8], numbers=[2, None, 6, None])
        assert check(question, "4, 8").correct
        assert not check(question, "4, 9").correct
        assert check(question, "4, ").incomplete

    def test_prompt_and_canonical(self, question):
        assert question.prompt == "1, 2, _, 4"
        assert question.canonical == "1, 2, _, 4"

    def test_hints(self, question):
        assert hint(question, 1) == "The numbers go up by 1 each time."
        assert hint(question, 2) == "The first missing number comes right after 2."
        assert hint(question, 3) is None

    def test_shown_numbers_must_match_original(self):
        with pytest.raises(ValidationError):
            MissingNumberQuestion(original=[1, 2, 3], numbers=[1, 5, None])

    def test_needs_a_gap(self):
        with pytest.raises(ValidationError):
            MissingNumberQuestion(original=[1, 2, 3], numbers=[1, 2, 3])


class TestArithmetic:
    """Test arithmetic entry."""

    @pytest.fixture
    def question(self):
        return ArithmeticQuestion(first=3, operator="+", second=4, result=7)

    def test_integer_answer(self, question):
        assert check(question, "7").correct
        assert check(question, " 7 ").correct
        assert check(question, 7).correct
        assert not check(question, "8").correct

    def test_non_integer_rejected(self, question):
        verdict = check(question, "7.0")
        assert not verdict.correct
        assert verdict.feedback == "Type a whole number."

    def test_hidden_first_term(self):
        question = ArithmeticQuestion(first=3, operator="+", second=4, result=7, hidden="first")
        assert question.prompt == "? + 4 = 7"
        assert question.answer == 3
        assert check(question, "3").correct
        assert hint(question, 1) == "Find the first number"

    def test_prompt_and_canonical(self, question):
        assert question.prompt == "3 + 4 = ?"
        assert question.canonical == "3+4=7"

    def test_division(self):
        question = ArithmeticQuestion(first=6, operator="/", second=3, result=2)
        assert check(question, "2").correct

    def test_false_equation_rejected(self):
        with pytest.raises(ValidationError):
            ArithmeticQuestion(first=3, operator="+", second=4, result=8)


class TestReading:
    """Test reading practice."""

    @pytest.fixture
    def question(self):
        return ReadingQuestion(word="drinks")

    def test_close_enough_passes(self, question):
        verdict = check(question, "drink")
        assert verdict.correct
        assert verdict.accuracy == pytest.approx(83.33)
        assert verdict.feedback == "Great job!"

    def test_case_insensitive(self, question):
        assert check(question, "DRINKS").accuracy == 100

    def test_nothing_heard(self, question):
        verdict = check(question, "")
        assert not verdict.correct
        assert verdict.feedback == "I couldn't hear you. Please try again."

    def test_wrong_word(self, question):
        verdict = check(question, "dog")
        assert not verdict.correct
        assert verdict.feedback == 'Try again! You said "dog"'

    def test_hints(self, question):
        assert hint(question, 1) == "Listen and repeat: drinks"
        assert hint(question, 2) == "Say it slowly: d-r-i-n-k-s"
        assert hint(question, 3) is None
