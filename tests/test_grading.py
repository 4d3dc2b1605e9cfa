"""
Tests for scoring and the test-taking state machine.
"""

from __future__ import annotations

import pytest

from mocktest import grading
from mocktest.engine import ParserEngine
from mocktest.errors import GradingError
from mocktest.grading import ExamSession, score


@pytest.fixture
def session(mock_test_text):
    parsed = ParserEngine().parse(
        mock_test_text(3, answers={1: "A", 2: "B", 3: "C"})
    )
    return ExamSession(parsed)


class TestScore:

    def test_half_correct(self):
        result = score({1: "A", 2: "B"}, {1: "A", 2: "C"})
        assert result.correct_count == 1
        assert result.total == 2
        assert result.percentage == 0.5

    def test_missing_response_never_matches(self):
        result = score({1: "A", 2: "B"}, {2: "B"})
        assert result.correct_count == 1

    def test_empty_key(self):
        assert score({}, {}).percentage == 0.0


class TestExamSession:

    def test_initial_state(self, session):
        assert session.state == grading.ExamState.UNANSWERED
        assert session.result is None
        assert not session.is_complete

    def test_select_moves_to_in_progress(self, session):
        session.select(1, "a")
        assert session.state == grading.ExamState.IN_PROGRESS
        assert session.response[1] == "A"

    def test_last_write_wins(self, session):
        session.select(2, "A")
        session.select(2, "B")
        assert dict(session.response) == {2: "B"}

    def test_submit_scores(self, session):
        session.select(1, "A")
        session.select(2, "B")
        session.select(3, "D")
        assert session.is_complete

        result = session.submit()

        assert result.correct_count == 2
        assert result.total == 3
        assert session.state == grading.ExamState.SUBMITTED

    def test_submit_incomplete_is_allowed(self, session):
        session.select(1, "A")
        assert session.submit().correct_count == 1

    def test_submit_only_once(self, session):
        session.submit()
        with pytest.raises(GradingError):
            session.submit()

    def test_response_frozen_after_submit(self, session):
        session.select(1, "A")
        session.submit()
        with pytest.raises(GradingError):
            session.select(1, "B")
        assert session.response[1] == "A"

    def test_response_view_is_read_only(self, session):
        session.select(1, "A")
        with pytest.raises(TypeError):
            session.response[1] = "B"

    @pytest.mark.parametrize("number, letter", [(0, "A"), (4, "A"), (1, "E")])
    def test_rejects_unknown_selection(self, session, number, letter):
        with pytest.raises(GradingError):
            session.select(number, letter)

    def test_review(self, session):
        session.select(1, "A")
        session.select(2, "C")
        session.submit()

        rows = session.review()

        assert [r.is_correct for r in rows] == [True, False, False]
        assert rows[1].given_text == "Option C for 2"
        assert rows[1].correct_text == "Option B for 2"
        assert rows[2].given is None

    def test_review_requires_submission(self, session):
        with pytest.raises(GradingError):
            session.review()

    def test_scores_against_frozen_key(self, session):
        with pytest.raises(TypeError):
            session.parsed_test.answer_key[2] = "C"

        session.select(1, "A")
        session.select(2, "C")
        assert session.submit().correct_count == 1
