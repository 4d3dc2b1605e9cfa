"""
Grading Engine
==============
Test-taking state machine and scoring.

    UNANSWERED → IN_PROGRESS → SUBMITTED

Selections overwrite (last write wins). Submission fires once, freezes the
response and computes the score. Completeness is not enforced: an
unanswered question simply never matches.
"""

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from .errors import GradingError
from .models import OPTION_LETTERS, ParsedTest, QuestionReview, ScoreResult

logger = logging.getLogger(__name__)


def score(answer_key: Mapping[int, str], response: Mapping[int, str]) -> ScoreResult:
    """Count responses equal to the key for every question in the key."""
    correct_count = sum(
        1 for number, letter in answer_key.items()
        if response.get(number) == letter
    )
    return ScoreResult(correct_count=correct_count, total=len(answer_key))


class ExamState(str, Enum):
    UNANSWERED = "unanswered"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


class ExamSession:
    """One attempt at a ParsedTest."""

    def __init__(self, parsed_test: ParsedTest):
        self.parsed_test = parsed_test
        self.state = ExamState.UNANSWERED
        self.result: Optional[ScoreResult] = None
        self._response: dict[int, str] = {}

    @property
    def response(self) -> Mapping[int, str]:
        """Read-only view of the current selections."""
        return MappingProxyType(self._response)

    @property
    def is_complete(self) -> bool:
        return len(self._response) == self.parsed_test.total

    def select(self, number: int, letter: str) -> None:
        """
        Record a selection for one question.

        Raises:
            GradingError: After submission, or for an unknown question
                number or a letter outside A-D.
        """
        if self.state == ExamState.SUBMITTED:
            raise GradingError("Test already submitted; response is frozen")
        if not 1 <= number <= self.parsed_test.total:
            raise GradingError(f"No question {number} in this test")

        letter = letter.upper()
        if letter not in OPTION_LETTERS:
            raise GradingError(f"Invalid option {letter!r}; expected A-D")

        self._response[number] = letter
        self.state = ExamState.IN_PROGRESS

    def submit(self) -> ScoreResult:
        """
        Freeze the response and score it.

        Raises:
            GradingError: If the test was already submitted.
        """
        if self.state == ExamState.SUBMITTED:
            raise GradingError("Test already submitted")

        if not self.is_complete:
            logger.info(
                f"Submitting with {len(self._response)} of "
                f"{self.parsed_test.total} questions answered"
            )

        self.result = score(self.parsed_test.answer_key, self._response)
        self.state = ExamState.SUBMITTED
        logger.info(
            f"Score: {self.result.correct_count}/{self.result.total}"
        )
        return self.result

    def review(self) -> list[QuestionReview]:
        """Per-question comparison of given and correct answers."""
        if self.state != ExamState.SUBMITTED:
            raise GradingError("Review is available after submission")

        rows = []
        for question in self.parsed_test.questions:
            given = self._response.get(question.number)
            correct = self.parsed_test.answer_key[question.number]
            rows.append(QuestionReview(
                number=question.number,
                text=question.text,
                given=given,
                given_text=question.option_for(given) if given else None,
                correct=correct,
                correct_text=question.option_for(correct),
            ))
        return rows
