"""
Error Types
===========
Fatal parse errors and grading/crypto failures.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class FatalReason(str, Enum):
    """Conditions that abort a parse."""
    HEADER_NOT_FOUND = "header_not_found"
    EMPTY_ANSWER_SECTION = "empty_answer_section"
    NO_QUESTIONS = "no_questions"
    MISSING_ANSWER = "missing_answer"
    INCOMPLETE_QUESTION = "incomplete_question"


class ParseError(ValueError):
    """
    A fatal parse failure. No partial result accompanies it.

    ``str(error)`` is the human-readable message shown to the user.
    """

    def __init__(
        self,
        reason: FatalReason,
        message: str,
        question_number: Optional[int] = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.question_number = question_number


class GradingError(RuntimeError):
    """Illegal transition in a test-taking session."""


class DecryptionError(ValueError):
    """Ciphertext could not be authenticated or decoded."""
