"""
Validation Engine
=================
Turns extracted questions and the candidate answer map into an immutable
ParsedTest, or rejects the whole parse.

Fatal checks run in order and only the first failure is reported:
    - Encoded Answers header present
    - (strict mode) no incomplete question blocks
    - At least one accepted question
    - An answer for every question 1..K
"""

from __future__ import annotations

import logging

from .answer_decoder import DecodedAnswers
from .errors import FatalReason, ParseError
from .models import ParsedTest, ParseWarning, Question, WarningType

logger = logging.getLogger(__name__)


class ValidationEngine:
    """
    Enforces header presence, a non-empty question set and full coverage.
    """

    def __init__(self, strict_questions: bool = False):
        self.strict_questions = strict_questions

    def validate(
        self,
        questions: list[Question],
        decoded: DecodedAnswers,
        warnings: list[ParseWarning],
    ) -> ParsedTest:
        """
        Build the final ParsedTest.

        Args:
            questions: Accepted questions numbered 1..K.
            decoded: Candidate answers from the decoder.
            warnings: Every non-fatal warning collected so far.

        Returns:
            ParsedTest with the answer key restricted to 1..K.

        Raises:
            ParseError: On the first failed check.
        """
        if not decoded.header_found:
            raise ParseError(
                FatalReason.HEADER_NOT_FOUND,
                'Encoded Answers header not found. '
                'Please include "Encoded Answers:".',
            )

        if self.strict_questions:
            incomplete = [
                w for w in warnings
                if w.type == WarningType.INCOMPLETE_QUESTION
            ]
            if incomplete:
                raise ParseError(
                    FatalReason.INCOMPLETE_QUESTION,
                    incomplete[0].message,
                )

        total = len(questions)
        if total == 0:
            raise ParseError(
                FatalReason.NO_QUESTIONS,
                "No valid questions parsed. Ensure each question uses "
                "'Question X:' with A)-D) options.",
            )

        for number in range(1, total + 1):
            if number not in decoded.answers:
                raise ParseError(
                    FatalReason.MISSING_ANSWER,
                    f"Missing encoded answer for question {number}.",
                    question_number=number,
                )

        extra = sorted(n for n in decoded.answers if n > total)
        if extra:
            logger.debug(f"Ignoring answers beyond question {total}: {extra}")

        answer_key = {n: decoded.answers[n] for n in range(1, total + 1)}

        logger.info(
            f"Validated {total} questions with {len(warnings)} warnings"
        )

        return ParsedTest(
            questions=tuple(questions),
            answer_key=answer_key,
            warnings=tuple(warnings),
        )
