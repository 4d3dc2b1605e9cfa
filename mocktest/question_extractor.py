"""
Question Block Extractor
========================
Assembles question blocks from classified lines.

Two option layouts are recognised:
    - Inline: "Question 1: Text A) one B) two C) three D) four"
    - Block:  the header line followed by exactly four option lines

A header is accepted only when exactly four options resolve. Accepted
questions are renumbered 1..K in acceptance order; the number written in
the header is kept as ``label``.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from .lines import (
    INLINE_OPTION_PATTERN,
    OPTION_LINE_PATTERN,
    QUESTION_HEADER_PATTERN,
    LineKind,
    classify_line,
)
from .models import ParseWarning, Question, WarningType

logger = logging.getLogger(__name__)

OPTION_COUNT = 4

INLINE_SPLIT_PATTERN = re.compile(r"(?=\b[A-D][.)]\s)")
OPTION_LABEL_PATTERN = re.compile(r"^[A-D][.)]\s*")


def split_inline_options(content: str) -> tuple[str, list[str]]:
    """
    Split header trailing content at every option label.

    Returns the question text and the option texts with labels stripped.
    When no label is present the option list is empty.
    """
    if not INLINE_OPTION_PATTERN.search(content):
        return content.strip(), []

    parts = INLINE_SPLIT_PATTERN.split(content)
    text = parts[0].strip()
    options = [OPTION_LABEL_PATTERN.sub("", p).strip() for p in parts[1:]]
    return text, options


def read_block_options(lines: list[str], start: int) -> Optional[list[str]]:
    """Read the four option lines beginning at ``start``, or None."""
    window = lines[start:start + OPTION_COUNT]
    if len(window) < OPTION_COUNT:
        return None

    options = []
    for line in window:
        match = OPTION_LINE_PATTERN.match(line)
        if not match:
            return None
        options.append(match.group(2).strip())
    return options


class QuestionExtractor:
    """
    Scans normalized lines for question headers until the answer section.
    """

    def __init__(self):
        self.questions: list[Question] = []
        self.warnings: list[ParseWarning] = []

    def reset(self):
        """Reset for a fresh extraction run."""
        self.questions = []
        self.warnings = []

    def extract(self, lines: list[str]) -> list[Question]:
        """Extract accepted questions from normalized lines."""
        self.reset()

        i = 0
        while i < len(lines):
            kind = classify_line(lines[i])

            if kind == LineKind.ANSWER_HEADER:
                break

            if kind == LineKind.QUESTION_HEADER:
                i = self._process_header(lines, i)
                continue

            i += 1

        return self.questions

    def _process_header(self, lines: list[str], index: int) -> int:
        """Resolve one header; return the index of the next line to scan."""
        match = QUESTION_HEADER_PATTERN.match(lines[index])
        label = int(match.group(1))
        text, options = split_inline_options(match.group(2))
        next_index = index + 1

        if not options:
            block = read_block_options(lines, index + 1)
            if block is not None:
                options = block
                next_index = index + 1 + OPTION_COUNT

        if len(options) != OPTION_COUNT:
            self._skip(label, index, len(options))
            return index + 1

        number = len(self.questions) + 1
        if label != number:
            logger.debug(
                f"Question labelled {label} accepted as question {number}"
            )
        logger.debug(f"Accepted question {number} at line {index + 1}")

        self.questions.append(Question(
            number=number,
            label=label,
            text=text,
            options=tuple(options),
        ))
        return next_index

    def _skip(self, label: int, index: int, option_count: int):
        message = (
            f"Question {label} at line {index + 1} resolved "
            f"{option_count} options instead of {OPTION_COUNT}; skipped"
        )
        logger.warning(message)
        self.warnings.append(ParseWarning(
            type=WarningType.INCOMPLETE_QUESTION,
            message=message,
            line_number=index + 1,
        ))
