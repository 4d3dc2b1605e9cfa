"""
Line Normalizer
===============
Splits raw generator output into trimmed, non-empty lines and classifies
each line against the structural anchors of a mock test.
"""

from __future__ import annotations

import re
from enum import Enum

# ─── Anchor Patterns ──────────────────────────────────────────────────────────

LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")

# Matches "Question 1:", "**Question 1:**", "question 12 ..." at start of line
QUESTION_HEADER_PATTERN = re.compile(
    r"^(?:\*\*)?Question\s*(\d+)\s*:?\**\s*(.*)$", re.IGNORECASE
)

# Matches "## Encoded Answers:", "Encoded Answers: MS1D ..."
ANSWER_HEADER_PATTERN = re.compile(
    r"^(?:##\s*)?Encoded Answers:\s*(.*)$", re.IGNORECASE
)

# Matches an option line "A) text", "b. text"
OPTION_LINE_PATTERN = re.compile(r"^([A-D])[.)]\s*(.*)$", re.IGNORECASE)

# Option label somewhere inside a header line: "... A) x B) y"
INLINE_OPTION_PATTERN = re.compile(r"\b[A-D][.)]\s")


class LineKind(Enum):
    """Structural role of a normalized line."""
    QUESTION_HEADER = "question_header"
    ANSWER_HEADER = "answer_header"
    OPTION = "option"
    OTHER = "other"


def normalize_lines(text: str) -> list[str]:
    """Split text on any line ending, trim, and drop blank lines."""
    return [
        line.strip()
        for line in LINE_BREAK_PATTERN.split(text)
        if line.strip()
    ]


def classify_line(line: str) -> LineKind:
    if QUESTION_HEADER_PATTERN.match(line):
        return LineKind.QUESTION_HEADER
    if ANSWER_HEADER_PATTERN.match(line):
        return LineKind.ANSWER_HEADER
    if OPTION_LINE_PATTERN.match(line):
        return LineKind.OPTION
    return LineKind.OTHER
