"""
Data Models
===========
Pydantic models for parsed mock tests and grading results.
All models are serializable to JSON via ``model_dump()``.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Literal, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_serializer,
    field_validator,
    model_validator,
)

Letter = Literal["A", "B", "C", "D"]

OPTION_LETTERS: tuple[str, ...] = ("A", "B", "C", "D")


# ─── Enums ────────────────────────────────────────────────────────────────────


class WarningType(str, Enum):
    """Non-fatal issues recorded while parsing."""
    UNDECODABLE_TOKEN = "undecodable_token"
    UNRECOGNIZED_ANSWER = "unrecognized_answer"
    DUPLICATE_ANSWER = "duplicate_answer"
    INCOMPLETE_QUESTION = "incomplete_question"


# ─── Warning Model ────────────────────────────────────────────────────────────


class ParseWarning(BaseModel):
    """A tolerated problem that did not abort the parse."""
    model_config = ConfigDict(frozen=True)

    type: WarningType
    message: str
    line_number: Optional[int] = Field(
        default=None,
        description="1-based index into the normalized lines"
    )
    token: Optional[str] = None
    question_number: Optional[int] = None


# ─── Question Model ──────────────────────────────────────────────────────────


class Question(BaseModel):
    """
    A single accepted multiple-choice question.

    ``number`` is the acceptance-order index (1..K) that the answer key is
    matched against. ``label`` is the integer written in the source header
    and is informational only.
    """
    model_config = ConfigDict(frozen=True)

    number: int = Field(ge=1)
    text: str
    options: tuple[str, str, str, str]
    label: Optional[int] = None

    def option_for(self, letter: str) -> str:
        """Return the option text for a letter A-D."""
        return self.options[OPTION_LETTERS.index(letter.upper())]


# ─── Parsed Test ──────────────────────────────────────────────────────────────


class ParsedTest(BaseModel):
    """
    The atomic result of a successful parse.

    Only the validator builds these; the model validator re-checks the
    numbering and coverage invariants so an invalid instance cannot exist.
    """
    model_config = ConfigDict(frozen=True)

    questions: tuple[Question, ...]
    answer_key: Mapping[int, Letter]
    warnings: tuple[ParseWarning, ...] = ()

    @field_validator("answer_key", mode="after")
    @classmethod
    def _freeze_answer_key(cls, value: Mapping[int, str]) -> Mapping[int, str]:
        return MappingProxyType(dict(value))

    @field_serializer("answer_key")
    def _dump_answer_key(self, value: Mapping[int, str]) -> dict[int, str]:
        return dict(value)

    @model_validator(mode="after")
    def _check_coverage(self) -> "ParsedTest":
        expected = list(range(1, len(self.questions) + 1))
        if not expected:
            raise ValueError("a parsed test needs at least one question")
        if [q.number for q in self.questions] != expected:
            raise ValueError("questions must be numbered 1..K in order")
        if sorted(self.answer_key) != expected:
            raise ValueError("answer key must cover exactly 1..K")
        return self

    @computed_field
    @property
    def total(self) -> int:
        return len(self.questions)

    def question(self, number: int) -> Question:
        return self.questions[number - 1]


# ─── Grading Models ───────────────────────────────────────────────────────────


class ScoreResult(BaseModel):
    """Derived score of a submitted response."""
    model_config = ConfigDict(frozen=True)

    correct_count: int = Field(ge=0)
    total: int = Field(ge=0)

    @computed_field
    @property
    def percentage(self) -> float:
        """Fraction of correct answers in 0.0..1.0."""
        if self.total == 0:
            return 0.0
        return self.correct_count / self.total


class QuestionReview(BaseModel):
    """One row of the post-submission review."""
    number: int
    text: str
    given: Optional[Letter] = None
    given_text: Optional[str] = None
    correct: Letter
    correct_text: str

    @computed_field
    @property
    def is_correct(self) -> bool:
        return self.given == self.correct
