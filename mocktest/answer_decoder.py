"""
Answer-Key Decoder
==================
Locates the "Encoded Answers:" section, base64-decodes each token and
normalizes the decoded text into (question number, letter) pairs.

Token problems never abort the parse; they become warnings. The only fatal
condition raised here is a header with nothing after it.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Callable, Optional

from pydantic import BaseModel, Field

from .errors import FatalReason, ParseError
from .lines import ANSWER_HEADER_PATTERN
from .models import OPTION_LETTERS, ParseWarning, WarningType

logger = logging.getLogger(__name__)

TOKEN_SPLIT_PATTERN = re.compile(r"[\s,]+")
NON_BASE64_PATTERN = re.compile(r"[^A-Za-z0-9+/]")
NON_ALNUM_PATTERN = re.compile(r"[^0-9A-Za-z]")

# "10-B", "9)B", "10:C", "3.a", "4 D"
SEPARATED_ANSWER_PATTERN = re.compile(
    r"(\d+)\s*[-.:)\s]\s*([A-D])", re.IGNORECASE | re.ASCII
)

# "10C"
ADJACENT_ANSWER_PATTERN = re.compile(r"(\d+)([A-D])", re.IGNORECASE | re.ASCII)


# ─── Token Codec ──────────────────────────────────────────────────────────────


def clean_token(token: str) -> str:
    """Drop non-base64 characters and restore '=' padding."""
    clean = NON_BASE64_PATTERN.sub("", token)
    while len(clean) % 4:
        clean += "="
    return clean


def decode_token(token: str) -> str:
    """
    Decode a single answer token to text.

    Raises:
        ValueError: If the cleaned token is not valid base64 or the
            decoded bytes are not UTF-8.
    """
    clean = clean_token(token)
    try:
        raw = base64.b64decode(clean, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError(f"cannot decode token {token!r}: {e}") from e


def encode_answer(number: int, letter: str) -> str:
    """Encode an answer the way the generator is asked to: base64("N-L")."""
    letter = letter.upper()
    if number < 1 or letter not in OPTION_LETTERS:
        raise ValueError(f"invalid answer: {number}-{letter}")
    return base64.b64encode(f"{number}-{letter}".encode("utf-8")).decode("ascii")


# ─── Normalization Rules ──────────────────────────────────────────────────────

AnswerPair = tuple[int, str]


def _separated_rule(decoded: str) -> Optional[AnswerPair]:
    match = SEPARATED_ANSWER_PATTERN.fullmatch(decoded)
    if match:
        return int(match.group(1)), match.group(2).upper()
    return None


def _adjacent_rule(decoded: str) -> Optional[AnswerPair]:
    match = ADJACENT_ANSWER_PATTERN.fullmatch(decoded)
    if match:
        return int(match.group(1)), match.group(2).upper()
    return None


def _segments_rule(decoded: str) -> Optional[AnswerPair]:
    parts = [p for p in NON_ALNUM_PATTERN.sub("-", decoded).split("-") if p]
    if len(parts) < 2 or not parts[0].isdigit():
        return None
    return int(parts[0]), parts[-1][0].upper()


# Applied in order; the first rule that yields a pair wins.
ANSWER_RULES: list[tuple[str, Callable[[str], Optional[AnswerPair]]]] = [
    ("separated", _separated_rule),
    ("adjacent", _adjacent_rule),
    ("segments", _segments_rule),
]


def normalize_answer(decoded: str) -> Optional[AnswerPair]:
    """
    Turn decoded token text into a (number, letter) pair.

    Returns None when no rule produces a positive number and a letter A-D.
    """
    decoded = decoded.strip()
    for name, rule in ANSWER_RULES:
        pair = rule(decoded)
        if pair is None:
            continue
        number, letter = pair
        if number >= 1 and letter in OPTION_LETTERS:
            logger.debug(f"Decoded {decoded!r} as {number}-{letter} ({name})")
            return pair
        return None
    return None


# ─── Decoder ──────────────────────────────────────────────────────────────────


class DecodedAnswers(BaseModel):
    """Candidate answer map produced before validation."""
    header_found: bool = False
    header_line: Optional[int] = None
    answers: dict[int, str] = Field(default_factory=dict)
    warnings: list[ParseWarning] = Field(default_factory=list)


class AnswerKeyDecoder:
    """Decodes the first "Encoded Answers:" section in normalized lines."""

    def decode(self, lines: list[str]) -> DecodedAnswers:
        """
        Scan for the answer header and decode every token after it.

        Raises:
            ParseError: If the header is present but no tokens follow it.
        """
        result = DecodedAnswers()

        for index, line in enumerate(lines):
            match = ANSWER_HEADER_PATTERN.match(line)
            if not match:
                continue

            result.header_found = True
            result.header_line = index + 1
            logger.info(f"Encoded Answers header at line {index + 1}")

            stream = " ".join(
                part for part in [match.group(1).strip(), *lines[index + 1:]]
                if part
            ).strip()
            if not stream:
                raise ParseError(
                    FatalReason.EMPTY_ANSWER_SECTION,
                    "Encoded Answers header found but no tokens provided.",
                )

            for token in TOKEN_SPLIT_PATTERN.split(stream):
                if token:
                    self._decode_one(token, result)
            break

        return result

    def _decode_one(self, token: str, result: DecodedAnswers):
        try:
            decoded = decode_token(token)
        except ValueError as e:
            self._warn(result, WarningType.UNDECODABLE_TOKEN, str(e), token)
            return

        pair = normalize_answer(decoded)
        if pair is None:
            self._warn(
                result,
                WarningType.UNRECOGNIZED_ANSWER,
                f"Ignored invalid decoded answer: {decoded!r}",
                token,
            )
            return

        number, letter = pair
        if number in result.answers:
            self._warn(
                result,
                WarningType.DUPLICATE_ANSWER,
                f"Duplicate encoded answer for question {number} ignored",
                token,
                question_number=number,
            )
            return

        result.answers[number] = letter

    def _warn(
        self,
        result: DecodedAnswers,
        kind: WarningType,
        message: str,
        token: str,
        question_number: Optional[int] = None,
    ):
        logger.warning(message)
        result.warnings.append(ParseWarning(
            type=kind,
            message=message,
            token=token,
            question_number=question_number,
        ))
