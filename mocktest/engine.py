"""
Mock Test Parser Engine
=======================
Main orchestrator that combines line normalization, question extraction,
answer decoding and validation into one atomic parse.

Usage:
    engine = ParserEngine(config)
    parsed = engine.parse(text)
    # parsed is a ParsedTest, or ParseError was raised

Architecture:
    text → normalize_lines → QuestionExtractor → questions
                           → AnswerKeyDecoder  → candidate answers
         → ValidationEngine → ParsedTest
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .answer_decoder import AnswerKeyDecoder
from .errors import ParseError
from .grading import ExamSession
from .lines import normalize_lines
from .models import ParsedTest
from .question_extractor import QuestionExtractor
from .validator import ValidationEngine

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class ParserConfig:
    """Configuration for the parser engine."""

    # Parsing
    strict_questions: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None


class ParserEngine:
    """
    Parses generated mock-test text into a ParsedTest.

    Each call is independent: nothing from a previous parse is reused.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        package_logger = logging.getLogger("mocktest")
        package_logger.setLevel(log_level)

        file_handlers = [
            h for h in package_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        console_handlers = [
            h for h in package_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]

        # Console handler
        if console_handlers:
            for console in console_handlers:
                console.setLevel(log_level)
        else:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(
                logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
            )
            package_logger.addHandler(console)

        # File handler, one per target file
        if self.config.log_file:
            target = os.path.abspath(self.config.log_file)
            existing = [h for h in file_handlers if h.baseFilename == target]
            if existing:
                for handler in existing:
                    handler.setLevel(log_level)
                return

            log_dir = Path(self.config.log_file).parent
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(
                self.config.log_file, encoding="utf-8"
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(
                logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
            )
            package_logger.addHandler(file_handler)

    def parse(self, text: str) -> ParsedTest:
        """
        Parse generator output into a validated test.

        Args:
            text: Raw text containing question blocks and an
                "Encoded Answers:" section.

        Returns:
            ParsedTest with questions 1..K and a covering answer key.

        Raises:
            ParseError: On any fatal condition. No partial result exists.
        """
        lines = normalize_lines(text)
        logger.info(f"Parsing {len(lines)} non-empty lines")

        try:
            # ── Phase 1: Questions ────────────────────────────────────
            extractor = QuestionExtractor()
            questions = extractor.extract(lines)
            logger.info(f"Extracted {len(questions)} questions")

            # ── Phase 2: Answer key ───────────────────────────────────
            decoded = AnswerKeyDecoder().decode(lines)
            logger.info(f"Decoded {len(decoded.answers)} answers")

            # ── Phase 3: Validation ───────────────────────────────────
            validator = ValidationEngine(
                strict_questions=self.config.strict_questions
            )
            return validator.validate(
                questions,
                decoded,
                extractor.warnings + decoded.warnings,
            )
        except ParseError as e:
            logger.error(f"Parse failed ({e.reason.value}): {e}")
            raise

    def parse_file(self, path: str) -> ParsedTest:
        """Read a UTF-8 text file and parse it."""
        text = Path(path).read_text(encoding="utf-8")
        return self.parse(text)


# ─── Parse Lifecycle ──────────────────────────────────────────────────────────


class ParseState(str, Enum):
    """Lifecycle of the currently loaded test."""
    IDLE = "idle"
    PARSED = "parsed"
    ERROR = "error"


class ParseSession:
    """
    Holds the current ParsedTest and its test-taking session.

    Every ``parse()`` call replaces the parsed test, the response and any
    submission state together, whether the parse succeeds or fails.
    """

    def __init__(self, engine: Optional[ParserEngine] = None):
        self.engine = engine or ParserEngine()
        self.state = ParseState.IDLE
        self.parsed_test: Optional[ParsedTest] = None
        self.exam_session: Optional[ExamSession] = None
        self.error: Optional[str] = None

    def parse(self, text: str) -> ParseState:
        self.parsed_test = None
        self.exam_session = None
        self.error = None

        try:
            parsed = self.engine.parse(text)
        except ParseError as e:
            self.state = ParseState.ERROR
            self.error = str(e)
            return self.state

        self.parsed_test = parsed
        self.exam_session = ExamSession(parsed)
        self.state = ParseState.PARSED
        return self.state
