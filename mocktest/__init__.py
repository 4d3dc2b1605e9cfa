"""
Mock Test Parser
================
Parser, validator and grader for generated multiple-choice mock tests.

Architecture:
    - Line Normalizer: Splits raw text into trimmed, non-empty lines
    - Question Extractor: Detects question headers and their 4 options
    - Answer Decoder: Decodes the base64 "Encoded Answers" section
    - Validator: Enforces coverage and builds the immutable ParsedTest
    - Grading: Scores a submitted response against the answer key

Version: 1.0.0
"""

__version__ = "1.0.0"
