from __future__ import annotations

import pytest

from mocktest.answer_decoder import encode_answer

LETTERS = "ABCD"


def build_mock_test(count: int = 10, answers: dict[int, str] | None = None) -> str:
    """Render generator-style output with ``count`` block-layout questions."""
    if answers is None:
        answers = {n: LETTERS[(n - 1) % 4] for n in range(1, count + 1)}

    lines = ["# Python Mock Test", "", "**Instructions:** Choose the best answer.", "---"]
    for n in range(1, count + 1):
        lines.append(f"**Question {n}:** What does item {n} do?")
        for letter in LETTERS:
            lines.append(f"{letter}) Option {letter} for {n}")
        lines.append("")

    lines.append("---")
    lines.append("## Encoded Answers:")
    for n, letter in answers.items():
        lines.append(encode_answer(n, letter))
    return "\n".join(lines)


@pytest.fixture
def mock_test_text():
    return build_mock_test


@pytest.fixture
def mock_test_file(tmp_path):
    def _write(text: str | None = None, name: str = "mock_test.txt") -> str:
        path = tmp_path / name
        path.write_text(text if text is not None else build_mock_test(), encoding="utf-8")
        return str(path)

    return _write
