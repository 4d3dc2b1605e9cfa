"""
Tests for the click command-line interface.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from mocktest import crypto
from mocktest.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestParseCommand:

    def test_json_output(self, runner, mock_test_file, mock_test_text):
        path = mock_test_file(mock_test_text(2, answers={1: "D", 2: "C"}))
        result = runner.invoke(cli, ["parse", path, "--json-output"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total"] == 2
        assert data["answer_key"] == {"1": "D", "2": "C"}
        assert data["questions"][0]["options"][3] == "Option D for 1"

    def test_table_output(self, runner, mock_test_file):
        result = runner.invoke(cli, ["parse", mock_test_file()])
        assert result.exit_code == 0
        assert "Questions" in result.output

    def test_fatal_error_exits_nonzero(self, runner, mock_test_file):
        path = mock_test_file("Question 1: Q\nA) a\nB) b\nC) c\nD) d\n")
        result = runner.invoke(cli, ["parse", path, "--json-output"])

        assert result.exit_code == 1
        assert "header_not_found" in result.output


class TestGradeCommand:

    def test_grade(self, runner, mock_test_file, mock_test_text):
        path = mock_test_file(mock_test_text(2, answers={1: "A", 2: "B"}))
        result = runner.invoke(cli, ["grade", path, "--answers", "1=A,2=C"])

        assert result.exit_code == 0
        assert "Score: 1 / 2" in result.output

    def test_bad_answer_format(self, runner, mock_test_file):
        result = runner.invoke(cli, ["grade", mock_test_file(), "-a", "1A"])
        assert result.exit_code != 0


class TestUtilityCommands:

    def test_encode_answers(self, runner):
        result = runner.invoke(cli, ["encode-answers", "1=C", "10=B"])
        assert result.exit_code == 0
        assert result.output.split() == ["MS1D", "MTAtQg=="]

    def test_encrypt_decrypt(self, runner):
        key = runner.invoke(cli, ["keygen"]).output.strip()
        assert len(crypto.decode_key(key)) == crypto.KEY_SIZE

        encrypted = runner.invoke(cli, ["encrypt", "--key", key], input="hello test")
        assert encrypted.exit_code == 0

        decrypted = runner.invoke(
            cli, ["decrypt", "--key", key], input=encrypted.output
        )
        assert decrypted.exit_code == 0
        assert decrypted.output == "hello test"

    def test_decrypt_wrong_key(self, runner):
        blob = crypto.encrypt("hello", crypto.generate_key())
        other = crypto.encode_key(crypto.generate_key())
        result = runner.invoke(cli, ["decrypt", "--key", other], input=blob)
        assert result.exit_code == 1
