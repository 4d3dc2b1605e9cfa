"""
CLI Interface
=============
Command-line interface for the mock test parser.

Usage:
    python -m mocktest parse <text_file> [options]
    python -m mocktest grade <text_file> --answers "1=A,2=C"
    python -m mocktest encode-answers 1=C 10=B
    python -m mocktest keygen
    python -m mocktest encrypt [file] --key <key>
    python -m mocktest decrypt [file] --key <key>
"""

from __future__ import annotations

import json
import os
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from . import crypto
from .answer_decoder import encode_answer
from .engine import ParserConfig, ParserEngine
from .errors import DecryptionError, GradingError, ParseError
from .grading import ExamSession

console = Console()

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _parse_pairs(values) -> dict[int, str]:
    """Parse "1=A" style pairs (comma or space separated)."""
    pairs: dict[int, str] = {}
    for value in values:
        for item in value.replace(",", " ").split():
            number, sep, letter = item.partition("=")
            if not sep or not number.strip().isdigit() or not letter.strip():
                raise click.BadParameter(
                    f"expected N=LETTER, got {item!r}"
                )
            pairs[int(number)] = letter.strip().upper()
    return pairs


@click.group()
@click.version_option(version=__version__, prog_name="mocktest")
def cli():
    """Mock Test Parser: validate and grade generated multiple-choice tests."""
    pass


@cli.command()
@click.argument("text_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat question blocks without 4 options as fatal",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(LOG_LEVELS),
    help="Logging level",
)
@click.option(
    "--log-file",
    default=None,
    help="Path to log file",
)
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output only JSON result to stdout (for programmatic use)",
)
def parse(
    text_path: str,
    strict: bool,
    log_level: str,
    log_file: str,
    json_output: bool,
):
    """Parse a generated mock test and its encoded answer key."""

    if json_output:
        # Suppress console output for JSON mode
        log_level = "ERROR"

    config = ParserConfig(
        strict_questions=strict,
        log_level=log_level,
        log_file=log_file,
    )

    try:
        parsed = ParserEngine(config).parse_file(text_path)
    except ParseError as e:
        if json_output:
            click.echo(json.dumps({"error": str(e), "reason": e.reason.value}))
        else:
            console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(parsed.model_dump(mode="json"), indent=2, ensure_ascii=False))
        return

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Mock Test Parser v{__version__}[/]\n"
            f"[dim]Parsed: {os.path.basename(text_path)}[/]",
            border_style="cyan",
        )
    )
    _display_questions(parsed)
    _display_warnings(parsed.warnings)


@cli.command()
@click.argument("text_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--answers", "-a",
    multiple=True,
    required=True,
    help='Selected answers, e.g. "1=A,2=C"',
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(LOG_LEVELS),
    help="Logging level",
)
def grade(text_path: str, answers: tuple[str, ...], log_level: str):
    """Parse a mock test, submit the given answers and show the score."""

    selections = _parse_pairs(answers)

    try:
        parsed = ParserEngine(ParserConfig(log_level=log_level)).parse_file(
            text_path
        )
        session = ExamSession(parsed)
        for number, letter in sorted(selections.items()):
            session.select(number, letter)
        result = session.submit()
    except (ParseError, GradingError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    console.print()
    console.print(
        Panel.fit(
            f"[bold yellow]Score: {result.correct_count} / {result.total}[/]\n"
            f"[dim]{result.percentage:.0%}[/]",
            border_style="yellow",
        )
    )

    table = Table(title="Review", border_style="cyan")
    table.add_column("#", justify="right")
    table.add_column("Question")
    table.add_column("Your Answer")
    table.add_column("Correct Answer")
    table.add_column("", justify="center")

    for row in session.review():
        given = f"{row.given}. {escape(row.given_text)}" if row.given else "—"
        table.add_row(
            str(row.number),
            escape(row.text),
            given,
            f"{row.correct}. {escape(row.correct_text)}",
            "[green]✓[/]" if row.is_correct else "[red]✗[/]",
        )

    console.print(table)
    console.print()


@cli.command("encode-answers")
@click.argument("pairs", nargs=-1, required=True)
def encode_answers(pairs: tuple[str, ...]):
    """Print one encoded answer token per line for N=LETTER pairs."""
    for number, letter in _parse_pairs(pairs).items():
        try:
            click.echo(encode_answer(number, letter))
        except ValueError as e:
            raise click.BadParameter(str(e))


@cli.command()
def keygen():
    """Generate a 256-bit key for encrypt/decrypt."""
    click.echo(crypto.encode_key(crypto.generate_key()))


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--key", "-k", envvar="MOCKTEST_KEY", required=True, help="Key from keygen")
def encrypt(source, key: str):
    """Encrypt text from a file or stdin."""
    try:
        click.echo(crypto.encrypt(source.read(), crypto.decode_key(key)))
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--key", "-k", envvar="MOCKTEST_KEY", required=True, help="Key from keygen")
def decrypt(source, key: str):
    """Decrypt a blob from a file or stdin."""
    try:
        click.echo(crypto.decrypt(source.read().strip(), crypto.decode_key(key)), nl=False)
    except (DecryptionError, ValueError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _display_questions(parsed):
    """Display questions with their keyed answers."""
    console.print()

    table = Table(title="Questions", border_style="cyan")
    table.add_column("#", justify="right", style="bold")
    table.add_column("Question")
    table.add_column("Options")
    table.add_column("Answer", justify="center")

    for q in parsed.questions:
        options = "\n".join(
            f"{letter}) {escape(text)}" for letter, text in zip("ABCD", q.options)
        )
        table.add_row(
            str(q.number),
            escape(q.text),
            options,
            f"[green]{parsed.answer_key[q.number]}[/]",
        )

    console.print(table)
    console.print()


def _display_warnings(warnings):
    """Display non-fatal parse warnings."""
    if not warnings:
        console.print("[green]✓[/] No warnings")
        console.print()
        return

    table = Table(title="Warnings", border_style="yellow")
    table.add_column("Type", style="bold")
    table.add_column("Message")

    for warning in warnings:
        table.add_row(warning.type.value, escape(warning.message))

    console.print(table)
    console.print()


# ─── Entry point (for python -m mocktest.cli) ─────────────────────────────────


if __name__ == "__main__":
    cli()
