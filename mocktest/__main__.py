"""
Module entry point for: python -m mocktest

Allows running the parser directly as a module:
    python -m mocktest parse <text_file> [options]
    python -m mocktest grade <text_file> --answers "1=A,2=C"
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
