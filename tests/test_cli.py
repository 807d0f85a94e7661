"""
Tests for the Scrambler CLI shell.

These tests verify:
1. Commands reach the engine and print its results
2. Errors are rendered as reports with a non-zero exit code
3. The shell keeps no state between invocations
"""

import pytest

from scrambler.cli.main import (
    create_parser,
    format_alphabet,
    format_suggestion,
    main,
)
from scrambler.domain import Glyph, Translation


@pytest.fixture
def run(tmp_path, monkeypatch):
    """Run the CLI against a temporary data directory."""
    monkeypatch.chdir(tmp_path)
    data_dir = str(tmp_path / "data")

    def _run(*argv):
        return main(["--data-dir", data_dir, *argv])

    return _run


@pytest.fixture
def run_with_alphabet(run):
    for symbol in "abc":
        assert run("alphabet", "add", symbol) == 0
    return run


# =============================================================================
# FORMATTING TESTS
# =============================================================================

class TestFormatting:
    """Test output helpers."""

    def test_format_alphabet(self):
        text = format_alphabet([Glyph("a"), Glyph("b")])
        assert text == "The current alphabet is: ab"

    def test_format_suggestion(self):
        assert format_suggestion(Translation("abc"), known=True) == "[known] abc"
        assert format_suggestion(Translation("abc"), known=False) == "[proposed] abc"


# =============================================================================
# COMMAND TESTS
# =============================================================================

class TestCommands:
    """Test CLI commands end to end."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_parser_has_commands(self):
        parser = create_parser()
        args = parser.parse_args(["translate", "hello"])
        assert args.command == "translate"
        assert args.word == "hello"

    def test_alphabet_add_and_show(self, run, capsys):
        assert run("alphabet", "add", "b") == 0
        assert run("alphabet", "add", "a") == 0
        capsys.readouterr()

        assert run("alphabet") == 0
        assert "The current alphabet is: ab" in capsys.readouterr().out

    def test_alphabet_add_rejects_multiple_characters(self, run, capsys):
        assert run("alphabet", "add", "ab") == 2
        assert "not a single character" in capsys.readouterr().err

    def test_alphabet_add_requires_symbol(self, run):
        assert run("alphabet", "add") == 2

    def test_translate_is_stable(self, run_with_alphabet, capsys):
        capsys.readouterr()
        assert run_with_alphabet("translate", "hello") == 0
        first = capsys.readouterr().out.split()[0]
        assert run_with_alphabet("translate", "hello") == 0
        second = capsys.readouterr().out.split()[0]

        assert first == second
        assert set(first) <= {"a", "b", "c"}

    def test_translate_multi_word_fails(self, run_with_alphabet, capsys):
        assert run_with_alphabet("translate", "hello world") == 1
        assert "Error!" in capsys.readouterr().err

    def test_translate_without_alphabet_fails(self, run, capsys):
        assert run("translate", "hello") == 1
        assert "alphabet is empty" in capsys.readouterr().err

    def test_suggest_then_accept(self, run_with_alphabet, capsys):
        capsys.readouterr()
        assert run_with_alphabet("suggest", "hello") == 0
        line = capsys.readouterr().out.strip()
        assert line.startswith("[proposed] ")
        proposal = line.split()[1]

        assert run_with_alphabet("known", "hello") == 1
        assert run_with_alphabet("accept", "hello", proposal) == 0
        assert run_with_alphabet("known", "hello") == 0

        capsys.readouterr()
        run_with_alphabet("suggest", "hello")
        assert capsys.readouterr().out.strip() == f"[known] {proposal}"

    def test_block(self, run_with_alphabet, capsys):
        assert run_with_alphabet("block", "abc") == 0
        assert 'Blocked "abc"' in capsys.readouterr().out

    def test_accept_conflict_fails(self, run_with_alphabet, capsys):
        assert run_with_alphabet("accept", "one", "abc") == 0
        assert run_with_alphabet("accept", "two", "abc") == 1
        assert "already assigned" in capsys.readouterr().err
