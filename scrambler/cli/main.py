"""
Scrambler CLI — Thin shell over the ConsistencyEngine.

Commands:
    scrambler translate <word>               — Translate and store
    scrambler suggest <word>                 — Propose without storing
    scrambler accept <word> <translation>    — Confirm a translation
    scrambler block <translation>            — Never offer a translation again
    scrambler known <word>                   — Exit 0 if the word is stored
    scrambler alphabet                       — Show the alphabet
    scrambler alphabet add <symbol>          — Add a glyph to the alphabet

The shell holds no state. Every command builds an engine, performs one
operation and renders the result or the error report.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from ..config import load_config
from ..domain import ErrorReport, Glyph, ScramblerError, Translation
from ..engine import ConsistencyEngine
from ..text import is_single_grapheme

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_translation(translation: Translation) -> str:
    """Format a translation with its timestamp."""
    return f"{translation.translation}  ({translation.time_added.isoformat()})"


def format_suggestion(translation: Translation, known: bool) -> str:
    status = "[known]" if known else "[proposed]"
    return f"{status} {translation.translation}"


def format_alphabet(alphabet: list[Glyph]) -> str:
    return "The current alphabet is: " + "".join(glyph.symbol for glyph in alphabet)


def report_error(error: ScramblerError) -> int:
    """Render an error at the presentation boundary."""
    report = ErrorReport.from_error(error)
    print(report.render(), file=sys.stderr)
    return 1


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging once for the process."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = os.environ.get("SCRAMBLER_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


def build_engine(args: argparse.Namespace) -> ConsistencyEngine:
    config = load_config(data_dir=args.data_dir)
    return ConsistencyEngine.from_config(config)


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_translate(args: argparse.Namespace) -> int:
    """Translate a word, storing a new translation if needed."""
    engine = build_engine(args)
    try:
        translation = engine.translate(args.word)
    except ScramblerError as e:
        return report_error(e)

    print(format_translation(translation))
    return 0


def cmd_suggest(args: argparse.Namespace) -> int:
    """Propose a translation without storing it."""
    engine = build_engine(args)
    try:
        translation = engine.suggest(args.word)
        known = engine.is_known(args.word)
    except ScramblerError as e:
        return report_error(e)

    print(format_suggestion(translation, known))
    return 0


def cmd_accept(args: argparse.Namespace) -> int:
    """Confirm a translation for a word."""
    engine = build_engine(args)
    try:
        engine.accept(args.word, Translation(args.translation))
    except ScramblerError as e:
        return report_error(e)

    print(f'Accepted "{args.translation}" for "{args.word}".')
    return 0


def cmd_block(args: argparse.Namespace) -> int:
    """Block a translation string."""
    engine = build_engine(args)
    try:
        entry = engine.block(args.translation)
    except ScramblerError as e:
        return report_error(e)

    print(f'Blocked "{entry.translation}".')
    return 0


def cmd_known(args: argparse.Namespace) -> int:
    """Exit 0 if the word has a stored translation."""
    engine = build_engine(args)
    try:
        known = engine.is_known(args.word)
    except ScramblerError as e:
        return report_error(e)

    print("known" if known else "unknown")
    return 0 if known else 1


def cmd_alphabet(args: argparse.Namespace) -> int:
    """Show the alphabet, or add a glyph to it."""
    engine = build_engine(args)

    if args.action == "add":
        if args.symbol is None:
            print("alphabet add: a symbol is required", file=sys.stderr)
            return 2
        # Only a single non-whitespace grapheme is a valid glyph
        if not args.symbol.strip() or not is_single_grapheme(args.symbol):
            print(
                f"alphabet add: {args.symbol!r} is not a single character",
                file=sys.stderr,
            )
            return 2
        try:
            engine.append_to_alphabet(args.symbol)
        except ScramblerError as e:
            return report_error(e)

    print(format_alphabet(engine.load_alphabet()))
    return 0


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="scrambler",
        description="Scrambler — stable pseudo-random word translations",
    )
    parser.add_argument(
        "--data-dir",
        help="Directory holding the data files (default: scrambler_data)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    # Translate command
    translate_parser = subparsers.add_parser(
        "translate",
        help="Translate a word and store the result",
    )
    translate_parser.add_argument("word", help="Word to translate")
    translate_parser.set_defaults(func=cmd_translate)

    # Suggest command
    suggest_parser = subparsers.add_parser(
        "suggest",
        help="Propose a translation without storing it",
    )
    suggest_parser.add_argument("word", help="Word to translate")
    suggest_parser.set_defaults(func=cmd_suggest)

    # Accept command
    accept_parser = subparsers.add_parser(
        "accept",
        help="Confirm a translation for a word",
    )
    accept_parser.add_argument("word", help="Word being translated")
    accept_parser.add_argument("translation", help="Translation to store")
    accept_parser.set_defaults(func=cmd_accept)

    # Block command
    block_parser = subparsers.add_parser(
        "block",
        help="Never offer a translation again",
    )
    block_parser.add_argument("translation", help="Translation to block")
    block_parser.set_defaults(func=cmd_block)

    # Known command
    known_parser = subparsers.add_parser(
        "known",
        help="Check whether a word has a stored translation",
    )
    known_parser.add_argument("word", help="Word to look up")
    known_parser.set_defaults(func=cmd_known)

    # Alphabet command
    alphabet_parser = subparsers.add_parser(
        "alphabet",
        help="Show the alphabet or add a glyph to it",
    )
    alphabet_parser.add_argument(
        "action",
        nargs="?",
        choices=["show", "add"],
        default="show",
    )
    alphabet_parser.add_argument("symbol", nargs="?", help="Glyph to add")
    alphabet_parser.set_defaults(func=cmd_alphabet)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.verbose, args.quiet)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
