# CLI package for Scrambler
"""
Command-line shell for Scrambler.

Commands:
    scrambler translate  — Translate a word
    scrambler suggest    — Propose a translation
    scrambler accept     — Confirm a translation
    scrambler block      — Block a translation
    scrambler known      — Check whether a word is stored
    scrambler alphabet   — Show or extend the alphabet
"""
