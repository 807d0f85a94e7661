# Scrambler
# Translation Consistency & Generation Engine

"""
Core invariant: every word maps to exactly one translation, and no
translation is ever shared by two words or equal to a blocked one.

Usage:
    from scrambler.engine import ConsistencyEngine

    engine = ConsistencyEngine.from_config()
    engine.append_to_alphabet("a")
    engine.translate("hello")
"""

__version__ = "0.1.0"
