# Generation package for Scrambler
"""
Random candidate translations with local validity checks.
"""

from .generator import CandidateGenerator, length_bounds

__all__ = ["CandidateGenerator", "length_bounds"]
