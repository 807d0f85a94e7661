"""
Scrambler CLI entry point.

Usage:
    python -m scrambler.cli translate <word>
    python -m scrambler.cli alphabet add <symbol>
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
