# Storage package for Scrambler
"""
Durable JSON records with backup-and-fallback recovery.
"""

from .store import PersistentStore, Record

__all__ = ["PersistentStore", "Record"]
