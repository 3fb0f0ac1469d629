"""Application layer for the object store.

Exports:
    - Database: Object collection bound to a backing file (load / save)
"""

from sosdb.application.database import Database

__all__ = [
    "Database",
]
