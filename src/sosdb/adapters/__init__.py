"""Adapters layer - concrete implementations of port interfaces."""

from sosdb.adapters.outbound import FileTextStorage

__all__ = [
    "FileTextStorage",
]
