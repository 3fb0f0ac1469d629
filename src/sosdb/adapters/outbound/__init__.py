"""Outbound adapters - implementations of outbound ports."""

from sosdb.adapters.outbound.file_text_storage import FileTextStorage

__all__ = [
    "FileTextStorage",
]
