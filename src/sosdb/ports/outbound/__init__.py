"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for external systems that the
object store depends on, such as the backing file.
"""

from sosdb.ports.outbound.text_storage import TextStorage

__all__ = [
    "TextStorage",
]
