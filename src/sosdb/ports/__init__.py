"""Ports layer - interface definitions following Hexagonal Architecture.

Outbound ports describe what the object store needs from the outside
world; adapters implement them.
"""

from sosdb.ports.outbound import TextStorage

__all__ = [
    "TextStorage",
]
