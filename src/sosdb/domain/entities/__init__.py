"""Domain entities for the object store.

Exports:
    - Object: Named, mutable mapping from field name to Value
    - OBJECT_LABEL, KEY_SEPARATOR, FIELD_INDENT, BLOCK_END: Block grammar tokens
"""

from sosdb.domain.entities.object import (
    BLOCK_END,
    FIELD_INDENT,
    KEY_SEPARATOR,
    OBJECT_LABEL,
    Object,
)

__all__ = [
    "Object",
    "OBJECT_LABEL",
    "KEY_SEPARATOR",
    "FIELD_INDENT",
    "BLOCK_END",
]
