"""Domain services for the object store.

Exports:
    - render_database: Objects to database text
    - parse_database: Database text to objects (ParseResult)
"""

from sosdb.domain.services.text_format import (
    DEFAULT_HEADER,
    ParseResult,
    parse_database,
    render_database,
)

__all__ = [
    "DEFAULT_HEADER",
    "ParseResult",
    "parse_database",
    "render_database",
]
