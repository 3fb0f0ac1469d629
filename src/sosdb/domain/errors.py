"""Error taxonomy for the object store.

    SosdbError
    ├── ValueParseError        - an encoded value could not be decoded
    │   ├── ValueIsEmptyError
    │   ├── InvalidTypeError
    │   └── InvalidValueError
    └── DatabaseError          - load/save of a backing file failed
        ├── DatabaseIOError
        ├── DatabaseValueError
        └── InvalidNameError
"""

from __future__ import annotations

from pathlib import Path


class SosdbError(Exception):
    """Base class for all object store errors."""


class ValueParseError(SosdbError):
    """An encoded value could not be decoded."""


class ValueIsEmptyError(ValueParseError):
    """Decode was attempted on an empty string."""

    def __init__(self) -> None:
        super().__init__("Encoded value is empty")


class InvalidTypeError(ValueParseError):
    """The type tag is not one of the known tags."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"Unknown value type tag: {tag!r}")


class InvalidValueError(ValueParseError):
    """The payload (or the tag separator) is malformed for its declared kind."""

    def __init__(self, tag: str, payload: str, reason: str) -> None:
        self.tag = tag
        self.payload = payload
        super().__init__(f"Invalid {tag!r} value {payload!r}: {reason}")


class DatabaseError(SosdbError):
    """A database load or save failed."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class DatabaseIOError(DatabaseError):
    """The backing file could not be read or written.

    The underlying ``OSError`` is available as ``__cause__``.
    """


class DatabaseValueError(DatabaseError):
    """A field value in the backing file failed to decode.

    The underlying :class:`ValueParseError` is available as ``__cause__``.
    """

    def __init__(self, message: str, line_number: int, path: Path | None = None) -> None:
        self.line_number = line_number
        super().__init__(message, path)


class InvalidNameError(DatabaseError):
    """An object or field name cannot be represented in the text format."""
