"""Text storage port for whole-file persistence.

The database never streams: a load reads the backing file into one string
and a save replaces the file with one string. This outbound port captures
exactly that contract so the application layer has no file handling of
its own.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Protocol


class TextStorage(Protocol):
    """Protocol for reading and writing a whole text document.

    Thread Safety:
        None. Callers are assumed to be the only reader and writer of the
        location.
    """

    @property
    @abstractmethod
    def path(self) -> Path:
        """Location of the document."""
        ...

    @abstractmethod
    def read_text(self) -> str:
        """Read the whole document.

        Returns:
            The document contents.

        Raises:
            OSError: If the document cannot be read or decoded.
        """
        ...

    @abstractmethod
    def write_text(self, text: str) -> None:
        """Replace the whole document with text.

        Not crash-atomic: an interrupted write may leave a truncated
        document behind.

        Raises:
            OSError: If the document cannot be written.
        """
        ...
