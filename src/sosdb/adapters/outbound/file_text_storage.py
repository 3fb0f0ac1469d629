"""File-based TextStorage implementation.

Reads and writes the backing file in one call each. Line endings are
written and read untranslated so the file is byte-for-byte the same on
every platform.
"""

from __future__ import annotations

from pathlib import Path

from sosdb.infrastructure.config import get_config


class FileTextStorage:
    """File-based implementation of the TextStorage protocol.

    Attributes:
        path: Location of the backing file.
        encoding: Text encoding of the file.
    """

    def __init__(
        self,
        file_path: str | Path,
        encoding: str | None = None,
        create_parent_dirs: bool | None = None,
    ) -> None:
        """Initialize the storage.

        Args:
            file_path: Path to the backing file. It need not exist yet.
            encoding: Text encoding (default from config).
            create_parent_dirs: Create a missing parent directory on write
                (default from config).
        """
        storage_config = get_config().storage
        self._path = Path(file_path)
        self._encoding = encoding or storage_config.encoding
        self._create_parent_dirs = (
            storage_config.create_parent_dirs if create_parent_dirs is None else create_parent_dirs
        )

    @property
    def path(self) -> Path:
        return self._path

    @property
    def encoding(self) -> str:
        return self._encoding

    def read_text(self) -> str:
        """Read the whole file.

        Raises:
            OSError: If the file is missing, unreadable, or not valid text
                in the configured encoding.
        """
        try:
            with open(self._path, "r", encoding=self._encoding, newline="") as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise OSError(f"{self._path} is not valid {self._encoding} text: {e}") from e

    def write_text(self, text: str) -> None:
        """Truncate the file and write text in a single call.

        Raises:
            OSError: If the file cannot be created or written, or text is not
                encodable in the configured encoding.
        """
        if self._create_parent_dirs:
            self._path.parent.mkdir(parents=True, exist_ok=True)

        try:
            data = text.encode(self._encoding)
        except UnicodeEncodeError as e:
            raise OSError(f"Text cannot be encoded as {self._encoding}: {e}") from e

        with open(self._path, "wb") as f:
            f.write(data)

    def __repr__(self) -> str:
        return f"FileTextStorage({str(self._path)!r}, encoding={self._encoding!r})"
