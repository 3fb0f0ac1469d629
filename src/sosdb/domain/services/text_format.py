"""Database text format: writer and reader.

File layout (UTF-8, ``\\n`` line endings):

    sosdb                      <- header line, ignored on read
    object=player              <- starts a block
      hp=i:100                 <- field: two-space indent, name, '=', encoded value
      alive=b:true
    end                        <- closes the block
                               <- blank separator line
    object=...

Reader rules:
    - The first line is discarded whatever it contains.
    - Outside a block, only ``object=<name>`` lines mean anything; every
      other line is skipped.
    - Inside a block, ``end`` closes it. Other lines lose their indent and
      split at the first ``=``; lines without ``=`` are skipped.
    - A block still open at end of input is kept as if it had been closed.

The reader never touches a database; it returns the parsed objects and the
caller decides when to commit them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from sosdb.domain.entities import BLOCK_END, FIELD_INDENT, KEY_SEPARATOR, OBJECT_LABEL, Object
from sosdb.domain.errors import DatabaseValueError, InvalidNameError, ValueParseError
from sosdb.domain.value_objects import Value

DEFAULT_HEADER = "sosdb"


@dataclass
class ParseResult:
    """Outcome of parsing one database text."""

    header: str
    objects: list[Object] = field(default_factory=list)
    skipped_lines: list[int] = field(default_factory=list)  # 1-based, blank lines excluded
    unterminated: str | None = None  # name of a block left open at end of input


def render_database(objects: Iterable[Object], header: str = DEFAULT_HEADER) -> str:
    """Render objects to the database text format.

    Raises:
        InvalidNameError: If the header or any object/field name cannot be
            represented on a single line.
    """
    if "\n" in header or "\r" in header:
        raise InvalidNameError(f"Header {header!r} contains a line break")

    parts = [header, "\n"]
    for obj in objects:
        parts.append(obj.to_text())
        parts.append("\n")
    return "".join(parts)


def _split_lines(text: str) -> list[str]:
    # Only LF (optionally preceded by CR) ends a line; str.splitlines() would
    # also break on form feeds and Unicode separators inside values.
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def _object_name(line: str) -> str | None:
    label, separator, name = line.partition(KEY_SEPARATOR)
    if separator and label == OBJECT_LABEL:
        return name
    return None


def parse_database(text: str, source: Path | None = None) -> ParseResult:
    """Parse database text into objects.

    Args:
        text: Whole file contents.
        source: Path the text was read from, attached to errors.

    Returns:
        The parsed objects in file order, plus bookkeeping about skipped
        lines and an unterminated trailing block.

    Raises:
        DatabaseValueError: If a field value fails to decode. Nothing parsed
            so far is returned.
    """
    lines = _split_lines(text)
    result = ParseResult(header=lines[0])

    numbered = enumerate(lines[1:], start=2)
    for line_number, line in numbered:
        name = _object_name(line)
        if name is None:
            if line:
                result.skipped_lines.append(line_number)
            continue

        obj = Object(name)
        terminated = False
        for line_number, line in numbered:
            if line == BLOCK_END:
                terminated = True
                break
            if line.startswith(FIELD_INDENT):
                line = line[len(FIELD_INDENT):]

            field_name, separator, encoded = line.partition(KEY_SEPARATOR)
            if not separator:
                if line:
                    result.skipped_lines.append(line_number)
                continue

            try:
                value = Value.parse(encoded)
            except ValueParseError as e:
                raise DatabaseValueError(
                    f"Line {line_number}: field {field_name!r} of object {name!r}: {e}",
                    line_number=line_number,
                    path=source,
                ) from e
            obj.add(field_name, value)

        if not terminated:
            result.unterminated = name
        result.objects.append(obj)

    return result
