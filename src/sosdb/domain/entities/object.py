"""Object entity: a named bag of typed fields.

An object's text form is a block of lines:

    object=<name>
      <field>=<tag>:<payload>
      ...
    end

Fields are written in insertion order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping

from sosdb.domain.errors import InvalidNameError
from sosdb.domain.value_objects import Value

OBJECT_LABEL = "object"
KEY_SEPARATOR = "="
FIELD_INDENT = "  "
BLOCK_END = "end"

_LINE_BREAKS = ("\n", "\r")


@dataclass
class Object:
    """A named, mutable mapping from field name to :class:`Value`.

    The name is the object's identity inside a database. Two objects are
    equal when they share a name and hold equal fields, regardless of
    field order.

    Example:
        >>> player = Object("player").with_value("hp", IntegerValue(100))
        >>> player.get("hp")
        IntegerValue(value=100)
        >>> print(player)
        object=player
          hp=i:100
        end
    """

    name: str
    _fields: dict[str, Value] = field(default_factory=dict, repr=False)

    @property
    def fields(self) -> Mapping[str, Value]:
        """Read-only view of the fields."""
        return MappingProxyType(self._fields)

    def add(self, name: str, value: Value) -> None:
        """Insert a field, overwriting any previous value."""
        self._fields[name] = value

    def get(self, name: str) -> Value | None:
        return self._fields.get(name)

    def delete(self, name: str) -> Value | None:
        """Remove a field and return its previous value, if it had one."""
        return self._fields.pop(name, None)

    def with_value(self, name: str, value: Value) -> Object:
        """Builder form of :meth:`add`; returns ``self`` for chaining."""
        self.add(name, value)
        return self

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def validate_names(self) -> None:
        """Check that the object and field names fit the line grammar.

        Raises:
            InvalidNameError: If the object name contains a line break, or a
                field name contains a line break or ``=``.
        """
        if any(brk in self.name for brk in _LINE_BREAKS):
            raise InvalidNameError(f"Object name {self.name!r} contains a line break")
        for name in self._fields:
            if KEY_SEPARATOR in name or any(brk in name for brk in _LINE_BREAKS):
                raise InvalidNameError(
                    f"Field name {name!r} of object {self.name!r} contains "
                    f"{KEY_SEPARATOR!r} or a line break"
                )

    def to_lines(self) -> list[str]:
        """Render the object block, one entry per line.

        Raises:
            InvalidNameError: If a name cannot be written (see validate_names).
        """
        self.validate_names()
        lines = [f"{OBJECT_LABEL}{KEY_SEPARATOR}{self.name}"]
        lines.extend(
            f"{FIELD_INDENT}{name}{KEY_SEPARATOR}{value.encode()}"
            for name, value in self._fields.items()
        )
        lines.append(BLOCK_END)
        return lines

    def to_text(self) -> str:
        return "\n".join(self.to_lines()) + "\n"

    def __str__(self) -> str:
        return self.to_text().rstrip("\n")
