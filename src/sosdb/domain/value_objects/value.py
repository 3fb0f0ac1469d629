"""Typed scalar values and their text encoding.

Every field of an object holds exactly one of four scalar kinds. On disk a
value is written as a one-character type tag, a ``:`` separator and the
payload text:

    Kind    | Tag | Example
    --------|-----|-------------
    String  | s   | s:hello world
    Integer | i   | i:-42
    Float   | f   | f:0.1
    Boolean | b   | b:true

Integers are signed 32-bit. Floats are IEEE-754 binary32: payloads are
rounded to single precision on construction and written with the shortest
decimal that reads back to the same single-precision value. Strings escape
backslash, LF and CR so a value never spans more than one line.
"""

from __future__ import annotations

import math
import re
import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from sosdb.domain.errors import InvalidTypeError, InvalidValueError, ValueIsEmptyError

TAG_SEPARATOR = ":"

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_FLOAT32 = struct.Struct(">f")
_MAX_FLOAT32_DIGITS = 9  # enough significant digits to round-trip any binary32

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)
_ESCAPE_SEQUENCE = re.compile(r"\\(.)", re.DOTALL)
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}


def to_float32(number: float) -> float:
    """Round a Python float to the nearest binary32 value.

    Magnitudes beyond the binary32 range round to infinity, as IEEE-754
    rounding does.
    """
    try:
        return _FLOAT32.unpack(_FLOAT32.pack(number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


def format_float32(number: float) -> str:
    """Shortest decimal text that reads back to the same binary32 value."""
    if math.isnan(number):
        return "nan"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    for precision in range(1, _MAX_FLOAT32_DIGITS + 1):
        text = f"{number:.{precision}g}"
        if to_float32(float(text)) == number:
            return text
    return repr(number)


def escape_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n").replace("\r", "\\r")


def unescape_string(text: str) -> str:
    # Unknown sequences are kept as written.
    return _ESCAPE_SEQUENCE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), text)


class ValueType(str, Enum):
    """Value kinds, keyed by their one-character tag."""

    STRING = "s"
    INTEGER = "i"
    FLOAT = "f"
    BOOLEAN = "b"


@dataclass(frozen=True)
class Value(ABC):
    """Base class for all typed scalar values.

    Values are immutable and compare equal only to values of the same kind
    holding the same payload, so ``IntegerValue(1) != FloatValue(1.0)``.

    Example:
        >>> Value.parse("i:42")
        IntegerValue(value=42)
        >>> BooleanValue(True).encode()
        'b:true'
    """

    value: Any

    @property
    @abstractmethod
    def value_type(self) -> ValueType:
        """Return the kind of this value."""
        ...

    @abstractmethod
    def payload_to_text(self) -> str:
        """Render the payload without the tag."""
        ...

    @classmethod
    @abstractmethod
    def payload_from_text(cls, payload: str) -> Value:
        """Parse a payload (the text after ``tag:``) into a value."""
        ...

    def encode(self) -> str:
        """Encode as ``<tag>:<payload>``."""
        return f"{self.value_type.value}{TAG_SEPARATOR}{self.payload_to_text()}"

    def __str__(self) -> str:
        return self.encode()

    @classmethod
    def parse(cls, text: str) -> Value:
        """Decode a value from its ``<tag>:<payload>`` text.

        Args:
            text: The encoded value.

        Returns:
            The decoded value.

        Raises:
            ValueIsEmptyError: If text is empty.
            InvalidValueError: If the tag is not followed by ``:`` or the
                payload does not parse for its kind.
            InvalidTypeError: If the tag is not a known kind.
        """
        if not text:
            raise ValueIsEmptyError()

        tag = text[0]
        if text[1:2] != TAG_SEPARATOR:
            raise InvalidValueError(tag, text[1:], f"expected {TAG_SEPARATOR!r} after type tag")
        payload = text[2:]

        try:
            value_type = ValueType(tag)
        except ValueError:
            raise InvalidTypeError(tag) from None

        return _VALUE_CLASSES[value_type].payload_from_text(payload)

    @staticmethod
    def from_python(obj: bool | int | float | str) -> Value:
        """Wrap a plain Python scalar in the matching value kind.

        Raises:
            TypeError: If obj is not a bool, int, float or str.
        """
        # bool first: it is a subclass of int
        if isinstance(obj, bool):
            return BooleanValue(obj)
        if isinstance(obj, int):
            return IntegerValue(obj)
        if isinstance(obj, float):
            return FloatValue(obj)
        if isinstance(obj, str):
            return StringValue(obj)
        raise TypeError(f"Cannot store {type(obj).__name__} as a value")


@dataclass(frozen=True)
class StringValue(Value):
    """Arbitrary text. Always decodes successfully."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"StringValue requires str, got {type(self.value).__name__}")

    @property
    def value_type(self) -> ValueType:
        return ValueType.STRING

    def payload_to_text(self) -> str:
        return escape_string(self.value)

    @classmethod
    def payload_from_text(cls, payload: str) -> StringValue:
        return cls(unescape_string(payload))


@dataclass(frozen=True)
class IntegerValue(Value):
    """Signed 32-bit integer."""

    value: int

    MIN: ClassVar[int] = INT32_MIN
    MAX: ClassVar[int] = INT32_MAX

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"IntegerValue requires int, got {type(self.value).__name__}")
        if not self.MIN <= self.value <= self.MAX:
            raise ValueError(f"IntegerValue {self.value} is outside the signed 32-bit range")

    @property
    def value_type(self) -> ValueType:
        return ValueType.INTEGER

    def payload_to_text(self) -> str:
        return str(self.value)

    @classmethod
    def payload_from_text(cls, payload: str) -> IntegerValue:
        if not _INTEGER_PATTERN.fullmatch(payload):
            raise InvalidValueError(ValueType.INTEGER.value, payload, "not a decimal integer")
        try:
            number = int(payload)
        except ValueError:
            # int() refuses digit strings past sys.get_int_max_str_digits()
            raise InvalidValueError(ValueType.INTEGER.value, payload, "out of 32-bit range") from None
        if not cls.MIN <= number <= cls.MAX:
            raise InvalidValueError(ValueType.INTEGER.value, payload, "out of 32-bit range")
        return cls(number)


@dataclass(frozen=True)
class FloatValue(Value):
    """IEEE-754 binary32 float. The payload is rounded on construction."""

    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"FloatValue requires float, got {type(self.value).__name__}")
        object.__setattr__(self, "value", to_float32(float(self.value)))

    @property
    def value_type(self) -> ValueType:
        return ValueType.FLOAT

    def payload_to_text(self) -> str:
        return format_float32(self.value)

    @classmethod
    def payload_from_text(cls, payload: str) -> FloatValue:
        if not _FLOAT_PATTERN.fullmatch(payload):
            raise InvalidValueError(ValueType.FLOAT.value, payload, "not a decimal float")
        return cls(float(payload))


@dataclass(frozen=True)
class BooleanValue(Value):
    """``true`` or ``false``, spelled exactly that way."""

    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError(f"BooleanValue requires bool, got {type(self.value).__name__}")

    @property
    def value_type(self) -> ValueType:
        return ValueType.BOOLEAN

    def payload_to_text(self) -> str:
        return "true" if self.value else "false"

    @classmethod
    def payload_from_text(cls, payload: str) -> BooleanValue:
        if payload == "true":
            return cls(True)
        if payload == "false":
            return cls(False)
        raise InvalidValueError(ValueType.BOOLEAN.value, payload, "expected 'true' or 'false'")


_VALUE_CLASSES: dict[ValueType, type[Value]] = {
    ValueType.STRING: StringValue,
    ValueType.INTEGER: IntegerValue,
    ValueType.FLOAT: FloatValue,
    ValueType.BOOLEAN: BooleanValue,
}
