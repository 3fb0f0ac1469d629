"""Value objects for the object store domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    - ValueType: The four scalar kinds, keyed by type tag
    - Value: Base class with the text codec (encode / parse)
    - StringValue, IntegerValue, FloatValue, BooleanValue: Concrete kinds
    - TAG_SEPARATOR, INT32_MIN, INT32_MAX: Encoding constants
"""

from sosdb.domain.value_objects.value import (
    INT32_MAX,
    INT32_MIN,
    TAG_SEPARATOR,
    BooleanValue,
    FloatValue,
    IntegerValue,
    StringValue,
    Value,
    ValueType,
)

__all__ = [
    "Value",
    "ValueType",
    "StringValue",
    "IntegerValue",
    "FloatValue",
    "BooleanValue",
    "TAG_SEPARATOR",
    "INT32_MIN",
    "INT32_MAX",
]
