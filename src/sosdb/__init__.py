"""
SOSDB - Simple Object Store Database

A minimal embedded object store: named objects holding typed scalar
fields, kept in memory and persisted as a single line-oriented text file.
"""

__version__ = "0.1.0"

from sosdb.application import Database
from sosdb.domain.entities import Object
from sosdb.domain.errors import (
    DatabaseError,
    DatabaseIOError,
    DatabaseValueError,
    InvalidNameError,
    InvalidTypeError,
    InvalidValueError,
    SosdbError,
    ValueIsEmptyError,
    ValueParseError,
)
from sosdb.domain.value_objects import (
    BooleanValue,
    FloatValue,
    IntegerValue,
    StringValue,
    Value,
    ValueType,
)

__all__ = [
    "__version__",
    "Database",
    "Object",
    "Value",
    "ValueType",
    "StringValue",
    "IntegerValue",
    "FloatValue",
    "BooleanValue",
    "SosdbError",
    "ValueParseError",
    "ValueIsEmptyError",
    "InvalidTypeError",
    "InvalidValueError",
    "DatabaseError",
    "DatabaseIOError",
    "DatabaseValueError",
    "InvalidNameError",
]
