"""Canonical column data types.

A ``DataType`` is one of the frozen dataclasses below. They compare by
value, so two columns mapped from the same catalog type are equal and the
partition merge can detect conflicts with ``!=``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ScalarKind(str, Enum):
    """Scalar kinds a catalog type can map to."""

    STRING = "string"
    NUMBER = "number"
    BIGINT = "bigint"
    NUMERIC_STRING = "numeric-as-string"
    NUMBER_OR_STRING = "number-or-string"
    BOOLEAN = "boolean"
    DATE_STRING = "date-as-string"
    DATE_TIMESTAMP = "date-as-timestamp"
    INTERVAL = "interval"
    JSON = "json"
    BUFFER = "buffer"


@dataclass(frozen=True)
class Scalar:
    kind: ScalarKind


@dataclass(frozen=True)
class ArrayOf:
    element: "DataType"


@dataclass(frozen=True)
class EnumRef:
    """Handle into an ``EnumCollection``; never carries the labels."""

    identity: str


@dataclass(frozen=True)
class Unknown:
    raw_name: str


@dataclass(frozen=True)
class Domain:
    """A named domain kept as its own nominal type."""

    name: str
    underlying: "DataType"
    schema: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name


DataType = Union[Scalar, ArrayOf, EnumRef, Unknown, Domain]


STRING = Scalar(ScalarKind.STRING)
NUMBER = Scalar(ScalarKind.NUMBER)
BOOLEAN = Scalar(ScalarKind.BOOLEAN)
BUFFER = Scalar(ScalarKind.BUFFER)
JSON = Scalar(ScalarKind.JSON)
