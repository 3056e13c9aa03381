"""Database-specific type mapping strategies."""

import logging
import re
from abc import ABC
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, List, Optional, Tuple

from ..config import DateParser, NumericParser
from ..errors import UnsupportedDialectError
from .base import RawDomain
from .data_types import (
    ArrayOf,
    DataType,
    Domain,
    EnumRef,
    Scalar,
    ScalarKind,
    Unknown,
    BOOLEAN,
    BUFFER,
    JSON,
    NUMBER,
    STRING,
)
from .enum_collection import EnumCollection

logger = logging.getLogger(__name__)

BIGINT = Scalar(ScalarKind.BIGINT)
INTERVAL = Scalar(ScalarKind.INTERVAL)

# 'a','it''s' inside enum(...)
ENUM_LABEL = re.compile(r"'((?:[^']|'')*)'")


@dataclass
class ColumnContext:
    """Everything a type mapper may consult besides the raw type name.

    One context is built per run; ``for_column`` derives the per-column
    copy carrying the column's identity. Catalog enums wait in
    ``known_enums`` and enter the collection on first use, so only enums
    referenced by generated tables are emitted.
    """
    enums: EnumCollection = field(default_factory=EnumCollection)
    numeric_parser: NumericParser = NumericParser.STRING
    date_parser: DateParser = DateParser.TIMESTAMP
    domains_enabled: bool = False
    domains: Dict[str, RawDomain] = field(default_factory=dict)
    known_enums: Dict[str, List[str]] = field(default_factory=dict)
    schema: Optional[str] = None
    table: str = ""
    column: str = ""
    type_schema: Optional[str] = None
    domain_name: Optional[str] = None
    domain_schema: Optional[str] = None

    def for_column(self, schema: Optional[str], table: str, column: str, **kwargs) -> "ColumnContext":
        return replace(self, schema=schema, table=table, column=column, **kwargs)

    @property
    def column_path(self) -> str:
        parts = [p for p in (self.schema, self.table, self.column) if p]
        return ".".join(parts)


def _qualify(schema: Optional[str], name: str) -> str:
    return f"{schema}.{name}" if schema else name


def parse_enum_labels(raw_type: str) -> Optional[List[str]]:
    """Extract labels from an inline ``enum('a','b')`` type, if it is one."""
    match = re.match(r"^\s*enum\s*\((.*)\)\s*$", raw_type, re.IGNORECASE | re.DOTALL)
    if not match:
        return None
    return [label.replace("''", "'") for label in ENUM_LABEL.findall(match.group(1))]


class TypeMapper(ABC):
    """Maps a dialect's raw column types to canonical data types.

    Mapping never fails: a type no rule covers becomes ``Unknown`` and is
    logged, so one odd column does not stop generation of the others.
    """

    #: Normalized type name -> data type
    SCALARS: Dict[str, DataType] = {}
    #: Normalized names governed by the numeric parser
    NUMERIC_TYPES: FrozenSet[str] = frozenset()
    #: Normalized names governed by the date parser
    DATE_TYPES: FrozenSet[str] = frozenset()

    def map(self, raw_type: str, context: ColumnContext) -> DataType:
        """Convert a raw catalog type to a canonical data type."""
        if context.domain_name:
            return self._map_domain(context.domain_schema, context.domain_name, raw_type, context, ())
        return self._map_type(raw_type, context)

    def _map_domain(
        self,
        schema: Optional[str],
        name: str,
        fallback: str,
        context: ColumnContext,
        seen: Tuple[str, ...],
    ) -> DataType:
        key = _qualify(schema, name)
        domain = context.domains.get(key)
        plain = replace(context, domain_name=None, domain_schema=None)
        if domain is None or key in seen:
            underlying = self._map_type(fallback, plain)
        elif _qualify(domain.base_schema, domain.base_type) in context.domains:
            underlying = self._map_domain(domain.base_schema, domain.base_type, fallback, context, seen + (key,))
        else:
            underlying = self._map_type(domain.base_type, replace(plain, type_schema=domain.base_schema))

        if context.domains_enabled:
            return Domain(name=name, underlying=underlying, schema=schema)
        return underlying

    def _map_type(self, raw_type: str, context: ColumnContext) -> DataType:
        enum = self.map_enum(raw_type, context)
        if enum is not None:
            return enum

        element = self.array_element(raw_type)
        if element is not None:
            return ArrayOf(self._map_type(element, context))

        name = self.normalize(raw_type)
        if name in self.NUMERIC_TYPES:
            return self.numeric_type(context)
        if name in self.DATE_TYPES:
            return self.date_type(context)

        data_type = self.scalar_type(name)
        if data_type is not None:
            return data_type

        logger.warning("Unknown type '%s' for column %s", raw_type, context.column_path)
        return Unknown(raw_type)

    def normalize(self, raw_type: str) -> str:
        """Lower-case the name and drop length/precision arguments."""
        return re.sub(r"\s*\(.*\)", "", raw_type).strip().lower()

    def scalar_type(self, name: str) -> Optional[DataType]:
        return self.SCALARS.get(name)

    def array_element(self, raw_type: str) -> Optional[str]:
        """Return the element type name if ``raw_type`` is an array."""
        if raw_type.endswith("[]"):
            return raw_type[:-2]
        return None

    def map_enum(self, raw_type: str, context: ColumnContext) -> Optional[EnumRef]:
        """Resolve a catalog or inline enum type, registering it on first use."""
        identity = _qualify(context.type_schema, raw_type)
        if identity in context.known_enums:
            return context.enums.register(identity, context.known_enums[identity])
        if identity in context.enums:
            return EnumRef(identity)

        labels = parse_enum_labels(raw_type)
        if labels is not None:
            return context.enums.register(_qualify(context.schema, f"{context.table}_{context.column}"), labels)
        return None

    def numeric_type(self, context: ColumnContext) -> DataType:
        if context.numeric_parser == NumericParser.NUMBER:
            return NUMBER
        if context.numeric_parser == NumericParser.NUMBER_OR_STRING:
            return Scalar(ScalarKind.NUMBER_OR_STRING)
        return Scalar(ScalarKind.NUMERIC_STRING)

    def date_type(self, context: ColumnContext) -> DataType:
        if context.date_parser == DateParser.STRING:
            return Scalar(ScalarKind.DATE_STRING)
        return Scalar(ScalarKind.DATE_TIMESTAMP)


def _scalars(groups: Dict[DataType, Tuple[str, ...]]) -> Dict[str, DataType]:
    return {name: data_type for data_type, names in groups.items() for name in names}


class PostgresTypeMapper(TypeMapper):
    """Type mapper for PostgreSQL ``udt_name`` values."""

    SCALARS = _scalars({
        BOOLEAN: ("bool", "boolean"),
        BUFFER: ("bytea",),
        NUMBER: ("int2", "int4", "float4", "float8", "oid", "smallint", "integer", "real", "double precision"),
        BIGINT: ("int8", "bigint"),
        STRING: (
            "text", "varchar", "bpchar", "char", "name", "uuid", "citext", "cidr", "inet",
            "macaddr", "macaddr8", "xml", "money", "time", "timetz", "bit", "varbit",
            "tsvector", "tsquery", "character varying", "character",
        ),
        JSON: ("json", "jsonb"),
        INTERVAL: ("interval",),
    })
    NUMERIC_TYPES = frozenset({"numeric", "decimal"})
    DATE_TYPES = frozenset({"date", "timestamp", "timestamptz"})

    def array_element(self, raw_type: str) -> Optional[str]:
        # Catalog array types are the element name prefixed with an underscore
        if raw_type.startswith("_"):
            return raw_type[1:]
        return super().array_element(raw_type)


class MySQLTypeMapper(TypeMapper):
    """Type mapper for MySQL ``COLUMN_TYPE`` values."""

    SCALARS = _scalars({
        NUMBER: ("tinyint", "smallint", "mediumint", "int", "integer", "bigint", "float", "double", "real", "year"),
        STRING: ("char", "varchar", "tinytext", "text", "mediumtext", "longtext", "time", "set"),
        BUFFER: ("bit", "binary", "varbinary", "tinyblob", "blob", "mediumblob", "longblob"),
        JSON: ("json",),
    })
    NUMERIC_TYPES = frozenset({"decimal", "numeric"})
    DATE_TYPES = frozenset({"date", "datetime", "timestamp"})

    def normalize(self, raw_type: str) -> str:
        name = super().normalize(raw_type)
        return re.sub(r"\s+(unsigned|zerofill)\b", "", name).strip()

    def array_element(self, raw_type: str) -> Optional[str]:
        return None


class SQLiteTypeMapper(TypeMapper):
    """Type mapper following SQLite's column affinity rules."""

    NUMERIC_TYPES = frozenset({"numeric", "decimal"})
    DATE_TYPES = frozenset({"date", "datetime", "timestamp"})

    def scalar_type(self, name: str) -> Optional[DataType]:
        type_upper = name.upper()
        if not type_upper:
            return None
        if "INT" in type_upper:
            return NUMBER
        elif any(t in type_upper for t in ["CHAR", "CLOB", "TEXT"]):
            return STRING
        elif "BLOB" in type_upper:
            return BUFFER
        elif any(t in type_upper for t in ["REAL", "FLOA", "DOUB"]):
            return NUMBER
        elif "BOOL" in type_upper:
            return NUMBER
        elif "JSON" in type_upper:
            return STRING
        return None

    def array_element(self, raw_type: str) -> Optional[str]:
        return None


class DuckDBTypeMapper(TypeMapper):
    """Type mapper for DuckDB database types."""

    SCALARS = _scalars({
        BOOLEAN: ("boolean", "bool"),
        NUMBER: (
            "tinyint", "smallint", "integer", "int", "int4", "int2", "float", "float4", "real",
            "double", "float8", "utinyint", "usmallint", "uinteger",
        ),
        BIGINT: ("bigint", "int8", "hugeint", "ubigint", "uhugeint"),
        STRING: ("varchar", "text", "string", "char", "bpchar", "uuid", "time", "interval", "bit"),
        BUFFER: ("blob", "bytea", "varbinary"),
        JSON: ("json",),
    })
    NUMERIC_TYPES = frozenset({"decimal", "numeric"})
    DATE_TYPES = frozenset({"date", "timestamp", "timestamptz", "timestamp with time zone", "datetime"})


class MssqlTypeMapper(TypeMapper):
    """Type mapper for SQL Server system type names."""

    SCALARS = _scalars({
        BOOLEAN: ("bit",),
        NUMBER: ("tinyint", "smallint", "int", "bigint", "float", "real", "money", "smallmoney"),
        STRING: ("char", "nchar", "varchar", "nvarchar", "text", "ntext", "sysname", "uniqueidentifier", "xml"),
        # rowversion is reported under its old name, timestamp
        BUFFER: ("binary", "varbinary", "image", "timestamp", "rowversion"),
    })
    NUMERIC_TYPES = frozenset({"decimal", "numeric"})
    DATE_TYPES = frozenset({"date", "datetime", "datetime2", "datetimeoffset", "smalldatetime", "time"})

    def array_element(self, raw_type: str) -> Optional[str]:
        return None


TYPE_MAPPERS: Dict[str, TypeMapper] = {
    "postgres": PostgresTypeMapper(),
    "mysql": MySQLTypeMapper(),
    "sqlite": SQLiteTypeMapper(),
    "duckdb": DuckDBTypeMapper(),
    "mssql": MssqlTypeMapper(),
}


def get_type_mapper(dialect: str) -> TypeMapper:
    """Return the type mapper registered for a dialect."""
    try:
        return TYPE_MAPPERS[dialect]
    except KeyError:
        raise UnsupportedDialectError(f"No type mapper for dialect '{dialect}'") from None


def map_type(dialect: str, raw_type: str, context: ColumnContext) -> DataType:
    """Map a raw type through the dialect's type mapper."""
    return get_type_mapper(dialect).map(raw_type, context)
