"""Database introspection module for kysely-codegen.

This module provides dialect-agnostic introspection with adapters for
PostgreSQL, MySQL, SQLite, DuckDB and SQL Server.
"""

from .data_types import DataType, ScalarKind, Scalar, ArrayOf, EnumRef, Unknown, Domain
from .models import ColumnMetadata, TableMetadata, DatabaseMetadata
from .enum_collection import EnumCollection
from .table_matcher import TableMatcher
from .base import DialectAdapter, RawTable, RawColumn, RawEnum, RawDomain
from .type_mappers import (
    ColumnContext,
    TypeMapper,
    PostgresTypeMapper,
    MySQLTypeMapper,
    SQLiteTypeMapper,
    DuckDBTypeMapper,
    MssqlTypeMapper,
    get_type_mapper,
    map_type,
)
from .postgres import PostgresAdapter
from .mysql import MySQLAdapter
from .sqlite import SQLiteAdapter
from .duckdb import DuckDBAdapter
from .mssql import MssqlAdapter
from .dialects import get_dialect, infer_dialect
from .introspector import Introspector

__all__ = [
    # Data types
    "DataType",
    "ScalarKind",
    "Scalar",
    "ArrayOf",
    "EnumRef",
    "Unknown",
    "Domain",
    # Metadata models
    "ColumnMetadata",
    "TableMetadata",
    "DatabaseMetadata",
    "EnumCollection",
    "TableMatcher",
    # Adapter contract
    "DialectAdapter",
    "RawTable",
    "RawColumn",
    "RawEnum",
    "RawDomain",
    # Type mappers
    "ColumnContext",
    "TypeMapper",
    "PostgresTypeMapper",
    "MySQLTypeMapper",
    "SQLiteTypeMapper",
    "DuckDBTypeMapper",
    "MssqlTypeMapper",
    "get_type_mapper",
    "map_type",
    # Adapters
    "PostgresAdapter",
    "MySQLAdapter",
    "SQLiteAdapter",
    "DuckDBAdapter",
    "MssqlAdapter",
    "get_dialect",
    "infer_dialect",
    "Introspector",
]
