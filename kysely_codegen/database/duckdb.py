"""DuckDB dialect adapter."""

from typing import Any, List

from .base import DialectAdapter, RawColumn, RawEnum, RawTable


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class DuckDBAdapter(DialectAdapter):
    """Reads DuckDB metadata through ``information_schema`` and ``duckdb_*()`` functions."""

    name = "duckdb"
    DEFAULT_SCHEMAS = ["main"]

    def __init__(self, read_only: bool = True):
        """Initialize DuckDB adapter.

        Args:
            read_only: Open database files in read-only mode (default True for introspection)
        """
        self.read_only = read_only

    @staticmethod
    def database_path(url: str) -> str:
        """Extract the file path from a ``duckdb:///path`` URL or a plain path."""
        path = url
        if path.startswith('duckdb:///'):
            path = path[10:]
        elif path.startswith('duckdb://'):
            path = path[9:]
        # Remove query parameters if any
        if '?' in path:
            path = path.split('?')[0]
        return path or ':memory:'

    def open_connection(self, url: str) -> Any:
        """Connect directly to a DuckDB database file."""
        try:
            import duckdb
        except ImportError:
            raise ImportError(
                "duckdb is required for the duckdb dialect. "
                "Install it with: pip install duckdb"
            )

        path = self.database_path(url)
        if path == ':memory:':
            return duckdb.connect(':memory:')
        return duckdb.connect(path, read_only=self.read_only)

    def list_tables(self, connection: Any) -> List[RawTable]:
        rows = self.fetch_all(connection, """
            SELECT table_schema, table_name, table_type
            FROM information_schema.tables
            WHERE table_catalog = current_database()
              AND table_schema NOT IN ('information_schema', 'pg_catalog')
            ORDER BY table_schema, table_name
        """)

        return [
            RawTable(schema=schema, name=name, is_view=table_type == 'VIEW')
            for schema, name, table_type in rows
        ]

    def list_columns(self, connection: Any, table: RawTable) -> List[RawColumn]:
        rows = self.fetch_all(connection, """
            SELECT
                column_name,
                data_type,
                column_index,
                is_nullable,
                column_default,
                comment
            FROM duckdb_columns()
            WHERE database_name = current_database()
              AND schema_name = ?
              AND table_name = ?
            ORDER BY column_index
        """, (table.schema, table.name))

        columns = []
        for name, data_type, position, is_nullable, default, comment in rows:
            is_auto_incrementing = default is not None and str(default).lower().startswith('nextval(')
            columns.append(RawColumn(
                name=name,
                data_type=data_type,
                type_schema=table.schema,
                ordinal_position=position,
                is_nullable=bool(is_nullable),
                has_default_value=default is not None,
                is_auto_incrementing=is_auto_incrementing,
                comment=comment or None,
            ))
        return columns

    def list_enums(self, connection: Any) -> List[RawEnum]:
        rows = self.fetch_all(connection, """
            SELECT schema_name, type_name
            FROM duckdb_types()
            WHERE database_name = current_database()
              AND logical_type = 'ENUM'
              AND NOT internal
            ORDER BY schema_name, type_name
        """)

        enums = []
        for schema, name in rows:
            qualified = f"{_quote_identifier(schema)}.{_quote_identifier(name)}"
            labels = self.fetch_all(connection, f"SELECT enum_range(NULL::{qualified})")[0][0]
            enums.append(RawEnum(schema=schema, name=name, labels=list(labels)))
        return enums
