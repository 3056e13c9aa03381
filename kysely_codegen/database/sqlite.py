"""SQLite dialect adapter."""

import sqlite3
from typing import Any, List

from .base import DialectAdapter, RawColumn, RawTable

# PRAGMA table_xinfo "hidden" values
HIDDEN_VIRTUAL_TABLE_COLUMN = 1
GENERATED_VIRTUAL = 2
GENERATED_STORED = 3


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class SQLiteAdapter(DialectAdapter):
    """Reads tables and columns from ``sqlite_master`` and ``PRAGMA table_xinfo``."""

    name = "sqlite"
    DEFAULT_SCHEMAS = ["main"]

    def open_connection(self, url: str) -> Any:
        """Open a database file (read-only) or an in-memory database."""
        path = url
        for prefix in ("sqlite:///", "sqlite://"):
            if path.startswith(prefix):
                path = path[len(prefix):]
                break

        if path in ("", ":memory:"):
            return sqlite3.connect(":memory:")
        return sqlite3.connect(f"file:{path}?mode=ro", uri=True)

    def list_tables(self, connection: Any) -> List[RawTable]:
        rows = self.fetch_all(connection, """
            SELECT name, type
            FROM sqlite_master
            WHERE type IN ('table', 'view')
              AND name NOT LIKE 'sqlite\\_%' ESCAPE '\\'
            ORDER BY name
        """)

        return [RawTable(schema="main", name=name, is_view=kind == "view") for name, kind in rows]

    def list_columns(self, connection: Any, table: RawTable) -> List[RawColumn]:
        rows = self.fetch_all(connection, f"PRAGMA table_xinfo({_quote_identifier(table.name)})")

        # Only a lone INTEGER PRIMARY KEY aliases the auto-assigned rowid
        primary_keys = [row for row in rows if row[5]]
        rowid_alias = None
        if len(primary_keys) == 1 and (primary_keys[0][2] or "").upper() == "INTEGER":
            rowid_alias = primary_keys[0][1]

        columns = []
        for cid, name, declared_type, not_null, default, _pk, hidden in rows:
            if hidden == HIDDEN_VIRTUAL_TABLE_COLUMN:
                continue
            is_auto_incrementing = name == rowid_alias and not table.is_view
            columns.append(RawColumn(
                name=name,
                data_type=declared_type or "",
                ordinal_position=cid,
                is_nullable=not not_null and not is_auto_incrementing,
                has_default_value=default is not None or is_auto_incrementing,
                is_auto_incrementing=is_auto_incrementing,
                is_generated=hidden in (GENERATED_VIRTUAL, GENERATED_STORED),
            ))
        return columns
