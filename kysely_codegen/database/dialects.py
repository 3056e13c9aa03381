"""Dialect registry: picks the adapter and type mapper for a run."""

from typing import Dict, Optional, Type

from ..errors import UnsupportedDialectError
from .base import DialectAdapter
from .duckdb import DuckDBAdapter
from .mssql import MssqlAdapter
from .mysql import MySQLAdapter
from .postgres import PostgresAdapter
from .sqlite import SQLiteAdapter

DIALECTS: Dict[str, Type[DialectAdapter]] = {
    "postgres": PostgresAdapter,
    "mysql": MySQLAdapter,
    "sqlite": SQLiteAdapter,
    "duckdb": DuckDBAdapter,
    "mssql": MssqlAdapter,
}

# URL scheme -> dialect
URL_SCHEMES = {
    "postgres": "postgres",
    "postgresql": "postgres",
    "pg": "postgres",
    "mysql": "mysql",
    "mariadb": "mysql",
    "sqlite": "sqlite",
    "duckdb": "duckdb",
    "mssql": "mssql",
    "sqlserver": "mssql",
}

FILE_EXTENSIONS = {
    ".db": "sqlite",
    ".sqlite": "sqlite",
    ".sqlite3": "sqlite",
    ".duckdb": "duckdb",
}


def get_dialect(name: str) -> DialectAdapter:
    """Create the adapter registered under ``name``."""
    try:
        return DIALECTS[name]()
    except KeyError:
        raise UnsupportedDialectError(
            f"Unsupported dialect '{name}'. Expected one of: {', '.join(sorted(DIALECTS))}",
            details={"dialect": name},
        ) from None


def infer_dialect(url: Optional[str]) -> str:
    """Guess the dialect from a connection URL or database file name."""
    if not url:
        raise UnsupportedDialectError("Cannot infer a dialect without a connection URL")

    if "://" in url:
        scheme = url.split("://", 1)[0].lower()
        # postgresql+psycopg2:// style
        scheme = scheme.split("+", 1)[0]
        if scheme in URL_SCHEMES:
            return URL_SCHEMES[scheme]

    if url == ":memory:":
        return "sqlite"

    path = url.split("?", 1)[0].lower()
    for extension, dialect in FILE_EXTENSIONS.items():
        if path.endswith(extension):
            return dialect

    raise UnsupportedDialectError(
        f"Cannot infer the dialect from '{url}'. Pass --dialect explicitly.",
        details={"url": url},
    )
