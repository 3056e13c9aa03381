"""In-memory dialect adapter for testing."""

from typing import Any, Dict, List, Optional, Tuple

from kysely_codegen.database.base import DialectAdapter, RawColumn, RawDomain, RawEnum, RawTable


class FakeConnection:
    """Stands in for a driver connection; records whether it was closed."""

    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeAdapter(DialectAdapter):
    """DialectAdapter serving pre-built raw facts instead of querying a catalog.

    Records every call so tests can check which catalog reads happened.
    """

    def __init__(
        self,
        tables: Optional[List[RawTable]] = None,
        columns: Optional[Dict[Tuple[Optional[str], str], List[RawColumn]]] = None,
        enums: Optional[List[RawEnum]] = None,
        domains: Optional[List[RawDomain]] = None,
        name: str = "postgres",
        default_schemas: Optional[List[str]] = None,
    ):
        self.name = name
        self.DEFAULT_SCHEMAS = default_schemas if default_schemas is not None else ["public"]
        self.tables = tables or []
        self.columns = columns or {}
        self.enums = enums or []
        self.domains = domains or []
        self.connections: List[FakeConnection] = []
        self._call_history: List[str] = []

    def open_connection(self, url: str) -> Any:
        self._call_history.append("open_connection")
        connection = FakeConnection()
        self.connections.append(connection)
        return connection

    def list_tables(self, connection: Any) -> List[RawTable]:
        self._call_history.append("list_tables")
        return list(self.tables)

    def list_columns(self, connection: Any, table: RawTable) -> List[RawColumn]:
        self._call_history.append(f"list_columns:{table.schema}.{table.name}")
        return list(self.columns.get((table.schema, table.name), []))

    def list_enums(self, connection: Any) -> List[RawEnum]:
        self._call_history.append("list_enums")
        return list(self.enums)

    def list_domains(self, connection: Any) -> List[RawDomain]:
        self._call_history.append("list_domains")
        return list(self.domains)

    def get_call_history(self) -> List[str]:
        return list(self._call_history)


def bacchi_adapter() -> FakeAdapter:
    """Catalog with one table ``bacchi``: a serial key and a nullable enum column."""
    return FakeAdapter(
        tables=[RawTable(schema="public", name="bacchi")],
        columns={
            ("public", "bacchi"): [
                RawColumn(
                    name="status",
                    data_type="status",
                    type_schema="public",
                    ordinal_position=1,
                    is_nullable=True,
                ),
                RawColumn(
                    name="bacchus_id",
                    data_type="int4",
                    type_schema="pg_catalog",
                    ordinal_position=2,
                    is_nullable=False,
                    has_default_value=True,
                    is_auto_incrementing=True,
                ),
            ],
        },
        enums=[RawEnum(schema="public", name="status", labels=["CONFIRMED", "UNCONFIRMED"])],
    )
