"""Abstract base class for dialect adapters."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional


@dataclass
class RawTable:
    """A table or view as reported by the catalog."""
    schema: Optional[str]
    name: str
    is_view: bool = False
    is_partition: bool = False
    partition_root: Optional[str] = None
    partition_root_schema: Optional[str] = None
    comment: Optional[str] = None


@dataclass
class RawColumn:
    """A column as reported by the catalog.

    ``data_type`` is the dialect's own type name (``int4``, ``_text``,
    ``varchar(255)``, ``enum('a','b')``); ``type_schema`` is the schema the
    type lives in, where the dialect has one.
    """
    name: str
    data_type: str
    ordinal_position: int = 0
    is_nullable: bool = True
    has_default_value: bool = False
    is_auto_incrementing: bool = False
    is_generated: bool = False
    type_schema: Optional[str] = None
    domain_name: Optional[str] = None
    domain_schema: Optional[str] = None
    comment: Optional[str] = None


@dataclass
class RawEnum:
    """A named enum type with labels in declaration order."""
    schema: Optional[str]
    name: str
    labels: List[str] = field(default_factory=list)

    @property
    def identity(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name


@dataclass
class RawDomain:
    """A domain and the type it is declared over (which may be a domain)."""
    schema: Optional[str]
    name: str
    base_type: str
    base_schema: Optional[str] = None

    @property
    def identity(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name


class DialectAdapter(ABC):
    """Abstract base class for reading catalog metadata.

    Subclasses implement the catalog queries for one database engine. Every
    query orders its rows, so the facts come back in a stable order no
    matter how the engine stores its catalog.
    """

    #: Dialect identifier used in configuration
    name: str = ""

    #: Schemas whose tables are named without a schema prefix
    DEFAULT_SCHEMAS: List[str] = []

    def default_schemas(self, url: Optional[str] = None) -> List[str]:
        """Schemas treated as default for naming when none are configured."""
        return list(self.DEFAULT_SCHEMAS)

    @contextmanager
    def connect(self, url: str) -> Iterator[Any]:
        """Open a DB-API connection for the duration of a run.

        The connection is closed when the block exits, whether or not an
        error was raised.
        """
        connection = self.open_connection(url)
        try:
            yield connection
        finally:
            connection.close()

    @abstractmethod
    def open_connection(self, url: str) -> Any:
        """Create a driver connection from a URL.

        Args:
            url: Connection URL or file path

        Returns:
            DB-API style connection
        """
        pass

    @abstractmethod
    def list_tables(self, connection: Any) -> List[RawTable]:
        """Get all user tables and views, ordered by schema and name."""
        pass

    @abstractmethod
    def list_columns(self, connection: Any, table: RawTable) -> List[RawColumn]:
        """Get the columns of a table in declaration order."""
        pass

    def list_enums(self, connection: Any) -> List[RawEnum]:
        """Get named enum types. Dialects without them return nothing."""
        return []

    def list_domains(self, connection: Any) -> List[RawDomain]:
        """Get domain definitions. Dialects without them return nothing."""
        return []

    def fetch_all(self, connection: Any, sql: str, params: Optional[tuple] = None) -> List[tuple]:
        """Execute a catalog query and return all rows."""
        cursor = connection.cursor()
        try:
            if params is None:
                cursor.execute(sql)
            else:
                cursor.execute(sql, params)
            return list(cursor.fetchall())
        finally:
            cursor.close()
