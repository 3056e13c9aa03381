"""Database metadata models produced by introspection."""

from typing import Optional, List, Tuple
from dataclasses import dataclass, field

from ..errors import SchemaInconsistencyError
from .data_types import DataType, EnumRef, ArrayOf, Domain
from .enum_collection import EnumCollection


@dataclass
class ColumnMetadata:
    """Represents a table column."""
    name: str
    data_type: DataType
    is_nullable: bool = True
    is_auto_incrementing: bool = False
    is_generated: bool = False
    has_default_value: bool = False
    comment: Optional[str] = None

    @property
    def enum_ref(self) -> Optional[EnumRef]:
        """Return the enum handle if this column (or its array element) is an enum."""
        data_type = self.data_type
        while isinstance(data_type, (ArrayOf, Domain)):
            data_type = data_type.element if isinstance(data_type, ArrayOf) else data_type.underlying
        return data_type if isinstance(data_type, EnumRef) else None


@dataclass
class TableMetadata:
    """Represents a table or view."""
    name: str
    schema: Optional[str] = None
    columns: List[ColumnMetadata] = field(default_factory=list)
    is_view: bool = False
    is_partition: bool = False
    partition_root: Optional[str] = None
    comment: Optional[str] = None

    @property
    def identity(self) -> Tuple[Optional[str], str]:
        return (self.schema, self.name)

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name

    def get_column(self, name: str) -> Optional[ColumnMetadata]:
        """Find a column by name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None


@dataclass
class DatabaseMetadata:
    """Represents the introspected database.

    Tables keep the order in which they were added; that order drives the
    order of the generated declarations.
    """
    tables: List[TableMetadata] = field(default_factory=list)
    enums: EnumCollection = field(default_factory=EnumCollection)

    def add_table(self, table: TableMetadata) -> None:
        """Append a table, rejecting duplicate (schema, name) identities."""
        if self.get_table(table.schema, table.name) is not None:
            raise SchemaInconsistencyError(
                f"Table '{table.qualified_name}' was introspected twice",
                details={"table": table.qualified_name},
            )
        self.tables.append(table)

    def get_table(self, schema: Optional[str], name: str) -> Optional[TableMetadata]:
        """Find a table by schema and name."""
        for table in self.tables:
            if table.schema == schema and table.name == name:
                return table
        return None

    def get_all_columns(self) -> List[ColumnMetadata]:
        """Get all columns across all tables."""
        columns = []
        for table in self.tables:
            columns.extend(table.columns)
        return columns
