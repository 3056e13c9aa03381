"""Builds database metadata from a dialect adapter's catalog facts."""

import logging
from typing import Any, List, Optional

from ..config import CodegenConfig
from ..errors import SchemaInconsistencyError
from .base import DialectAdapter, RawColumn, RawTable
from .models import ColumnMetadata, DatabaseMetadata, TableMetadata
from .table_matcher import TableMatcher
from .type_mappers import ColumnContext, TypeMapper, get_type_mapper

logger = logging.getLogger(__name__)


class Introspector:
    """Runs one dialect adapter and assembles a ``DatabaseMetadata``.

    Written once against the ``DialectAdapter`` contract; the dialect only
    decides which adapter and type mapper are passed in.
    """

    def __init__(
        self,
        adapter: DialectAdapter,
        config: CodegenConfig,
        matcher: Optional[TableMatcher] = None,
        type_mapper: Optional[TypeMapper] = None,
    ):
        self.adapter = adapter
        self.config = config
        self.matcher = matcher or TableMatcher(
            include_pattern=config.include_pattern,
            exclude_pattern=config.exclude_pattern,
            default_schemas=config.default_schemas,
        )
        self.type_mapper = type_mapper or get_type_mapper(adapter.name)

    def introspect(self, connection: Any) -> DatabaseMetadata:
        """Read the catalog through ``connection`` and build the metadata.

        Args:
            connection: Open driver connection for the adapter's dialect

        Returns:
            DatabaseMetadata with tables in adapter order

        Raises:
            SchemaInconsistencyError: On conflicting enum labels or
                partition column types
        """
        metadata = DatabaseMetadata()
        context = ColumnContext(
            enums=metadata.enums,
            numeric_parser=self.config.numeric_parser,
            date_parser=self.config.date_parser,
            domains_enabled=self.config.domains,
            domains={domain.identity: domain for domain in self.adapter.list_domains(connection)},
            known_enums={enum.identity: enum.labels for enum in self.adapter.list_enums(connection)},
        )

        partitions: List[RawTable] = []
        for raw_table in self.adapter.list_tables(connection):
            if raw_table.is_partition:
                partitions.append(raw_table)
                continue
            if not self.matcher.matches(raw_table.schema, raw_table.name):
                logger.debug("Skipping table %s.%s", raw_table.schema, raw_table.name)
                continue
            metadata.add_table(self._build_table(connection, raw_table, context))

        if self.config.partitions:
            for raw_table in partitions:
                self._merge_partition(connection, metadata, raw_table, context)
        elif partitions:
            logger.debug("Skipping %d partition tables", len(partitions))

        logger.info(
            "Introspected %d tables, %d columns, %d enums",
            len(metadata.tables),
            len(metadata.get_all_columns()),
            len(metadata.enums),
        )
        return metadata

    def _build_table(self, connection: Any, raw_table: RawTable, context: ColumnContext) -> TableMetadata:
        raw_columns = sorted(
            self.adapter.list_columns(connection, raw_table),
            key=lambda column: column.ordinal_position,
        )
        return TableMetadata(
            name=raw_table.name,
            schema=raw_table.schema,
            columns=[self._build_column(raw_table, column, context) for column in raw_columns],
            is_view=raw_table.is_view,
            is_partition=raw_table.is_partition,
            partition_root=raw_table.partition_root,
            comment=raw_table.comment,
        )

    def _build_column(self, raw_table: RawTable, raw_column: RawColumn, context: ColumnContext) -> ColumnMetadata:
        column_context = context.for_column(
            raw_table.schema,
            raw_table.name,
            raw_column.name,
            type_schema=raw_column.type_schema,
            domain_name=raw_column.domain_name,
            domain_schema=raw_column.domain_schema,
        )
        return ColumnMetadata(
            name=raw_column.name,
            data_type=self.type_mapper.map(raw_column.data_type, column_context),
            is_nullable=raw_column.is_nullable,
            is_auto_incrementing=raw_column.is_auto_incrementing,
            is_generated=raw_column.is_generated,
            has_default_value=raw_column.has_default_value,
            comment=raw_column.comment,
        )

    def _merge_partition(
        self,
        connection: Any,
        metadata: DatabaseMetadata,
        raw_table: RawTable,
        context: ColumnContext,
    ) -> None:
        """Fold a partition's columns into its root table.

        The root keeps its declared column order; columns only partitions
        declare are appended in the order they are first seen.
        """
        root_schema = raw_table.partition_root_schema or raw_table.schema
        root = metadata.get_table(root_schema, raw_table.partition_root) if raw_table.partition_root else None
        if root is None:
            logger.debug("Skipping partition %s.%s without an included root", raw_table.schema, raw_table.name)
            return

        partition = self._build_table(connection, raw_table, context)
        for column in partition.columns:
            existing = root.get_column(column.name)
            if existing is None:
                root.columns.append(column)
            elif existing.data_type != column.data_type:
                raise SchemaInconsistencyError(
                    f"Column '{column.name}' of partition '{partition.qualified_name}' has type "
                    f"{column.data_type} but root table '{root.qualified_name}' declares {existing.data_type}",
                    details={
                        "table": root.qualified_name,
                        "partition": partition.qualified_name,
                        "column": column.name,
                    },
                )
