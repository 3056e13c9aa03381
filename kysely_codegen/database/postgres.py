"""PostgreSQL dialect adapter."""

import logging
from itertools import groupby
from typing import Any, List

from .base import DialectAdapter, RawColumn, RawDomain, RawEnum, RawTable

logger = logging.getLogger(__name__)


class PostgresAdapter(DialectAdapter):
    """Reads tables, columns, enums and domains from ``pg_catalog``."""

    name = "postgres"
    DEFAULT_SCHEMAS = ["public"]

    def open_connection(self, url: str) -> Any:
        """Connect with psycopg2 in a read-only session."""
        try:
            import psycopg2
        except ImportError:
            raise ImportError(
                "psycopg2 is required for the postgres dialect. "
                "Install it with: pip install psycopg2-binary"
            )

        connection = psycopg2.connect(url)
        connection.set_session(readonly=True)
        return connection

    def list_tables(self, connection: Any) -> List[RawTable]:
        rows = self.fetch_all(connection, """
            SELECT
                n.nspname,
                c.relname,
                c.relkind IN ('v', 'm') AS is_view,
                c.relispartition,
                rn.nspname AS root_schema,
                r.relname AS root_name,
                obj_description(c.oid, 'pg_class')
            FROM pg_class c
            JOIN pg_namespace n ON n.oid = c.relnamespace
            LEFT JOIN pg_class r
              ON c.relispartition AND r.oid = pg_partition_root(c.oid)
            LEFT JOIN pg_namespace rn ON rn.oid = r.relnamespace
            WHERE c.relkind IN ('r', 'p', 'v', 'm', 'f')
              AND n.nspname NOT IN ('pg_catalog', 'information_schema')
              AND n.nspname NOT LIKE 'pg_toast%'
            ORDER BY n.nspname, c.relname
        """)

        tables = []
        for schema, name, is_view, is_partition, root_schema, root_name, comment in rows:
            tables.append(RawTable(
                schema=schema,
                name=name,
                is_view=bool(is_view),
                is_partition=bool(is_partition),
                partition_root=root_name,
                partition_root_schema=root_schema,
                comment=comment,
            ))
        return tables

    def list_columns(self, connection: Any, table: RawTable) -> List[RawColumn]:
        rows = self.fetch_all(connection, """
            SELECT
                a.attname,
                COALESCE(bt.typname, t.typname) AS data_type,
                COALESCE(btn.nspname, tn.nspname) AS type_schema,
                a.attnum,
                NOT a.attnotnull AS is_nullable,
                a.atthasdef OR a.attidentity <> '' AS has_default,
                a.attidentity <> ''
                  OR COALESCE(pg_get_expr(d.adbin, d.adrelid), '') LIKE 'nextval(%%' AS is_auto_incrementing,
                a.attidentity = 'a' OR a.attgenerated = 's' AS is_generated,
                CASE WHEN t.typtype = 'd' THEN t.typname END AS domain_name,
                CASE WHEN t.typtype = 'd' THEN tn.nspname END AS domain_schema,
                col_description(a.attrelid, a.attnum)
            FROM pg_attribute a
            JOIN pg_class c ON c.oid = a.attrelid
            JOIN pg_namespace n ON n.oid = c.relnamespace
            JOIN pg_type t ON t.oid = a.atttypid
            JOIN pg_namespace tn ON tn.oid = t.typnamespace
            LEFT JOIN pg_type bt ON t.typtype = 'd' AND bt.oid = t.typbasetype
            LEFT JOIN pg_namespace btn ON btn.oid = bt.typnamespace
            LEFT JOIN pg_attrdef d ON d.adrelid = a.attrelid AND d.adnum = a.attnum
            WHERE n.nspname = %s
              AND c.relname = %s
              AND a.attnum > 0
              AND NOT a.attisdropped
            ORDER BY a.attnum
        """, (table.schema, table.name))

        return [
            RawColumn(
                name=row[0],
                data_type=row[1],
                type_schema=row[2],
                ordinal_position=row[3],
                is_nullable=bool(row[4]),
                has_default_value=bool(row[5]),
                is_auto_incrementing=bool(row[6]),
                is_generated=bool(row[7]),
                domain_name=row[8],
                domain_schema=row[9],
                comment=row[10],
            )
            for row in rows
        ]

    def list_enums(self, connection: Any) -> List[RawEnum]:
        rows = self.fetch_all(connection, """
            SELECT n.nspname, t.typname, e.enumlabel
            FROM pg_type t
            JOIN pg_enum e ON e.enumtypid = t.oid
            JOIN pg_namespace n ON n.oid = t.typnamespace
            ORDER BY n.nspname, t.typname, e.enumsortorder
        """)

        enums = [
            RawEnum(schema=schema, name=name, labels=[row[2] for row in group])
            for (schema, name), group in groupby(rows, key=lambda row: (row[0], row[1]))
        ]
        logger.debug("Found %d enum types", len(enums))
        return enums

    def list_domains(self, connection: Any) -> List[RawDomain]:
        rows = self.fetch_all(connection, """
            SELECT n.nspname, t.typname, bt.typname, bn.nspname
            FROM pg_type t
            JOIN pg_namespace n ON n.oid = t.typnamespace
            JOIN pg_type bt ON bt.oid = t.typbasetype
            JOIN pg_namespace bn ON bn.oid = bt.typnamespace
            WHERE t.typtype = 'd'
              AND n.nspname NOT IN ('pg_catalog', 'information_schema')
            ORDER BY n.nspname, t.typname
        """)

        return [
            RawDomain(schema=row[0], name=row[1], base_type=row[2], base_schema=row[3])
            for row in rows
        ]
