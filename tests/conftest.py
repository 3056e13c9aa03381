"""Shared pytest fixtures for kysely-codegen tests."""

import sqlite3

import pytest

from kysely_codegen.config import CodegenConfig
from kysely_codegen.database.data_types import NUMBER, STRING, EnumRef
from kysely_codegen.database.models import ColumnMetadata, DatabaseMetadata, TableMetadata

from .fixtures import bacchi_adapter

BACCHUS_RULE = {"/(bacch)(?:us|i)$/i": "$1us"}


@pytest.fixture
def bacchi_config():
    """Options for the bacchi scenario: custom rule, camelCase, PascalCase runtime enums."""
    return CodegenConfig(
        camel_case=True,
        singularize=BACCHUS_RULE,
        runtime_enums="pascal-case",
    )


@pytest.fixture
def fake_bacchi_adapter():
    """In-memory adapter serving the bacchi catalog."""
    return bacchi_adapter()


@pytest.fixture
def bacchi_metadata():
    """Introspected metadata for the bacchi table, columns in catalog order."""
    metadata = DatabaseMetadata()
    status = metadata.enums.register("public.status", ["CONFIRMED", "UNCONFIRMED"])
    metadata.add_table(TableMetadata(
        name="bacchi",
        schema="public",
        columns=[
            ColumnMetadata(name="status", data_type=status, is_nullable=True),
            ColumnMetadata(
                name="bacchus_id",
                data_type=NUMBER,
                is_nullable=False,
                is_auto_incrementing=True,
                has_default_value=True,
            ),
        ],
    ))
    return metadata


@pytest.fixture
def users_metadata():
    """Two plain tables without enums or defaults."""
    metadata = DatabaseMetadata()
    metadata.add_table(TableMetadata(
        name="users",
        schema="public",
        columns=[
            ColumnMetadata(name="id", data_type=NUMBER, is_nullable=False),
            ColumnMetadata(name="email", data_type=STRING, is_nullable=False),
        ],
    ))
    metadata.add_table(TableMetadata(
        name="user_roles",
        schema="public",
        columns=[
            ColumnMetadata(name="user_id", data_type=NUMBER, is_nullable=False),
            ColumnMetadata(name="role", data_type=EnumRef("public.role"), is_nullable=False),
        ],
    ))
    metadata.enums.register("public.role", ["admin", "member"])
    return metadata


@pytest.fixture
def sqlite_db(tmp_path):
    """A SQLite database file with tables, a view and a generated column."""
    path = tmp_path / "app.db"
    connection = sqlite3.connect(str(path))
    try:
        connection.executescript("""
            CREATE TABLE users (
                id INTEGER PRIMARY KEY,
                email TEXT NOT NULL,
                nickname VARCHAR(50),
                score REAL DEFAULT 0,
                created_at DATETIME
            );
            CREATE TABLE user_tags (
                user_id INTEGER NOT NULL,
                tag TEXT NOT NULL,
                PRIMARY KEY (user_id, tag)
            );
            CREATE TABLE totals (
                a INTEGER,
                b INTEGER,
                total INTEGER GENERATED ALWAYS AS (a + b) VIRTUAL
            );
            CREATE VIEW active_users AS SELECT id, email FROM users;
        """)
        connection.commit()
    finally:
        connection.close()
    return path
