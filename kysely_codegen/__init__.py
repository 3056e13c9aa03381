"""kysely-codegen - Generate Kysely type definitions from your database."""

__version__ = "0.1.0"
