"""Test fixtures for kysely-codegen."""

from .fake_adapter import FakeAdapter, FakeConnection, bacchi_adapter

__all__ = [
    "FakeAdapter",
    "FakeConnection",
    "bacchi_adapter",
]
