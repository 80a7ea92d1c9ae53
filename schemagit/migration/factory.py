"""Selection of a migration generator by database type."""

from __future__ import annotations

from .base import MigrationGenerator
from .mssql import MssqlMigrationGenerator
from .postgres import PostgresMigrationGenerator


def create_generator(db_type: str) -> MigrationGenerator | None:
    """Return a generator for the database type, or None if unsupported."""
    kind = db_type.lower()
    if kind in ("postgres", "postgresql"):
        return PostgresMigrationGenerator()
    if kind in ("mssql", "sqlserver"):
        return MssqlMigrationGenerator()
    return None