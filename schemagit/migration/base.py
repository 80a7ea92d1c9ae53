"""Common interface for SQL migration generators."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..diff import SchemaDiff


class MigrationGenerator(ABC):
    """Turns a schema diff into SQL statements."""

    @abstractmethod
    def generate_sql(self, diff: SchemaDiff) -> list[str]:
        """Return the SQL statements that apply the diff."""

    def generate_migration(self, diff: SchemaDiff) -> str:
        """Return a complete migration script, statements separated by blank lines."""
        return "\n\n".join(self.generate_sql(diff))