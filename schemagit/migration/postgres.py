"""PostgreSQL migration generator."""

from __future__ import annotations

from ..diff import ColumnModification, SchemaDiff, TableDiff
from ..models import Column, ForeignKey, Index, Table
from .base import MigrationGenerator


def _quote(name: str) -> str:
    return f'"{name}"'


class PostgresMigrationGenerator(MigrationGenerator):
    """Generates PostgreSQL DDL from schema diffs."""

    def generate_sql(self, diff: SchemaDiff) -> list[str]:
        statements = [self.generate_create_table(table) for table in diff.tables_added]
        for table_diff in diff.tables_modified:
            statements.extend(self._table_modifications(table_diff))
        statements.extend(self.generate_drop_table(table) for table in diff.tables_removed)
        return statements

    def generate_create_table(self, table: Table) -> str:
        """CREATE TABLE followed by its indexes and foreign keys."""
        column_defs = ",\n".join(
            f"  {self._column_definition(column)}" for column in table.columns
        )
        create = "\n".join([f"CREATE TABLE {_quote(table.name)} (", column_defs, ");"])
        statements = [create]
        statements += [self._create_index(table.name, index) for index in table.indexes]
        statements += [self._add_foreign_key(table.name, fk) for fk in table.foreign_keys]
        return "\n\n".join(statements)

    def generate_drop_table(self, table: Table) -> str:
        return f"DROP TABLE {_quote(table.name)};"

    def generate_drop_index(self, index: Index) -> str:
        return f"DROP INDEX {_quote(index.name)};"

    def _table_modifications(self, table_diff: TableDiff) -> list[str]:
        name = table_diff.table_name
        statements: list[str] = []
        # Foreign keys go first since they may depend on columns and indexes.
        statements += [self._drop_foreign_key(name, fk) for fk in table_diff.foreign_keys_removed]
        statements += [self.generate_drop_index(index) for index in table_diff.indexes_removed]
        statements += [
            f"ALTER TABLE {_quote(name)} DROP COLUMN {_quote(column.name)};"
            for column in table_diff.columns_removed
        ]
        statements += [
            f"ALTER TABLE {_quote(name)} ADD COLUMN {self._column_definition(column)};"
            for column in table_diff.columns_added
        ]
        for modification in table_diff.columns_modified:
            statements.extend(self._modify_column(name, modification))
        statements += [self._create_index(name, index) for index in table_diff.indexes_added]
        statements += [self._add_foreign_key(name, fk) for fk in table_diff.foreign_keys_added]
        return statements

    def _column_definition(self, column: Column) -> str:
        parts = [_quote(column.name), column.data_type]
        if not column.nullable:
            parts.append("NOT NULL")
        if column.default is not None:
            parts.append(f"DEFAULT {column.default}")
        return " ".join(parts)

    def _modify_column(self, table_name: str, modification: ColumnModification) -> list[str]:
        old, new = modification.old_column, modification.new_column
        prefix = f"ALTER TABLE {_quote(table_name)} ALTER COLUMN {_quote(modification.column_name)}"
        statements = []
        if old.data_type != new.data_type:
            statements.append(f"{prefix} TYPE {new.data_type};")
        if old.nullable != new.nullable:
            statements.append(f"{prefix} {'DROP' if new.nullable else 'SET'} NOT NULL;")
        if old.default != new.default:
            if new.default is None:
                statements.append(f"{prefix} DROP DEFAULT;")
            else:
                statements.append(f"{prefix} SET DEFAULT {new.default};")
        return statements

    def _create_index(self, table_name: str, index: Index) -> str:
        unique = "UNIQUE " if index.unique else ""
        columns = ", ".join(_quote(column) for column in index.columns)
        return (
            f"CREATE {unique}INDEX {_quote(index.name)} "
            f"ON {_quote(table_name)} ({columns});"
        )

    def _add_foreign_key(self, table_name: str, fk: ForeignKey) -> str:
        return (
            f"ALTER TABLE {_quote(table_name)} ADD CONSTRAINT {_quote(fk.name)} "
            f"FOREIGN KEY ({_quote(fk.column)}) "
            f"REFERENCES {_quote(fk.ref_table)} ({_quote(fk.ref_column)});"
        )

    def _drop_foreign_key(self, table_name: str, fk: ForeignKey) -> str:
        return f"ALTER TABLE {_quote(table_name)} DROP CONSTRAINT {_quote(fk.name)};"