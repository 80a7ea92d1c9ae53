"""SQL Server (MSSQL) migration generator."""

from __future__ import annotations

from ..diff import ColumnModification, SchemaDiff, TableDiff
from ..models import Column, ForeignKey, Index, Table
from .base import MigrationGenerator

UNIQUE_PREFIX = "UNIQUE "
NULL_LITERAL = "NULL"
NOT_NULL_LITERAL = "NOT NULL"


def _quote(name: str) -> str:
    return "[" + name.replace("]", "]]") + "]"


def _nullability(nullable: bool) -> str:
    return NULL_LITERAL if nullable else NOT_NULL_LITERAL


def _escape_string(text: str) -> str:
    return text.replace("'", "''")


class MssqlMigrationGenerator(MigrationGenerator):
    """Generates T-SQL DDL from schema diffs."""

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

    def generate_drop_index(self, table_name: str, index: Index) -> str:
        return f"DROP INDEX {_quote(index.name)} ON {_quote(table_name)};"

    def _table_modifications(self, table_diff: TableDiff) -> list[str]:
        name = table_diff.table_name
        statements: list[str] = []
        statements += [
            f"ALTER TABLE {_quote(name)} DROP CONSTRAINT {_quote(fk.name)};"
            for fk in table_diff.foreign_keys_removed
        ]
        statements += [
            self.generate_drop_index(name, index) for index in table_diff.indexes_removed
        ]
        statements += [
            f"ALTER TABLE {_quote(name)} DROP COLUMN {_quote(column.name)};"
            for column in table_diff.columns_removed
        ]
        statements += [self._add_column(name, column) for column in table_diff.columns_added]
        for modification in table_diff.columns_modified:
            statements.extend(self._modify_column(name, modification))
        statements += [self._create_index(name, index) for index in table_diff.indexes_added]
        statements += [self._add_foreign_key(name, fk) for fk in table_diff.foreign_keys_added]
        return statements

    def _column_definition(self, column: Column) -> str:
        # Defaults are constraints in SQL Server; they are emitted separately.
        return f"{_quote(column.name)} {column.data_type} {_nullability(column.nullable)}"

    def _add_column(self, table_name: str, column: Column) -> str:
        statements = [
            f"ALTER TABLE {_quote(table_name)} ADD {self._column_definition(column)};"
        ]
        if column.default is not None:
            statements.append(self._set_default(table_name, column.name, column.default))
        return "\n".join(statements)

    def _modify_column(self, table_name: str, modification: ColumnModification) -> list[str]:
        old, new = modification.old_column, modification.new_column
        statements = []
        if old.data_type != new.data_type or old.nullable != new.nullable:
            statements.append(
                f"ALTER TABLE {_quote(table_name)} ALTER COLUMN "
                f"{_quote(modification.column_name)} {new.data_type} "
                f"{_nullability(new.nullable)};"
            )
        if old.default != new.default:
            if new.default is None:
                statements.append(self._drop_default(table_name, modification.column_name))
            else:
                statements.append(
                    self._set_default(table_name, modification.column_name, new.default)
                )
        return statements

    def _create_index(self, table_name: str, index: Index) -> str:
        unique = UNIQUE_PREFIX if index.unique else ""
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

    def _drop_default(self, table_name: str, column_name: str) -> str:
        table_literal = _escape_string(table_name)
        column_literal = _escape_string(column_name)
        table_ident = _quote(table_name)
        return "\n".join(
            [
                "DECLARE @df sysname;",
                "SELECT @df = dc.name",
                "FROM sys.default_constraints dc",
                "JOIN sys.columns c ON c.default_object_id = dc.object_id",
                "JOIN sys.tables t ON t.object_id = c.object_id",
                "JOIN sys.schemas s ON s.schema_id = t.schema_id",
                f"WHERE s.name = 'dbo' AND t.name = N'{table_literal}' "
                f"AND c.name = N'{column_literal}';",
                f"IF @df IS NOT NULL EXEC(N'ALTER TABLE {table_ident} "
                f"DROP CONSTRAINT [' + @df + ']');",
            ]
        )

    def _set_default(self, table_name: str, column_name: str, default: str) -> str:
        drop = self._drop_default(table_name, column_name)
        return (
            f"{drop}\nALTER TABLE {_quote(table_name)} "
            f"ADD DEFAULT {default} FOR {_quote(column_name)};"
        )