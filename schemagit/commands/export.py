"""Exporting a snapshot as SQL, JSON or a YAML-like listing."""

from __future__ import annotations

import json
from collections.abc import Iterable

from ..models import Column, Table
from ..snapshot import Snapshot, SnapshotManager
from .output import write_or_stdout
from .utils import CommandError, resolve_snapshot

UNIQUE_PREFIX = "UNIQUE "
_DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def quote_identifier(db_type: str, name: str) -> str:
    """Quote an identifier in the style of the given database."""
    if db_type.lower() in ("mssql", "sqlserver"):
        return "[" + name.replace("]", "]]") + "]"
    return '"' + name.replace('"', '""') + '"'


def column_definition(column: Column, db_type: str) -> str:
    """Column definition as used inside CREATE TABLE."""
    parts = [quote_identifier(db_type, column.name), column.data_type]
    if not column.nullable:
        parts.append("NOT NULL")
    if column.default is not None:
        parts.append(f"DEFAULT {column.default}")
    return " ".join(parts)


def export_table_sql(table: Table, db_type: str) -> str:
    """CREATE TABLE with the table's indexes and foreign keys."""
    quoted_table = quote_identifier(db_type, table.name)
    definitions = ",\n  ".join(column_definition(c, db_type) for c in table.columns)
    lines = [f"CREATE TABLE {quoted_table} (\n  {definitions}\n);\n"]

    for index in table.indexes:
        unique = UNIQUE_PREFIX if index.unique else ""
        columns = ", ".join(quote_identifier(db_type, c) for c in index.columns)
        lines.append(
            f"CREATE {unique}INDEX {quote_identifier(db_type, index.name)} "
            f"ON {quoted_table} ({columns});\n"
        )

    for fk in table.foreign_keys:
        lines.append(
            f"ALTER TABLE {quoted_table} ADD CONSTRAINT "
            f"{quote_identifier(db_type, fk.name)} FOREIGN KEY "
            f"({quote_identifier(db_type, fk.column)}) REFERENCES "
            f"{quote_identifier(db_type, fk.ref_table)} "
            f"({quote_identifier(db_type, fk.ref_column)});\n"
        )

    return "".join(lines)


def export_sql(tables: Iterable[Table], db_type: str) -> str:
    """Whole-schema SQL export with a short header."""
    header = f"-- Schema export for {db_type}\n-- Generated by schemagit\n\n"
    body = "\n".join(export_table_sql(table, db_type) + "\n" for table in tables)
    return header + body


def export_json(snapshot: Snapshot) -> str:
    """The snapshot as pretty-printed JSON."""
    return json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False)


def export_yaml(snapshot: Snapshot) -> str:
    """A simple YAML-style listing of the snapshot."""
    lines = [
        f"database_type: {snapshot.database_type}",
        f"timestamp: {snapshot.timestamp.strftime(_DISPLAY_TIME_FORMAT)}",
        "schema:",
        "  tables:",
    ]
    for table in snapshot.schema.tables:
        lines.append(f"    - name: {table.name}")
        lines.append("      columns:")
        for column in table.columns:
            lines.append(f"        - name: {column.name}")
            lines.append(f"          data_type: {column.data_type}")
            lines.append(f"          nullable: {str(column.nullable).lower()}")
            if column.default is not None:
                lines.append(f"          default: {column.default}")

        if table.indexes:
            lines.append("      indexes:")
            for index in table.indexes:
                lines.append(f"        - name: {index.name}")
                lines.append(f"          unique: {str(index.unique).lower()}")
                lines.append("          columns:")
                lines.extend(f"            - {column}" for column in index.columns)

        if table.foreign_keys:
            lines.append("      foreign_keys:")
            for fk in table.foreign_keys:
                lines.append(f"        - name: {fk.name}")
                lines.append(f"          column: {fk.column}")
                lines.append(f"          ref_table: {fk.ref_table}")
                lines.append(f"          ref_column: {fk.ref_column}")

    return "".join(line + "\n" for line in lines)


def execute(
    snapshot_id: str,
    directory: str,
    format: str,
    output_file: str | None,
    yes: bool,
    no_create_dir: bool,
) -> None:
    """Export a snapshot in the requested format."""
    manager = SnapshotManager(directory)
    snapshot = resolve_snapshot(manager, snapshot_id, directory)

    kind = format.lower()
    if kind == "sql":
        rendered = export_sql(snapshot.schema.tables, snapshot.database_type)
    elif kind == "json":
        rendered = export_json(snapshot)
    elif kind == "yaml":
        rendered = export_yaml(snapshot)
    else:
        raise CommandError(f"Unknown format: {format}. Use sql, json, or yaml")

    write_or_stdout(rendered, output_file, yes, no_create_dir, "Export")