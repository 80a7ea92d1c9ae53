"""Checking a snapshot's schema for common structural problems."""

from __future__ import annotations

from collections import Counter

from ..models import DatabaseSchema
from ..snapshot import SnapshotManager
from .output import write_or_stdout
from .utils import resolve_snapshot


def validate_schema(schema: DatabaseSchema) -> tuple[list[str], list[str]]:
    """Return (errors, warnings) found in the schema."""
    errors: list[str] = []
    warnings: list[str] = []

    for name, count in Counter(t.name for t in schema.tables).items():
        if count > 1:
            errors.append(f"Duplicate table name: {name} (appears {count} times)")

    tables_by_name = {}
    for table in schema.tables:
        tables_by_name.setdefault(table.name, table)

    for table in schema.tables:
        column_names = {column.name for column in table.columns}

        for name, count in Counter(c.name for c in table.columns).items():
            if count > 1:
                errors.append(
                    f"Table '{table.name}': Duplicate column name: {name} "
                    f"(appears {count} times)"
                )

        has_id_column = any(
            c.name.lower() == "id" and not c.nullable for c in table.columns
        )
        if not has_id_column:
            has_pk_candidate = any(not c.nullable for c in table.columns) and any(
                index.unique for index in table.indexes
            )
            if not has_pk_candidate:
                warnings.append(f"Table '{table.name}': No obvious primary key found")

        for fk in table.foreign_keys:
            ref_table = tables_by_name.get(fk.ref_table)
            if ref_table is None:
                errors.append(
                    f"Table '{table.name}': Foreign key '{fk.name}' references "
                    f"non-existent table '{fk.ref_table}'"
                )
                continue
            if fk.column not in column_names:
                errors.append(
                    f"Table '{table.name}': Foreign key '{fk.name}' references "
                    f"non-existent column '{fk.column}'"
                )
            if not any(c.name == fk.ref_column for c in ref_table.columns):
                errors.append(
                    f"Table '{table.name}': Foreign key '{fk.name}' references "
                    f"non-existent column '{fk.ref_table}.{fk.ref_column}'"
                )

        for index in table.indexes:
            for column in index.columns:
                if column not in column_names:
                    errors.append(
                        f"Table '{table.name}': Index '{index.name}' references "
                        f"non-existent column '{column}'"
                    )

        if not table.columns:
            warnings.append(f"Table '{table.name}': Has no columns")

    return errors, warnings


def render_report(errors: list[str], warnings: list[str]) -> str:
    """Format validation findings as a text report."""
    parts = ["=== Schema Validation ===\n\n"]

    if errors:
        parts.append(f"ERRORS ({len(errors)})\n")
        parts.extend(f"  - {error}\n" for error in errors)
        parts.append("\n")
    elif not warnings:
        parts.append("Schema validation passed!\n")
        parts.append("No errors or warnings found.\n")

    if warnings:
        parts.append(f"WARNINGS ({len(warnings)})\n")
        parts.extend(f"  - {warning}\n" for warning in warnings)
        parts.append("\n")

    if errors:
        parts.append("Schema validation failed with errors.\n")
    elif warnings:
        parts.append("Schema validation passed with warnings.\n")

    return "".join(parts)


def execute(
    snapshot_id: str,
    directory: str,
    output_file: str | None,
    yes: bool,
    no_create_dir: bool,
) -> None:
    """Validate a snapshot and output the report."""
    manager = SnapshotManager(directory)
    snapshot = resolve_snapshot(manager, snapshot_id, directory)
    errors, warnings = validate_schema(snapshot.schema)
    write_or_stdout(
        render_report(errors, warnings), output_file, yes, no_create_dir, "Validation report"
    )