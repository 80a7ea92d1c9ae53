"""Showing the full contents of one snapshot."""

from __future__ import annotations

from ..snapshot import Snapshot, SnapshotManager
from .output import write_or_stdout
from .utils import resolve_snapshot

_DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def render_snapshot(snapshot: Snapshot) -> str:
    """Render the snapshot's metadata and every table in detail."""
    tables = snapshot.schema.tables
    parts = [
        "=== Snapshot Details ===\n\n",
        f"Database Type: {snapshot.database_type}\n",
        f"Created: {snapshot.timestamp.strftime(_DISPLAY_TIME_FORMAT)}\n",
        f"Tables: {len(tables)}\n\n",
        "=== Tables ===\n",
    ]

    for table in tables:
        parts.append(f"\n  {table.name}\n")
        parts.append(f"    Columns: {len(table.columns)}\n")
        for column in table.columns:
            nullable = "NULL" if column.nullable else "NOT NULL"
            default = f" DEFAULT {column.default}" if column.default is not None else ""
            parts.append(f"      - {column.name} {column.data_type} {nullable}{default}\n")

        if table.indexes:
            parts.append(f"    Indexes: {len(table.indexes)}\n")
            for index in table.indexes:
                unique = "UNIQUE" if index.unique else ""
                parts.append(
                    f"      - {index.name} {unique} ({', '.join(index.columns)})\n"
                )

        if table.foreign_keys:
            parts.append(f"    Foreign Keys: {len(table.foreign_keys)}\n")
            for fk in table.foreign_keys:
                parts.append(
                    f"      - {fk.name} ({fk.column} -> {fk.ref_table}.{fk.ref_column})\n"
                )

    return "".join(parts)


def execute(
    snapshot_id: str,
    directory: str,
    output_file: str | None,
    yes: bool,
    no_create_dir: bool,
) -> None:
    """Output the details of one snapshot."""
    manager = SnapshotManager(directory)
    snapshot = resolve_snapshot(manager, snapshot_id, directory)
    write_or_stdout(render_snapshot(snapshot), output_file, yes, no_create_dir, "Snapshot detail")