"""Summary statistics for a snapshot's schema."""

from __future__ import annotations

from collections import Counter

from ..snapshot import Snapshot, SnapshotManager
from .output import write_or_stdout
from .utils import resolve_snapshot

_DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
_TOP_LIMIT = 10


def render_summary(snapshot: Snapshot) -> str:
    """Render totals, the widest tables and the most used column types."""
    tables = snapshot.schema.tables
    total_columns = sum(len(t.columns) for t in tables)
    total_indexes = sum(len(t.indexes) for t in tables)
    total_foreign_keys = sum(len(t.foreign_keys) for t in tables)

    parts = [
        "=== Schema Summary ===\n\n",
        f"Database: {snapshot.database_type}\n",
        f"Snapshot: {snapshot.timestamp.strftime(_DISPLAY_TIME_FORMAT)}\n",
        "\n",
        "Overview:\n",
        f"  Tables:       {len(tables)}\n",
        f"  Columns:      {total_columns}\n",
        f"  Indexes:      {total_indexes}\n",
        f"  Foreign Keys: {total_foreign_keys}\n\n",
    ]

    sizes = sorted(
        ((t.name, len(t.columns)) for t in tables), key=lambda item: item[1], reverse=True
    )
    parts.append("Top tables by column count:\n")
    parts.extend(
        f"  {rank}. {name}: {count}\n"
        for rank, (name, count) in enumerate(sizes[:_TOP_LIMIT], start=1)
    )
    parts.append("\n")

    type_counts = Counter(column.data_type for t in tables for column in t.columns)
    ranked_types = sorted(type_counts.items(), key=lambda item: item[1], reverse=True)
    parts.append("Column type distribution:\n")
    parts.extend(f"  {data_type}: {count}\n" for data_type, count in ranked_types[:_TOP_LIMIT])

    return "".join(parts)


def execute(
    snapshot_id: str,
    directory: str,
    output_file: str | None,
    yes: bool,
    no_create_dir: bool,
) -> None:
    """Output summary statistics for one snapshot."""
    manager = SnapshotManager(directory)
    snapshot = resolve_snapshot(manager, snapshot_id, directory)
    write_or_stdout(render_summary(snapshot), output_file, yes, no_create_dir, "Summary")