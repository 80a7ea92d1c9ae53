"""Showing the snapshot history as a timeline table."""

from __future__ import annotations

from ..snapshot import SNAPSHOT_EXTENSION, SnapshotError, SnapshotManager
from .output import write_or_stdout
from .utils import CommandError

_DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _list(manager: SnapshotManager) -> list[str]:
    try:
        return manager.list()
    except OSError as error:
        raise CommandError(f"Failed to list snapshots: {error}") from error


def render_history(manager: SnapshotManager, directory: str) -> str:
    """Render one row per snapshot: ID, creation time, table count and database."""
    snapshots = _list(manager)
    if not snapshots:
        return f"No snapshots found in {directory}\n"

    parts = [
        "Snapshot History\n\n",
        f"{'ID':<25} {'CREATED':<20} {'TABLES':<10} DATABASE\n",
        "-" * 80 + "\n",
    ]
    for filename in snapshots:
        snapshot_id = filename.removesuffix(SNAPSHOT_EXTENSION).replace("_", "")
        try:
            snapshot = manager.load(filename)
        except (SnapshotError, OSError, ValueError):
            parts.append(f"{snapshot_id:<25} ERROR (failed to load)\n")
            continue
        created = snapshot.timestamp.strftime(_DISPLAY_TIME_FORMAT)
        parts.append(
            f"{snapshot_id:<25} {created:<20} {len(snapshot.schema.tables):<10} "
            f"{snapshot.database_type}\n"
        )

    parts.append(f"\nTotal: {len(snapshots)} snapshot(s)\n")
    return "".join(parts)


def execute(
    directory: str, output_file: str | None, yes: bool, no_create_dir: bool
) -> None:
    """Output the snapshot history of a directory."""
    content = render_history(SnapshotManager(directory), directory)
    write_or_stdout(content, output_file, yes, no_create_dir, "History")