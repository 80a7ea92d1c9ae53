"""Listing the snapshots stored in a directory."""

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


def _strip_suffixes(filename: str) -> str:
    while filename.endswith(SNAPSHOT_EXTENSION):
        filename = filename[: -len(SNAPSHOT_EXTENSION)]
    return filename


def render_list(manager: SnapshotManager, directory: str) -> str:
    """Render a numbered list of snapshots with their metadata."""
    snapshots = _list(manager)
    if not snapshots:
        return f"No snapshots found in {directory}\n"

    parts = [f"Snapshots in {directory}:\n\n"]
    for number, filename in enumerate(snapshots, start=1):
        try:
            snapshot = manager.load(filename)
        except (SnapshotError, OSError, ValueError):
            parts.append(f"{number}. {filename} (failed to load)\n")
            continue
        parts.append(
            f"{number}. {filename} - {snapshot.database_type} "
            f"({len(snapshot.schema.tables)} tables)\n"
        )
        parts.append(f"   Created: {snapshot.timestamp.strftime(_DISPLAY_TIME_FORMAT)}\n")

    parts.append(f"\nTotal: {len(snapshots)} snapshot(s)\n")
    return "".join(parts)


def render_snapshot_ids(manager: SnapshotManager, directory: str) -> str:
    """Render the snapshot IDs in timestamp order."""
    snapshots = _list(manager)
    if not snapshots:
        return f"No snapshots found in {directory}\n"
    return "Available snapshots:\n\n" + "".join(
        _strip_suffixes(filename) + "\n" for filename in snapshots
    )


def execute_list(
    directory: str, output_file: str | None, yes: bool, no_create_dir: bool
) -> None:
    """Output the detailed snapshot list."""
    content = render_list(SnapshotManager(directory), directory)
    write_or_stdout(content, output_file, yes, no_create_dir, "List output")


def execute_snapshots(
    directory: str, output_file: str | None, yes: bool, no_create_dir: bool
) -> None:
    """Output the snapshot IDs."""
    content = render_snapshot_ids(SnapshotManager(directory), directory)
    write_or_stdout(content, output_file, yes, no_create_dir, "Snapshot list")