"""Comparing two snapshots and reporting the differences."""

from __future__ import annotations

import json

from termcolor import colored

from ..diff import NO_CHANGES_MESSAGE, SchemaDiff, diff_schemas
from ..snapshot import Snapshot, SnapshotManager
from .output import write_or_stdout
from .utils import CommandError, resolve_snapshot, resolve_snapshot_path


def render_diff(diff: SchemaDiff, format: str) -> str:
    """Render a diff as pretty JSON or as a text summary."""
    if format.lower() == "json":
        return json.dumps(diff.to_dict(), indent=2, ensure_ascii=False)

    text = "\n" + colored("=== Schema Differences ===", attrs=["bold"]) + "\n"
    if diff.has_changes():
        text += diff.summary() + "\n"
    else:
        text += colored(NO_CHANGES_MESSAGE, "green") + "\n"
    return text


def _load(manager: SnapshotManager, snapshot_id: str, directory: str, context: str) -> Snapshot:
    try:
        return resolve_snapshot(manager, snapshot_id, directory)
    except CommandError as error:
        raise CommandError(f"{context}\n{error}") from error


def execute(
    old_path: str,
    new_path: str,
    snapshot_dir: str,
    format: str,
    output_file: str | None,
    yes: bool,
    no_create_dir: bool,
) -> None:
    """Compare two snapshots and output the differences."""
    print(colored("Comparing snapshots...", "cyan"))

    manager = SnapshotManager(snapshot_dir)
    resolved_old = resolve_snapshot_path(manager, old_path, snapshot_dir)
    resolved_new = resolve_snapshot_path(manager, new_path, snapshot_dir)

    old_snapshot = _load(
        manager, old_path, snapshot_dir, f"Failed to load old snapshot: {resolved_old}"
    )
    new_snapshot = _load(
        manager, new_path, snapshot_dir, f"Failed to load new snapshot: {resolved_new}"
    )

    print(f"Old snapshot: {resolved_old} ({old_snapshot.database_type})")
    print(f"New snapshot: {resolved_new} ({new_snapshot.database_type})")

    diff = diff_schemas(old_snapshot.schema, new_snapshot.schema)
    write_or_stdout(render_diff(diff, format), output_file, yes, no_create_dir, "Diff output")