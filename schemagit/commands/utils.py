"""Helpers shared by the commands: driver detection, snapshot lookup, output paths."""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path

from ..snapshot import Snapshot, SnapshotError, SnapshotManager

SNAPSHOT_SUFFIX = ".snapshot.json"
LATEST_SNAPSHOT_KEY = "latest"
PREVIOUS_SNAPSHOT_KEY = "previous"
AUTO_DETECT_DRIVER_ERROR = (
    "Could not auto-detect database driver from connection string. "
    "Please specify --driver explicitly."
)
OUTPUT_DIRECTORY_MISSING_ERROR = "Output directory does not exist"
OPERATION_CANCELLED_MESSAGE = "Operation cancelled. Output directory was not created."

_DRIVER_SCHEMES = (
    (("postgresql://", "postgres://"), "postgres"),
    (("mysql://",), "mysql"),
    (("sqlite://", "file:"), "sqlite"),
    (("mssql://", "sqlserver://"), "mssql"),
)

_COMPACT_TIMESTAMP = re.compile(r"[0-9]{14}")


class CommandError(Exception):
    """A command could not complete; the message is meant for the user."""


def detect_driver(connection_string: str) -> str | None:
    """Return the driver implied by the connection string's scheme, if any."""
    lower = connection_string.lower()
    for prefixes, driver in _DRIVER_SCHEMES:
        if lower.startswith(prefixes):
            return driver
    return None


def resolve_driver(driver: str | None, connection: str) -> str:
    """Return the explicit driver, or detect it from the connection string."""
    if driver is not None:
        return driver
    detected = detect_driver(connection)
    if detected is None:
        raise CommandError(AUTO_DETECT_DRIVER_ERROR)
    return detected


def resolve_snapshot(manager: SnapshotManager, snapshot_id: str, directory: str) -> Snapshot:
    """Load the snapshot named by an ID, file name, keyword or path."""
    resolved = _resolve_target(manager, snapshot_id, directory)
    try:
        if _is_path_reference(snapshot_id):
            return SnapshotManager.load_from_path(resolved)
        return manager.load(resolved)
    except (SnapshotError, OSError) as error:
        raise CommandError(f"Invalid snapshot file:\n{resolved}\n{error}") from error


def resolve_snapshot_filename(
    manager: SnapshotManager, snapshot_id: str, directory: str
) -> str:
    """Return the bare file name of the snapshot a reference points to."""
    resolved = _resolve_target(manager, snapshot_id, directory)
    if not _is_path_reference(snapshot_id):
        return resolved
    name = Path(resolved).name
    if not name or name == "..":
        raise CommandError(f"Failed to resolve snapshot filename from path: {resolved}")
    return name


def resolve_snapshot_path(manager: SnapshotManager, snapshot_id: str, directory: str) -> str:
    """Return the file name or path a snapshot reference resolves to."""
    return _resolve_target(manager, snapshot_id, directory)


def prepare_output_path(output_path: str, yes: bool, no_create_dir: bool) -> None:
    """Make sure the directory for an output file exists, creating it if allowed."""
    if yes and no_create_dir:
        raise CommandError("--yes and --no-create-dir cannot be used together")

    parent = os.path.dirname(output_path)
    if not parent:
        return

    parent_path = Path(parent)
    if parent_path.exists():
        if parent_path.is_dir():
            return
        raise CommandError(f"Output path parent exists but is not a directory: {parent}")

    if yes:
        parent_path.mkdir(parents=True, exist_ok=True)
        return

    if no_create_dir or not _is_interactive_terminal():
        raise CommandError(f"{OUTPUT_DIRECTORY_MISSING_ERROR}: {parent}")

    if _prompt_create_directory(parent):
        parent_path.mkdir(parents=True, exist_ok=True)
        return

    raise CommandError(OPERATION_CANCELLED_MESSAGE)


def _is_interactive_terminal() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def _prompt_create_directory(path: str) -> bool:
    out = sys.stdout
    out.write(f'Output directory "{path}" does not exist.\n')
    while True:
        out.write("Do you want to create it? (y/n): ")
        out.flush()
        line = sys.stdin.readline()
        if not line:
            return False
        answer = line.strip().lower()
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        out.write("Please answer with 'y'/'yes' or 'n'/'no'.\n")


def _build_snapshot_filename(snapshot_id: str) -> str:
    if snapshot_id.endswith(SNAPSHOT_SUFFIX):
        return snapshot_id
    if _COMPACT_TIMESTAMP.fullmatch(snapshot_id):
        return (
            f"{snapshot_id[0:4]}_{snapshot_id[4:6]}_{snapshot_id[6:8]}_"
            f"{snapshot_id[8:14]}{SNAPSHOT_SUFFIX}"
        )
    return f"{snapshot_id}{SNAPSHOT_SUFFIX}"


def _resolve_target(manager: SnapshotManager, snapshot_id: str, directory: str) -> str:
    if snapshot_id == LATEST_SNAPSHOT_KEY:
        return _resolve_relative(manager, directory, 1)
    if snapshot_id == PREVIOUS_SNAPSHOT_KEY:
        return _resolve_relative(manager, directory, 2)
    if _is_path_reference(snapshot_id):
        return snapshot_id
    return _build_snapshot_filename(snapshot_id)


def _resolve_relative(manager: SnapshotManager, directory: str, from_end: int) -> str:
    try:
        snapshots = manager.list()
    except OSError as error:
        raise CommandError(f"Failed to list snapshots: {error}") from error
    if len(snapshots) < from_end:
        label = "latest" if from_end == 1 else "previous"
        raise CommandError(f"No {label} snapshot found in {directory}")
    return snapshots[-from_end]


def _is_path_reference(value: str) -> bool:
    return Path(value).is_absolute() or "/" in value or "\\" in value