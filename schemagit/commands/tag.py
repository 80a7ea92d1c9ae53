"""Naming snapshots with tags stored beside them."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from termcolor import colored

from ..snapshot import SnapshotError, SnapshotManager
from .utils import CommandError, resolve_snapshot_filename

TAGS_FILENAME = "tags.json"


@dataclass
class TagStorage:
    """Mapping from tag names to snapshot file names."""

    tags: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def load(path: str | Path) -> TagStorage:
        """Read tags from path; a missing file gives an empty storage."""
        path = Path(path)
        if not path.exists():
            return TagStorage()
        data = json.loads(path.read_text(encoding="utf-8"))
        tags = data.get("tags") if isinstance(data, dict) else None
        if not isinstance(tags, dict) or not all(
            isinstance(key, str) and isinstance(value, str) for key, value in tags.items()
        ):
            raise ValueError('invalid tags file: expected {"tags": {name: snapshot}}')
        return TagStorage(dict(tags))

    def save(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps({"tags": self.tags}, indent=2), encoding="utf-8")


def execute(snapshot_id: str, tag_name: str, directory: str) -> None:
    """Point tag_name at the given snapshot, replacing any earlier target."""
    manager = SnapshotManager(directory)
    tags_file = Path(directory) / TAGS_FILENAME

    try:
        storage = TagStorage.load(tags_file)
    except (OSError, ValueError) as error:
        raise CommandError(f"Failed to load tags: {error}") from error

    snapshot_filename = resolve_snapshot_filename(manager, snapshot_id, directory)

    try:
        manager.load(snapshot_filename)
    except (SnapshotError, OSError, ValueError) as error:
        raise CommandError(f"Snapshot not found: {error}") from error

    existing = storage.tags.get(tag_name)
    if existing is not None:
        print(colored(f"Warning: Tag '{tag_name}' already points to '{existing}'", "yellow"))
        print(f"Updating to point to '{snapshot_filename}'")

    storage.tags[tag_name] = snapshot_filename

    try:
        storage.save(tags_file)
    except OSError as error:
        raise CommandError(f"Failed to save tags: {error}") from error

    print(colored(f"✓ Tagged '{snapshot_filename}' as '{tag_name}'", "green"))