"""Schema snapshots and their storage on the filesystem."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Mapping

from .models import DatabaseSchema

SNAPSHOT_EXTENSION = ".snapshot.json"
TIMESTAMP_FORMAT = "%Y_%m_%d_%H%M%S"
DEFAULT_DATABASE_NAME = "unknown"
DEFAULT_SNAPSHOT_VERSION = "1"

_TIMESTAMP_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):?(\d{2}))$"
)


class SnapshotError(Exception):
    """Base error for snapshot operations."""


class SnapshotNotFoundError(SnapshotError):
    """The requested snapshot file does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Snapshot not found: {name}")
        self.name = name


class InvalidSnapshotError(SnapshotError):
    """The snapshot file content is malformed or incomplete."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid snapshot format: {detail}")
        self.detail = detail


def _format_timestamp(moment: datetime) -> str:
    moment = moment.astimezone(timezone.utc)
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if moment.microsecond:
        text += f".{moment.microsecond:06d}"
    return text + "Z"


def _parse_timestamp(text: str) -> datetime:
    match = _TIMESTAMP_RE.match(text)
    if match is None:
        raise InvalidSnapshotError(f"invalid timestamp: {text!r}")
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction = match.group(7) or ""
    microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0
    if match.group(8):
        tz = timezone.utc
    else:
        offset = timedelta(hours=int(match.group(10)), minutes=int(match.group(11)))
        tz = timezone(-offset if match.group(9) == "-" else offset)
    try:
        moment = datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)
    except ValueError as error:
        raise InvalidSnapshotError(f"invalid timestamp: {text!r} ({error})") from None
    return moment.astimezone(timezone.utc)


def _required(data: Mapping[str, Any], key: str, kind: type) -> Any:
    if key not in data:
        raise InvalidSnapshotError(f"missing field `{key}`")
    value = data[key]
    if not isinstance(value, kind):
        raise InvalidSnapshotError(
            f"field `{key}` must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _optional_str(data: Mapping[str, Any], key: str, default: str) -> str:
    if key not in data:
        return default
    value = data[key]
    if not isinstance(value, str):
        raise InvalidSnapshotError(
            f"field `{key}` must be str, got {type(value).__name__}"
        )
    return value


@dataclass
class Snapshot:
    """A schema snapshot with its metadata."""

    database_type: str
    database_name: str
    snapshot_version: str
    timestamp: datetime
    schema: DatabaseSchema

    @staticmethod
    def create(database_type: str, database_name: str, schema: DatabaseSchema) -> Snapshot:
        """Build a snapshot stamped with the current UTC time."""
        return Snapshot(
            database_type=database_type,
            database_name=database_name,
            snapshot_version=DEFAULT_SNAPSHOT_VERSION,
            timestamp=datetime.now(timezone.utc),
            schema=schema,
        )

    def validate(self) -> None:
        """Raise InvalidSnapshotError if a required field is empty."""
        if not self.database_type.strip():
            raise InvalidSnapshotError('missing or empty "database_type" field')
        if not self.database_name.strip():
            raise InvalidSnapshotError('missing or empty "database_name" field')
        if not self.snapshot_version.strip():
            raise InvalidSnapshotError('missing or empty "snapshot_version" field')

        for table in self.schema.tables:
            if not table.name.strip():
                raise InvalidSnapshotError('table has missing or empty "name" field')

            for column in table.columns:
                if not column.name.strip():
                    raise InvalidSnapshotError(
                        f'table "{table.name}" has a column with missing or empty "name" field'
                    )
                if not column.data_type.strip():
                    raise InvalidSnapshotError(
                        f'table "{table.name}" column "{column.name}" has missing or '
                        f'empty "data_type" field'
                    )

            for index in table.indexes:
                if not index.name.strip():
                    raise InvalidSnapshotError(
                        f'table "{table.name}" has an index with missing or empty "name" field'
                    )

            for fk in table.foreign_keys:
                if not fk.name.strip():
                    raise InvalidSnapshotError(
                        f'table "{table.name}" has a foreign key with missing or empty '
                        f'"name" field'
                    )
                if not (fk.column.strip() and fk.ref_table.strip() and fk.ref_column.strip()):
                    raise InvalidSnapshotError(
                        f'table "{table.name}" foreign key "{fk.name}" has missing '
                        f"required reference fields"
                    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "database_type": self.database_type,
            "database_name": self.database_name,
            "snapshot_version": self.snapshot_version,
            "timestamp": _format_timestamp(self.timestamp),
            "schema": self.schema.to_dict(),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Snapshot:
        """Parse a snapshot; raises InvalidSnapshotError on malformed data."""
        if not isinstance(data, Mapping):
            raise InvalidSnapshotError(
                f"expected a JSON object, got {type(data).__name__}"
            )
        database_type = _required(data, "database_type", str)
        database_name = _optional_str(data, "database_name", DEFAULT_DATABASE_NAME)
        snapshot_version = _optional_str(
            data, "snapshot_version", DEFAULT_SNAPSHOT_VERSION
        )
        timestamp = _parse_timestamp(_required(data, "timestamp", str))
        schema_data = _required(data, "schema", Mapping)
        try:
            schema = DatabaseSchema.from_dict(schema_data)
        except ValueError as error:
            raise InvalidSnapshotError(str(error)) from None
        return Snapshot(
            database_type=database_type,
            database_name=database_name,
            snapshot_version=snapshot_version,
            timestamp=timestamp,
            schema=schema,
        )


class SnapshotManager:
    """Stores and retrieves snapshots in one directory."""

    def __init__(self, snapshot_dir: str | Path) -> None:
        self.snapshot_dir = Path(snapshot_dir)

    def _path(self, filename: str) -> Path:
        return self.snapshot_dir / filename

    def save(self, snapshot: Snapshot) -> str:
        """Write the snapshot under a timestamped name and return that name."""
        self.snapshot_dir.mkdir(parents=True, exist_ok=True)
        filename = datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT) + SNAPSHOT_EXTENSION
        text = json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False)
        self._path(filename).write_text(text, encoding="utf-8")
        return filename

    def load(self, filename: str) -> Snapshot:
        """Load a snapshot by file name from the snapshot directory."""
        return self._load(self._path(filename), filename)

    @staticmethod
    def load_from_path(path: str | Path) -> Snapshot:
        """Load a snapshot from an arbitrary path."""
        path = Path(path)
        return SnapshotManager._load(path, str(path))

    def list(self) -> list[str]:
        """Return snapshot file names sorted by name, which is by time."""
        if not self.snapshot_dir.exists():
            return []
        return sorted(
            entry.name
            for entry in self.snapshot_dir.iterdir()
            if entry.is_file() and entry.name.endswith(SNAPSHOT_EXTENSION)
        )

    def latest(self) -> Snapshot | None:
        """Return the most recent snapshot, or None if there is none."""
        names = self.list()
        return self.load(names[-1]) if names else None

    def delete(self, filename: str) -> None:
        path = self._path(filename)
        if not path.exists():
            raise SnapshotNotFoundError(filename)
        path.unlink()

    @staticmethod
    def _load(path: Path, name: str) -> Snapshot:
        if not path.exists():
            raise SnapshotNotFoundError(name)
        text = path.read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as error:
            raise InvalidSnapshotError(str(error)) from None
        snapshot = Snapshot.from_dict(data)
        snapshot.validate()
        return snapshot