"""Structural comparison of two database schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, TypeVar

from .models import Column, DatabaseSchema, ForeignKey, Index, Table

NO_CHANGES_MESSAGE = "No changes detected"
TABLES_ADDED_LABEL = "Tables Added"
TABLES_REMOVED_LABEL = "Tables Removed"
TABLES_MODIFIED_LABEL = "Tables Modified"

_T = TypeVar("_T")


@dataclass
class ColumnModification:
    """A column whose definition changed between two schemas."""

    column_name: str
    old_column: Column
    new_column: Column

    def to_dict(self) -> dict[str, Any]:
        return {
            "column_name": self.column_name,
            "old_column": self.old_column.to_dict(),
            "new_column": self.new_column.to_dict(),
        }


@dataclass
class TableDiff:
    """Differences found in one table present in both schemas."""

    table_name: str
    columns_added: list[Column] = field(default_factory=list)
    columns_removed: list[Column] = field(default_factory=list)
    columns_modified: list[ColumnModification] = field(default_factory=list)
    indexes_added: list[Index] = field(default_factory=list)
    indexes_removed: list[Index] = field(default_factory=list)
    foreign_keys_added: list[ForeignKey] = field(default_factory=list)
    foreign_keys_removed: list[ForeignKey] = field(default_factory=list)

    def has_changes(self) -> bool:
        return any(
            (
                self.columns_added,
                self.columns_removed,
                self.columns_modified,
                self.indexes_added,
                self.indexes_removed,
                self.foreign_keys_added,
                self.foreign_keys_removed,
            )
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "table_name": self.table_name,
            "columns_added": [c.to_dict() for c in self.columns_added],
            "columns_removed": [c.to_dict() for c in self.columns_removed],
            "columns_modified": [m.to_dict() for m in self.columns_modified],
            "indexes_added": [i.to_dict() for i in self.indexes_added],
            "indexes_removed": [i.to_dict() for i in self.indexes_removed],
            "foreign_keys_added": [f.to_dict() for f in self.foreign_keys_added],
            "foreign_keys_removed": [
                f.to_dict() for f in self.foreign_keys_removed
            ],
        }

    def _summary_lines(self) -> list[str]:
        lines = [f"  ~ {self.table_name}"]
        lines += [f"      + Column: {c.name}" for c in self.columns_added]
        lines += [f"      - Column: {c.name}" for c in self.columns_removed]
        lines += [f"      ~ Column: {m.column_name}" for m in self.columns_modified]
        lines += [f"      + Index: {i.name}" for i in self.indexes_added]
        lines += [f"      - Index: {i.name}" for i in self.indexes_removed]
        lines += [f"      + Foreign Key: {f.name}" for f in self.foreign_keys_added]
        lines += [
            f"      - Foreign Key: {f.name}" for f in self.foreign_keys_removed
        ]
        return lines


@dataclass
class SchemaDiff:
    """Differences between two database schemas."""

    tables_added: list[Table] = field(default_factory=list)
    tables_removed: list[Table] = field(default_factory=list)
    tables_modified: list[TableDiff] = field(default_factory=list)

    def has_changes(self) -> bool:
        return bool(self.tables_added or self.tables_removed or self.tables_modified)

    def summary(self) -> str:
        """Return a human-readable summary of the changes."""
        lines: list[str] = []
        if self.tables_added:
            lines.append(f"{TABLES_ADDED_LABEL}: {len(self.tables_added)}")
            lines += [f"  + {t.name}" for t in self.tables_added]
        if self.tables_removed:
            lines.append(f"{TABLES_REMOVED_LABEL}: {len(self.tables_removed)}")
            lines += [f"  - {t.name}" for t in self.tables_removed]
        if self.tables_modified:
            lines.append(f"{TABLES_MODIFIED_LABEL}: {len(self.tables_modified)}")
            for table_diff in self.tables_modified:
                lines += table_diff._summary_lines()
        return "\n".join(lines) if lines else NO_CHANGES_MESSAGE

    def to_dict(self) -> dict[str, Any]:
        return {
            "tables_added": [t.to_dict() for t in self.tables_added],
            "tables_removed": [t.to_dict() for t in self.tables_removed],
            "tables_modified": [t.to_dict() for t in self.tables_modified],
        }


def _by_name(items: Iterable[_T], key: Callable[[_T], str]) -> dict[str, _T]:
    # Later entries with the same name replace earlier ones.
    return {key(item): item for item in items}


def _split(
    old: dict[str, _T], new: dict[str, _T]
) -> tuple[list[_T], list[_T], list[str]]:
    added = [new[name] for name in sorted(new.keys() - old.keys())]
    removed = [old[name] for name in sorted(old.keys() - new.keys())]
    common = sorted(old.keys() & new.keys())
    return added, removed, common


def _diff_columns(
    old_columns: list[Column], new_columns: list[Column]
) -> tuple[list[Column], list[Column], list[ColumnModification]]:
    old = _by_name(old_columns, lambda c: c.name)
    new = _by_name(new_columns, lambda c: c.name)
    added, removed, common = _split(old, new)
    modified = [
        ColumnModification(name, old[name], new[name])
        for name in common
        if old[name] != new[name]
    ]
    return added, removed, modified


def _diff_replaceable(
    old_items: list[_T], new_items: list[_T], key: Callable[[_T], str]
) -> tuple[list[_T], list[_T]]:
    """Diff named items that change by being dropped and recreated."""
    old = _by_name(old_items, key)
    new = _by_name(new_items, key)
    added, removed, common = _split(old, new)
    for name in common:
        if old[name] != new[name]:
            removed.append(old[name])
            added.append(new[name])
    added.sort(key=key)
    removed.sort(key=key)
    return added, removed


def _diff_tables(old_table: Table, new_table: Table) -> TableDiff:
    columns_added, columns_removed, columns_modified = _diff_columns(
        old_table.columns, new_table.columns
    )
    indexes_added, indexes_removed = _diff_replaceable(
        old_table.indexes, new_table.indexes, lambda i: i.name
    )
    fks_added, fks_removed = _diff_replaceable(
        old_table.foreign_keys, new_table.foreign_keys, lambda f: f.name
    )
    return TableDiff(
        table_name=old_table.name,
        columns_added=columns_added,
        columns_removed=columns_removed,
        columns_modified=columns_modified,
        indexes_added=indexes_added,
        indexes_removed=indexes_removed,
        foreign_keys_added=fks_added,
        foreign_keys_removed=fks_removed,
    )


def diff_schemas(old_schema: DatabaseSchema, new_schema: DatabaseSchema) -> SchemaDiff:
    """Compare two schemas; every list in the result is sorted by name."""
    old = _by_name(old_schema.tables, lambda t: t.name)
    new = _by_name(new_schema.tables, lambda t: t.name)
    added, removed, common = _split(old, new)
    modified = [
        table_diff
        for table_diff in (_diff_tables(old[name], new[name]) for name in common)
        if table_diff.has_changes()
    ]
    return SchemaDiff(
        tables_added=added, tables_removed=removed, tables_modified=modified
    )