"""Schema model: tables, columns, indexes and foreign keys."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


def _field(data: Mapping[str, Any], key: str, kind: type, owner: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"{owner}: expected an object, got {type(data).__name__}")
    if key not in data:
        raise ValueError(f"{owner}: missing field \"{key}\"")
    value = data[key]
    if not isinstance(value, kind):
        raise ValueError(
            f"{owner}: field \"{key}\" must be {kind.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def _list_field(data: Mapping[str, Any], key: str, owner: str) -> list:
    return list(_field(data, key, list, owner))


@dataclass
class Column:
    """A database column with its properties."""

    name: str
    data_type: str
    nullable: bool
    default: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "data_type": self.data_type,
            "nullable": self.nullable,
            "default": self.default,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Column:
        default = data.get("default") if isinstance(data, Mapping) else None
        if default is not None and not isinstance(default, str):
            raise ValueError("Column: field \"default\" must be str or null")
        return Column(
            name=_field(data, "name", str, "Column"),
            data_type=_field(data, "data_type", str, "Column"),
            nullable=_field(data, "nullable", bool, "Column"),
            default=default,
        )


@dataclass
class ForeignKey:
    """A foreign key constraint."""

    name: str
    column: str
    ref_table: str
    ref_column: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "column": self.column,
            "ref_table": self.ref_table,
            "ref_column": self.ref_column,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> ForeignKey:
        return ForeignKey(
            name=_field(data, "name", str, "ForeignKey"),
            column=_field(data, "column", str, "ForeignKey"),
            ref_table=_field(data, "ref_table", str, "ForeignKey"),
            ref_column=_field(data, "ref_column", str, "ForeignKey"),
        )


@dataclass
class Index:
    """A database index."""

    name: str
    columns: list[str] = field(default_factory=list)
    unique: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": list(self.columns),
            "unique": self.unique,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Index:
        columns = _list_field(data, "columns", "Index")
        if not all(isinstance(column, str) for column in columns):
            raise ValueError("Index: field \"columns\" must hold strings")
        return Index(
            name=_field(data, "name", str, "Index"),
            columns=columns,
            unique=_field(data, "unique", bool, "Index"),
        )


@dataclass
class Table:
    """A database table with its structure."""

    name: str
    columns: list[Column] = field(default_factory=list)
    indexes: list[Index] = field(default_factory=list)
    foreign_keys: list[ForeignKey] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": [column.to_dict() for column in self.columns],
            "indexes": [index.to_dict() for index in self.indexes],
            "foreign_keys": [fk.to_dict() for fk in self.foreign_keys],
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Table:
        return Table(
            name=_field(data, "name", str, "Table"),
            columns=[
                Column.from_dict(item)
                for item in _list_field(data, "columns", "Table")
            ],
            indexes=[
                Index.from_dict(item)
                for item in _list_field(data, "indexes", "Table")
            ],
            foreign_keys=[
                ForeignKey.from_dict(item)
                for item in _list_field(data, "foreign_keys", "Table")
            ],
        )


@dataclass
class DatabaseSchema:
    """A complete database schema."""

    tables: list[Table] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"tables": [table.to_dict() for table in self.tables]}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> DatabaseSchema:
        return DatabaseSchema(
            tables=[
                Table.from_dict(item)
                for item in _list_field(data, "tables", "DatabaseSchema")
            ]
        )