import json

import pytest

from schemagit.commands.utils import CommandError
from schemagit.commands.validate import execute, render_report, validate_schema
from schemagit.models import Column, DatabaseSchema, ForeignKey, Index, Table
from schemagit.snapshot import Snapshot


def _users():
    return Table("users", [Column("id", "INTEGER", False), Column("email", "TEXT", True)])


def _write_snapshot(directory, schema):
    snapshot = Snapshot.create("postgres", "app", schema)
    (directory / "2024_01_02_030405.snapshot.json").write_text(
        json.dumps(snapshot.to_dict()), encoding="utf-8"
    )


def test_clean_schema_has_no_findings():
    errors, warnings = validate_schema(DatabaseSchema([_users()]))
    assert errors == []
    assert warnings == []


def test_duplicate_table_names():
    errors, _ = validate_schema(DatabaseSchema([_users(), _users()]))
    assert len(errors) == 1
    assert "Duplicate table name: users" in errors[0]
    assert "2 times" in errors[0]


def test_duplicate_column_names():
    table = Table("t", [Column("id", "INT", False), Column("id", "INT", False)])
    errors, _ = validate_schema(DatabaseSchema([table]))
    assert len(errors) == 1
    assert "Duplicate column name: id" in errors[0]


def test_missing_primary_key_warning():
    table = Table("logs", [Column("message", "TEXT", True)])
    errors, warnings = validate_schema(DatabaseSchema([table]))
    assert errors == []
    assert len(warnings) == 1
    assert "logs" in warnings[0] and "No obvious primary key found" in warnings[0]


def test_unique_index_with_not_null_column_counts_as_key():
    table = Table(
        "codes",
        [Column("code", "TEXT", False)],
        indexes=[Index("idx_code", ["code"], True)],
    )
    assert validate_schema(DatabaseSchema([table])) == ([], [])


def test_nullable_id_is_not_a_key():
    table = Table("t", [Column("ID", "INT", True)])
    _, warnings = validate_schema(DatabaseSchema([table]))
    assert any("No obvious primary key found" in w for w in warnings)


def test_foreign_key_to_missing_table():
    table = Table(
        "orders",
        [Column("id", "INT", False), Column("user_id", "INT", False)],
        foreign_keys=[ForeignKey("fk_user", "user_id", "ghosts", "id")],
    )
    errors, _ = validate_schema(DatabaseSchema([table]))
    assert len(errors) == 1
    assert "non-existent table" in errors[0] and "ghosts" in errors[0]


def test_foreign_key_missing_columns():
    table = Table(
        "orders",
        [Column("id", "INT", False)],
        foreign_keys=[ForeignKey("fk_user", "user_id", "users", "uuid")],
    )
    errors, _ = validate_schema(DatabaseSchema([_users(), table]))
    assert len(errors) == 2
    assert "non-existent column 'user_id'" in errors[0]
    assert "non-existent column 'users.uuid'" in errors[1]


def test_index_on_missing_column():
    table = _users()
    table.indexes.append(Index("idx_name", ["name"], False))
    errors, _ = validate_schema(DatabaseSchema([table]))
    assert len(errors) == 1
    assert "Index 'idx_name'" in errors[0] and "'name'" in errors[0]


def test_table_without_columns_warns_twice():
    _, warnings = validate_schema(DatabaseSchema([Table("empty")]))
    assert len(warnings) == 2
    assert any("Has no columns" in w for w in warnings)


def test_report_passed():
    report = render_report([], [])
    assert report.startswith("=== Schema Validation ===\n\n")
    assert "Schema validation passed!" in report
    assert "WARNINGS" not in report


def test_report_with_errors_and_warnings():
    report = render_report(["bad thing"], ["odd thing"])
    assert "ERRORS (1)\n  - bad thing\n" in report
    assert "WARNINGS (1)\n  - odd thing\n" in report
    assert report.endswith("Schema validation failed with errors.\n")


def test_report_with_only_warnings():
    report = render_report([], ["odd thing"])
    assert "ERRORS" not in report
    assert "passed!" not in report
    assert report.endswith("Schema validation passed with warnings.\n")


def test_execute_writes_report(tmp_path):
    snaps = tmp_path / "snaps"
    snaps.mkdir()
    _write_snapshot(snaps, DatabaseSchema([_users()]))
    target = tmp_path / "report.txt"
    execute("latest", str(snaps), str(target), False, False)
    assert "Schema validation passed!" in target.read_text(encoding="utf-8")


def test_execute_prints_errors(tmp_path, capsys):
    table = Table(
        "orders",
        [Column("id", "INT", False), Column("user_id", "INT", False)],
        foreign_keys=[ForeignKey("fk_user", "user_id", "ghosts", "id")],
    )
    _write_snapshot(tmp_path, DatabaseSchema([table]))
    execute("20240102030405", str(tmp_path), None, False, False)
    assert "Schema validation failed with errors." in capsys.readouterr().out


def test_execute_without_snapshots(tmp_path):
    with pytest.raises(CommandError, match="No latest snapshot"):
        execute("latest", str(tmp_path), None, False, False)