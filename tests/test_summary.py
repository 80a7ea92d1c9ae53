import json
from datetime import datetime, timezone

from schemagit.commands.summary import execute, render_summary
from schemagit.models import Column, DatabaseSchema, ForeignKey, Index, Table
from schemagit.snapshot import Snapshot


def _snapshot(tables):
    return Snapshot(
        "postgres", "app", "1", datetime(2024, 1, 1, tzinfo=timezone.utc), DatabaseSchema(tables)
    )


def _wide(name, count, data_type="text"):
    return Table(name, [Column(f"c{n}", data_type, True) for n in range(count)])


def _section(content, title):
    after = content.split(title + "\n", 1)[1]
    return after.split("\n\n", 1)[0].splitlines()


def test_overview_totals():
    users = Table(
        "users",
        [Column("id", "integer", False), Column("email", "text", True)],
        [Index("idx_email", ["email"], True)],
    )
    orders = Table(
        "orders",
        [Column("user_id", "integer", False)],
        [],
        [ForeignKey("fk_user", "user_id", "users", "id")],
    )
    content = render_summary(_snapshot([users, orders]))
    assert "  Tables:       2\n" in content
    assert "  Columns:      3\n" in content
    assert "  Indexes:      1\n" in content
    assert "  Foreign Keys: 1\n" in content


def test_top_tables_sorted_descending_and_limited():
    tables = [_wide(f"t{n}", n) for n in range(1, 13)]
    lines = _section(render_summary(_snapshot(tables)), "Top tables by column count:")
    assert len(lines) == 10
    counts = [int(line.rsplit(": ", 1)[1]) for line in lines]
    assert counts == sorted(counts, reverse=True)
    assert lines[0] == "  1. t12: 12"


def test_ties_keep_schema_order():
    tables = [_wide("alpha", 2), _wide("beta", 2)]
    lines = _section(render_summary(_snapshot(tables)), "Top tables by column count:")
    assert [line.split(". ", 1)[1].split(":")[0] for line in lines] == ["alpha", "beta"]


def test_type_distribution():
    tables = [_wide("a", 3, "text"), _wide("b", 1, "integer")]
    lines = _section(render_summary(_snapshot(tables)), "Column type distribution:")
    assert lines == ["  text: 3", "  integer: 1"]


def test_execute_latest(tmp_path):
    snapshot = _snapshot([_wide("users", 2)])
    (tmp_path / "2024_01_01_000000.snapshot.json").write_text(
        json.dumps(snapshot.to_dict()), encoding="utf-8"
    )
    out = tmp_path / "summary.txt"
    execute("latest", str(tmp_path), str(out), False, False)
    assert out.read_text(encoding="utf-8") == render_summary(snapshot)