import json
import re

import pytest

from schemagit.commands.graph import (
    collect_relationships,
    execute,
    render_dot,
    render_mermaid,
    render_text,
    verify_graph_relationships,
)
from schemagit.commands.utils import CommandError
from schemagit.models import Column, DatabaseSchema, ForeignKey, Table
from schemagit.snapshot import Snapshot

_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _plain(text):
    return _ANSI.sub("", text)


def _tables():
    users = Table("users", [Column("id", "INTEGER", False)])
    orders = Table(
        "orders",
        [Column("id", "INTEGER", False), Column("user_id", "INTEGER", False)],
        foreign_keys=[ForeignKey("fk_orders_user", "user_id", "users", "id")],
    )
    return [users, orders]


def _write_snapshot(directory, tables):
    snapshot = Snapshot.create("postgres", "app", DatabaseSchema(tables))
    (directory / "2024_01_02_030405.snapshot.json").write_text(
        json.dumps(snapshot.to_dict()), encoding="utf-8"
    )


def test_collect_relationships_deduplicates():
    tables = _tables()
    tables[1].foreign_keys.append(ForeignKey("fk_dup", "user_id", "users", "id"))
    relationships = collect_relationships(tables)
    assert relationships == {("orders", "users", "user_id", "id")}


def test_verify_missing_table():
    tables = [
        Table("a", [Column("x", "INT", False)], foreign_keys=[ForeignKey("f", "x", "ghost", "id")])
    ]
    with pytest.raises(CommandError, match='Referenced table "ghost" not found'):
        verify_graph_relationships({"a"}, tables)


def test_verify_missing_local_column():
    tables = _tables()
    tables[1].columns = [Column("id", "INTEGER", False)]
    with pytest.raises(CommandError, match='Referenced column "orders.user_id" not found'):
        verify_graph_relationships({"users", "orders"}, tables)


def test_render_text_tree():
    tables = _tables()
    text = _plain(render_text({t.name for t in tables}, collect_relationships(tables)))
    assert text.splitlines() == [
        "=== Schema Relationship Graph ===",
        "",
        "orders",
        "  └── users",
    ]


def test_render_text_reports_cycles():
    a = Table("a", [Column("b_id", "INT", False)], foreign_keys=[ForeignKey("f1", "b_id", "b", "id")])
    b = Table("b", [Column("a_id", "INT", False)], foreign_keys=[ForeignKey("f2", "a_id", "a", "id")])
    c = Table("c", [Column("id", "INT", False)])
    tables = [a, b, c]
    lines = _plain(render_text({"a", "b", "c"}, collect_relationships(tables))).splitlines()
    assert "Circular dependencies or isolated tables:" in lines
    tail = lines[lines.index("Circular dependencies or isolated tables:") + 1 :]
    assert tail == ["  a", "  b"]
    assert lines[2] == "c"


def test_render_text_all_referenced_starts_from_sorted_tables():
    a = Table("a", [Column("b_id", "INT", False)], foreign_keys=[ForeignKey("f1", "b_id", "b", "id")])
    b = Table("b", [Column("a_id", "INT", False)], foreign_keys=[ForeignKey("f2", "a_id", "a", "id")])
    lines = _plain(render_text({"a", "b"}, collect_relationships([a, b]))).splitlines()
    assert lines[2] == "a"
    assert lines[3].endswith("b")
    assert not any("Circular" in line for line in lines)


def test_render_mermaid_structure():
    tables = _tables()
    out = render_mermaid({t.name for t in tables}, collect_relationships(tables))
    lines = out.splitlines()
    assert lines[0] == "erDiagram"
    assert lines[1:3] == ["    orders", "    users"]
    assert lines[3].startswith("    users ||--o{ orders")
    assert '"id to user_id"' in lines[3]


def test_render_dot_structure():
    tables = _tables()
    out = render_dot({t.name for t in tables}, collect_relationships(tables))
    assert out.startswith("digraph schema {\n    rankdir=LR;\n    node [shape=box];\n\n")
    assert out.endswith("}\n")
    assert out.index('"orders";') < out.index('"users";')
    edge = [line for line in out.splitlines() if "->" in line]
    assert len(edge) == 1
    assert '"orders" -> "users"' in edge[0]
    assert "user_id to id" in edge[0]


def test_execute_writes_dot_to_file(tmp_path):
    snaps = tmp_path / "snaps"
    snaps.mkdir()
    _write_snapshot(snaps, _tables())
    target = tmp_path / "graph.dot"
    execute("latest", str(snaps), "DOT", str(target), False, False)
    content = target.read_text(encoding="utf-8")
    assert content.startswith("digraph schema {")
    assert '"orders" -> "users"' in content


def test_execute_unknown_format(tmp_path):
    _write_snapshot(tmp_path, _tables())
    with pytest.raises(CommandError, match="Unknown format: svg"):
        execute("latest", str(tmp_path), "svg", None, False, False)


def test_execute_rejects_dangling_reference(tmp_path):
    tables = [
        Table("a", [Column("x", "INT", False)], foreign_keys=[ForeignKey("f", "x", "ghost", "id")])
    ]
    _write_snapshot(tmp_path, tables)
    with pytest.raises(CommandError, match="Graph generation error"):
        execute("latest", str(tmp_path), "text", None, False, False)