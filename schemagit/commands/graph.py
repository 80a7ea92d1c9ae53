"""Rendering foreign-key relationships between tables as a graph."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import NamedTuple

from termcolor import colored

from ..models import Table
from ..snapshot import SnapshotManager
from .output import write_or_stdout
from .utils import CommandError, resolve_snapshot


class Relationship(NamedTuple):
    """A foreign key edge from a referencing table to a referenced table."""

    from_table: str
    to_table: str
    column: str
    ref_column: str


def collect_relationships(tables: Iterable[Table]) -> set[Relationship]:
    """Return the distinct foreign key edges of the tables."""
    return {
        Relationship(table.name, fk.ref_table, fk.column, fk.ref_column)
        for table in tables
        for fk in table.foreign_keys
    }


def verify_graph_relationships(all_tables: set[str], tables: Iterable[Table]) -> None:
    """Raise CommandError if a foreign key points at a missing table or column."""
    for table in tables:
        column_names = {column.name for column in table.columns}
        for fk in table.foreign_keys:
            if fk.ref_table not in all_tables:
                raise CommandError(
                    "Graph generation error:\n"
                    f'Referenced table "{fk.ref_table}" not found.'
                )
            if fk.column not in column_names:
                raise CommandError(
                    "Graph generation error:\n"
                    f'Referenced column "{table.name}.{fk.column}" not found.'
                )


def _push_tree(
    table: str,
    adjacency: Mapping[str, list[str]],
    visited: set[str],
    depth: int,
    parts: list[str],
) -> None:
    if table in visited:
        return
    visited.add(table)
    prefix = "└── " if depth > 0 else ""
    parts.append(f"{'  ' * depth}{prefix}{colored(table, 'green')}\n")
    for child in sorted(adjacency.get(table, ())):
        _push_tree(child, adjacency, visited, depth + 1, parts)


def render_text(all_tables: Iterable[str], relationships: Iterable[tuple]) -> str:
    """Render the graph as an indented tree starting from unreferenced tables."""
    tables = set(all_tables)
    relationships = list(relationships)
    parts = [colored("=== Schema Relationship Graph ===", "cyan", attrs=["bold"]) + "\n\n"]

    adjacency: dict[str, list[str]] = defaultdict(list)
    for from_table, to_table, _, _ in relationships:
        adjacency[from_table].append(to_table)
    referenced = {to_table for _, to_table, _, _ in relationships}

    roots = sorted(tables - referenced) or sorted(tables)
    visited: set[str] = set()
    for root in roots:
        _push_tree(root, adjacency, visited, 0, parts)

    remaining = sorted(tables - visited)
    if remaining:
        parts.append("\n")
        parts.append(colored("Circular dependencies or isolated tables:", "yellow") + "\n")
        parts.extend(f"  {colored(table, 'cyan')}\n" for table in remaining)

    return "".join(parts)


def render_mermaid(all_tables: Iterable[str], relationships: Iterable[tuple]) -> str:
    """Render the graph as a Mermaid ER diagram."""
    lines = ["erDiagram"]
    lines += [f"    {table}" for table in sorted(all_tables)]
    lines += [
        f'    {to_table} ||--o{{ {from_table} : "{ref_column} to {column}"'
        for from_table, to_table, column, ref_column in sorted(relationships)
    ]
    return "".join(line + "\n" for line in lines)


def render_dot(all_tables: Iterable[str], relationships: Iterable[tuple]) -> str:
    """Render the graph in Graphviz DOT format."""
    lines = ["digraph schema {", "    rankdir=LR;", "    node [shape=box];", ""]
    lines += [f'    "{table}";' for table in sorted(all_tables)]
    lines.append("")
    lines += [
        f'    "{from_table}" -> "{to_table}" [label="{column} to {ref_column}"];'
        for from_table, to_table, column, ref_column in sorted(relationships)
    ]
    lines.append("}")
    return "".join(line + "\n" for line in lines)


_RENDERERS = {"text": render_text, "mermaid": render_mermaid, "dot": render_dot}


def execute(
    snapshot_id: str,
    directory: str,
    format: str,
    output_file: str | None,
    yes: bool,
    no_create_dir: bool,
) -> None:
    """Render a snapshot's relationship graph in the requested format."""
    manager = SnapshotManager(directory)
    snapshot = resolve_snapshot(manager, snapshot_id, directory)
    tables = snapshot.schema.tables

    all_tables = {table.name for table in tables}
    relationships = collect_relationships(tables)
    verify_graph_relationships(all_tables, tables)

    renderer = _RENDERERS.get(format.lower())
    if renderer is None:
        raise CommandError(f"Unknown format: {format}. Use text, mermaid, or dot")

    write_or_stdout(renderer(all_tables, relationships), output_file, yes, no_create_dir, "Graph")