# schemagit

Track database schema changes the way you track code. `schemagit` works on
schema snapshots: JSON files that record the tables, columns, indexes and
foreign keys of a database at a point in time. From two snapshots it can show
what changed and generate the SQL that turns one schema into the other
(PostgreSQL or SQL Server). From one snapshot it can draw the relationships
between tables, export the schema, summarise it and check it for common
mistakes.

## Installation

```
pip install schemagit
```

For running the test suite:

```
pip install "schemagit[test]"
pytest
```

## The schema model

`schemagit.models` holds plain dataclasses: `Column`, `Index`, `ForeignKey`,
`Table` and `DatabaseSchema`. Each has `to_dict()` and a static
`from_dict(data)`. `from_dict` raises `ValueError` when a field is missing or
has the wrong type.

## Diffs and migrations

```python
from schemagit.models import Column, DatabaseSchema, Table
from schemagit.diff import diff_schemas
from schemagit.migration.factory import create_generator

old = DatabaseSchema(tables=[])
new = DatabaseSchema(tables=[
    Table(
        name="users",
        columns=[Column(name="id", data_type="INTEGER", nullable=False, default=None)],
    ),
])

diff = diff_schemas(old, new)
print(diff.has_changes())   # True
print(diff.summary())       # "Tables Added: 1\n  + users"

generator = create_generator("postgres")
print(generator.generate_migration(diff))
```

`diff_schemas` returns a `SchemaDiff` with `tables_added`, `tables_removed`
and `tables_modified` (a list of `TableDiff`), all sorted by name. Tables,
columns, indexes and foreign keys are matched by name; a changed column shows
up as a `ColumnModification`, while a changed index or foreign key appears as
one removal and one addition.

`create_generator` accepts `postgres`, `postgresql`, `mssql` or `sqlserver`
(case does not matter) and returns `None` for anything else. The generators
are `PostgresMigrationGenerator` and `MssqlMigrationGenerator`; both offer
`generate_sql(diff)`, a list of statements, and `generate_migration(diff)`,
the same statements separated by blank lines. Statements come in this order:
new tables, then changes to existing tables (foreign keys and indexes dropped
first, added last), then dropped tables.

## Snapshots

```python
from schemagit.snapshot import Snapshot, SnapshotManager

manager = SnapshotManager("./snapshots")
filename = manager.save(Snapshot.create("postgres", "app_db", new))
print(manager.list())
print(manager.latest().schema.tables[0].name)
```

`save` creates the directory if needed and writes the snapshot under a name
made from the current UTC time, for example
`2026_03_05_071235.snapshot.json`. `list` returns the snapshot file names in
order; `latest` loads the newest one or returns `None`; `load(filename)`,
`SnapshotManager.load_from_path(path)` and `delete(filename)` do what their
names say.

A snapshot that is missing raises `SnapshotNotFoundError`; one that is not
valid JSON, lacks a required field or has an empty name or type raises
`InvalidSnapshotError`. Both derive from `SnapshotError`.

## Command functions

`schemagit.commands` holds ready-made commands that read snapshots from a
directory and print their result, or write it to a file:

| Function | Does |
| --- | --- |
| `listing.execute_list(directory, output_file, yes, no_create_dir)` | snapshots with type, table count and creation time |
| `listing.execute_snapshots(directory, output_file, yes, no_create_dir)` | snapshot IDs in timestamp order |
| `history.execute(directory, output_file, yes, no_create_dir)` | timeline table of all snapshots |
| `show.execute(snapshot_id, directory, output_file, yes, no_create_dir)` | full detail of one snapshot |
| `summary.execute(snapshot_id, directory, output_file, yes, no_create_dir)` | totals, widest tables, column type distribution |
| `validate.execute(snapshot_id, directory, output_file, yes, no_create_dir)` | duplicate names, dangling keys and indexes, missing primary keys |
| `diff.execute(old_path, new_path, snapshot_dir, format, output_file, yes, no_create_dir)` | changes between two snapshots, as `text` or `json` |
| `graph.execute(snapshot_id, directory, format, output_file, yes, no_create_dir)` | relationships as `text`, `mermaid` or `dot` |
| `export.execute(snapshot_id, directory, format, output_file, yes, no_create_dir)` | the schema as `sql`, `json` or `yaml` |
| `tag.execute(snapshot_id, tag_name, directory)` | names a snapshot in `tags.json` in the directory |

```python
from schemagit.commands import graph, validate

validate.execute("latest", "./snapshots", None, False, False)
graph.execute("latest", "./snapshots", "mermaid", "out/graph.mmd", True, False)
```

A snapshot can be referred to as `latest`, `previous` (the one before the
newest), a compact ID such as `20260305071235`, an underscored ID such as
`2026_03_05_071235`, a full file name, or a path containing `/` or `\`, which
is read as is.

With `output_file` set to `None` the result goes to standard output.
Otherwise a missing parent directory is created when `yes` is true, refused
when `no_create_dir` is true, and otherwise asked about when running in a
terminal; outside a terminal the call fails. Failures raise
`schemagit.commands.utils.CommandError` with a message meant for the user.

The rendering parts can also be used on their own, for example
`validate.validate_schema(schema)`, `graph.render_dot(tables, relationships)`,
`export.export_sql(tables, db_type)` or `show.render_snapshot(snapshot)`.

## What it does not do

- It installs no command-line program; the commands above are called from
  Python.
- It does not connect to databases. Snapshots have to be built from a
  `DatabaseSchema` you assemble yourself, or loaded from existing snapshot
  files; `commands.utils.detect_driver` only reads the scheme of a
  connection string.
- There is no migration command that checks the new schema's references
  before writing SQL; use the generators directly and review their output.