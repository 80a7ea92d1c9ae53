from schemagit.diff import ColumnModification, SchemaDiff, TableDiff, diff_schemas
from schemagit.models import Column, DatabaseSchema, ForeignKey, Index, Table


def _id_column():
    return Column("id", "INTEGER", False, None)


def _table(name, columns=(), indexes=(), foreign_keys=()):
    return Table(name, list(columns), list(indexes), list(foreign_keys))


def test_no_diff():
    schema = DatabaseSchema([_table("users", [_id_column()])])
    diff = diff_schemas(schema, schema)
    assert not diff.has_changes()


def test_table_added():
    diff = diff_schemas(DatabaseSchema([]), DatabaseSchema([_table("users")]))
    assert len(diff.tables_added) == 1
    assert diff.tables_added[0].name == "users"


def test_table_removed():
    diff = diff_schemas(DatabaseSchema([_table("users")]), DatabaseSchema([]))
    assert len(diff.tables_removed) == 1
    assert diff.tables_removed[0].name == "users"


def test_column_added():
    old = DatabaseSchema([_table("users")])
    new = DatabaseSchema([_table("users", [_id_column()])])
    diff = diff_schemas(old, new)
    assert len(diff.tables_modified) == 1
    table_diff = diff.tables_modified[0]
    assert table_diff.table_name == "users"
    assert len(table_diff.columns_added) == 1
    assert table_diff.columns_added[0].name == "id"


def test_column_modified():
    old_col = Column("email", "nvarchar(100)", True, None)
    new_col = Column("email", "nvarchar(200)", False, None)
    diff = diff_schemas(
        DatabaseSchema([_table("users", [old_col])]),
        DatabaseSchema([_table("users", [new_col])]),
    )
    assert diff.tables_modified[0].columns_modified == [
        ColumnModification("email", old_col, new_col)
    ]


def test_changed_index_is_removed_and_added():
    old_idx = Index("idx_users_email", ["email"], False)
    new_idx = Index("idx_users_email", ["email"], True)
    diff = diff_schemas(
        DatabaseSchema([_table("users", indexes=[old_idx])]),
        DatabaseSchema([_table("users", indexes=[new_idx])]),
    )
    table_diff = diff.tables_modified[0]
    assert table_diff.indexes_removed == [old_idx]
    assert table_diff.indexes_added == [new_idx]


def test_changed_foreign_key_is_removed_and_added():
    old_fk = ForeignKey("fk", "user_id", "users", "id")
    new_fk = ForeignKey("fk", "author_id", "users", "id")
    diff = diff_schemas(
        DatabaseSchema([_table("posts", foreign_keys=[old_fk])]),
        DatabaseSchema([_table("posts", foreign_keys=[new_fk])]),
    )
    table_diff = diff.tables_modified[0]
    assert table_diff.foreign_keys_removed == [old_fk]
    assert table_diff.foreign_keys_added == [new_fk]


def test_results_sorted_by_name():
    new = DatabaseSchema([_table("zeta"), _table("alpha"), _table("mid")])
    diff = diff_schemas(DatabaseSchema([]), new)
    assert [t.name for t in diff.tables_added] == ["alpha", "mid", "zeta"]


def test_unchanged_common_table_not_reported():
    users = _table("users", [_id_column()])
    diff = diff_schemas(DatabaseSchema([users]), DatabaseSchema([users, _table("posts")]))
    assert diff.tables_modified == []
    assert [t.name for t in diff.tables_added] == ["posts"]


def test_summary_without_changes():
    assert SchemaDiff().summary() == "No changes detected"


def test_summary_lists_all_changes():
    diff = SchemaDiff(
        tables_added=[_table("posts")],
        tables_removed=[_table("legacy")],
        tables_modified=[
            TableDiff(
                table_name="users",
                columns_added=[_id_column()],
                indexes_removed=[Index("idx_users_email", ["email"], False)],
                foreign_keys_added=[ForeignKey("fk", "id", "posts", "id")],
            )
        ],
    )
    assert diff.summary().split("\n") == [
        "Tables Added: 1",
        "  + posts",
        "Tables Removed: 1",
        "  - legacy",
        "Tables Modified: 1",
        "  ~ users",
        "      + Column: id",
        "      - Index: idx_users_email",
        "      + Foreign Key: fk",
    ]


def test_table_diff_has_changes():
    assert not TableDiff("users").has_changes()
    assert TableDiff("users", columns_removed=[_id_column()]).has_changes()


def test_to_dict_field_names():
    diff = diff_schemas(DatabaseSchema([_table("users")]), DatabaseSchema([]))
    data = diff.to_dict()
    assert set(data) == {"tables_added", "tables_removed", "tables_modified"}
    assert data["tables_removed"] == [_table("users").to_dict()]


def test_table_diff_to_dict_includes_modifications():
    old_col = Column("email", "TEXT", True, None)
    new_col = Column("email", "TEXT", False, None)
    table_diff = TableDiff("users", columns_modified=[ColumnModification("email", old_col, new_col)])
    data = table_diff.to_dict()
    assert data["columns_modified"] == [
        {
            "column_name": "email",
            "old_column": old_col.to_dict(),
            "new_column": new_col.to_dict(),
        }
    ]