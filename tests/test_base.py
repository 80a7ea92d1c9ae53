import pytest

from schemagit.diff import SchemaDiff
from schemagit.migration.base import MigrationGenerator


class _Fixed(MigrationGenerator):
    def __init__(self, statements):
        self.statements = statements

    def generate_sql(self, diff):
        return list(self.statements)


def test_generate_migration_joins_with_blank_lines():
    generator = _Fixed(["DROP TABLE a;", "DROP TABLE b;"])
    assert generator.generate_migration(SchemaDiff()) == "DROP TABLE a;\n\nDROP TABLE b;"


def test_generate_migration_empty():
    assert _Fixed([]).generate_migration(SchemaDiff()) == ""


def test_generate_migration_single_statement_unchanged():
    assert _Fixed(["SELECT 1;"]).generate_migration(SchemaDiff()) == "SELECT 1;"


def test_abstract_cannot_be_instantiated():
    with pytest.raises(TypeError):
        MigrationGenerator()