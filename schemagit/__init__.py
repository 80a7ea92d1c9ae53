"""Database schema snapshots, diffs, migration SQL and schema reports."""

__version__ = "0.2.3"