"""Database layer for Gravity Note."""

from gravity.db.connection import Database
from gravity.db.migrations import run_migrations

__all__ = ["Database", "run_migrations"]
