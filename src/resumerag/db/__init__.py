"""resumerag database layer."""

from resumerag.db.connection import Database
from resumerag.db.migrations import MIGRATIONS, run_migrations
from resumerag.db.repository import Repository
from resumerag.db.schema import initialize

__all__ = [
    "Database",
    "Repository",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
]
