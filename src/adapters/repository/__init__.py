"""Repository adapters - Database and in-memory implementations."""

from .memory import InMemoryOtpStore, InMemoryUserDirectory
from .postgres import PostgresOtpStore, PostgresUserDirectory, run_migrations

__all__ = [
    "InMemoryOtpStore",
    "InMemoryUserDirectory",
    "PostgresOtpStore",
    "PostgresUserDirectory",
    "run_migrations",
]
