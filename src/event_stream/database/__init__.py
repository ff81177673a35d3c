"""Database access for the Postgres-backed stores."""

from .connection import DatabaseManager

__all__ = ["DatabaseManager"]
