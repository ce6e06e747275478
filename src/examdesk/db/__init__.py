"""Database module for SQLite persistence.

Provides:
- Database connection lifecycle and transaction scopes
- Schema initialization
- Repository functions for users, content, tests and attempts
"""

from examdesk.db.database import Database, open_database

__all__ = ["Database", "open_database"]
