"""Database package — engine handles and the named connection registry."""
from ormwrap.db.base import Database, close_databases, get_database, init_database, resolve_database

__all__ = ["Database", "close_databases", "get_database", "init_database", "resolve_database"]
