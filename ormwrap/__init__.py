"""ormwrap — active-record models over SQLAlchemy Core."""

from ormwrap.db import Database, close_databases, get_database, init_database
from ormwrap.domain import Model, get_model_class, query_filter
from ormwrap.query import ORM, ORMWrapper
from ormwrap.repositories import BaseRepository

__all__ = [
    "BaseRepository",
    "Database",
    "Model",
    "ORM",
    "ORMWrapper",
    "close_databases",
    "get_database",
    "get_model_class",
    "init_database",
    "query_filter",
]
