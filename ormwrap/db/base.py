"""SQLAlchemy engine handles and the named connection registry."""


import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Connection, MetaData, Table, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import NoSuchTableError
from sqlalchemy.pool import StaticPool

from ormwrap.core.config import settings
from ormwrap.core.exceptions import ConnectionNotConfiguredError, TableNotFoundError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Connection handle
# ---------------------------------------------------------------------------
class Database:
    """An engine plus the table metadata reflected (or declared) for it."""

    def __init__(
        self,
        url: str,
        *,
        name: str | None = None,
        id_column: str | None = None,
        echo: bool | None = None,
        **engine_kwargs: Any,
    ):
        self.name = name or settings.default_connection
        self.id_column = id_column or settings.id_column

        _engine_kwargs: dict = {
            "pool_pre_ping": True,
            "echo": settings.db_echo if echo is None else echo,
        }
        # SQLite is used from several threads in tests; in-memory DBs need one shared connection
        if url.startswith("sqlite"):
            _engine_kwargs["connect_args"] = {"check_same_thread": False}
            if make_url(url).database in (None, "", ":memory:"):
                _engine_kwargs["poolclass"] = StaticPool
        _engine_kwargs.update(engine_kwargs)

        self.engine = create_engine(url, **_engine_kwargs)
        self.metadata = MetaData()

    def __repr__(self) -> str:
        return f"Database(name={self.name!r}, url={self.engine.url!r})"

    def table(self, table_name: str) -> Table:
        """Return the table, reflecting it from the database on first use."""
        table = self.metadata.tables.get(table_name)
        if table is not None:
            return table
        try:
            table = Table(table_name, self.metadata, autoload_with=self.engine)
        except NoSuchTableError as exc:
            raise TableNotFoundError(table_name, self.name) from exc
        logger.debug("Reflected table %s on connection %s", table_name, self.name)
        return table

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Yield a read connection."""
        with self.engine.connect() as conn:
            yield conn

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Yield a connection inside a transaction; commit on success, roll back on error."""
        with self.engine.begin() as conn:
            yield conn

    def dispose(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
_databases: dict[str, Database] = {}


def init_database(url: str | None = None, *, name: str | None = None, **kwargs: Any) -> Database:
    """Create a connection handle and register it under ``name``.

    This is the one-time setup step; query objects only ever look handles up.
    Re-initialising a name disposes the previous engine.
    """
    database = Database(url or settings.database_url, name=name, **kwargs)
    previous = _databases.get(database.name)
    if previous is not None:
        logger.warning("Replacing connection %s", database.name)
        previous.dispose()
    _databases[database.name] = database
    logger.info("Database connection %s initialized (%s)", database.name, database.engine.url.drivername)
    return database


def get_database(name: str | None = None) -> Database:
    name = name or settings.default_connection
    try:
        return _databases[name]
    except KeyError:
        raise ConnectionNotConfiguredError(name) from None


def resolve_database(connection: "Database | str | None" = None) -> Database:
    """Accept a handle, a registered connection name, or None for the default."""
    if isinstance(connection, Database):
        return connection
    return get_database(connection)


def close_databases() -> None:
    """Dispose every registered engine and clear the registry."""
    for database in _databases.values():
        database.dispose()
    _databases.clear()
    logger.info("Database connections closed.")
