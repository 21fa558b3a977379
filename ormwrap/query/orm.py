"""Table-scoped query builder and row object over SQLAlchemy Core.

An ``ORM`` instance plays two roles: before a fetch it accumulates
conditions for a SELECT/DELETE; after a fetch (or ``create``) it is a
single row that can be read, modified and saved.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import Column, ColumnElement, Select, Table, delete, func, insert, select, text, update

from ormwrap.core.exceptions import ColumnNotFoundError, PrimaryKeyMissingError
from ormwrap.db.base import Database, resolve_database

logger = logging.getLogger(__name__)


class ORM:
    def __init__(
        self,
        table_name: str,
        data: Mapping[str, Any] | None = None,
        database: Database | None = None,
    ):
        self._table_name = table_name
        self._database = database if database is not None else resolve_database()
        self._table: Table | None = None
        self._instance_id_column: str | None = None

        # Row state
        self._data: dict[str, Any] = dict(data or {})
        self._dirty_fields: dict[str, Any] = {}
        self._is_new = False

        # Query state
        self._where: list[ColumnElement[bool]] = []
        self._order_by: list[ColumnElement[Any]] = []
        self._result_columns: list[str] = []
        self._distinct = False
        self._limit: int | None = None
        self._offset: int | None = None

    @classmethod
    def for_table(cls, table_name: str, connection: Database | str | None = None) -> ORM:
        """Return a fresh query bound to ``table_name`` on the given connection."""
        return cls(table_name, database=resolve_database(connection))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._table_name} {self._data!r}>"

    # ------------------------------------------------------------------
    # Table helpers
    # ------------------------------------------------------------------

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def database(self) -> Database:
        return self._database

    @property
    def table(self) -> Table:
        if self._table is None:
            self._table = self._database.table(self._table_name)
        return self._table

    def has_column(self, name: str) -> bool:
        return name in self.table.c

    def _column(self, name: str) -> Column[Any]:
        try:
            return self.table.c[name]
        except KeyError:
            raise ColumnNotFoundError(name, self._table_name) from None

    def get_id_column_name(self) -> str:
        return self._instance_id_column or self._database.id_column

    def use_id_column(self, column: str) -> ORM:
        """Override the connection's primary key column for this query and its rows."""
        self._instance_id_column = column
        return self

    # ------------------------------------------------------------------
    # Conditions
    # ------------------------------------------------------------------

    def _add_where(self, clause: ColumnElement[bool]) -> ORM:
        self._where.append(clause)
        return self

    def where(self, column: str, value: Any) -> ORM:
        return self.where_equal(column, value)

    def where_equal(self, column: str, value: Any) -> ORM:
        return self._add_where(self._column(column) == value)

    def where_not_equal(self, column: str, value: Any) -> ORM:
        return self._add_where(self._column(column) != value)

    def where_lt(self, column: str, value: Any) -> ORM:
        return self._add_where(self._column(column) < value)

    def where_gt(self, column: str, value: Any) -> ORM:
        return self._add_where(self._column(column) > value)

    def where_lte(self, column: str, value: Any) -> ORM:
        return self._add_where(self._column(column) <= value)

    def where_gte(self, column: str, value: Any) -> ORM:
        return self._add_where(self._column(column) >= value)

    def where_like(self, column: str, pattern: str) -> ORM:
        return self._add_where(self._column(column).like(pattern))

    def where_not_like(self, column: str, pattern: str) -> ORM:
        return self._add_where(self._column(column).not_like(pattern))

    def where_in(self, column: str, values: Iterable[Any]) -> ORM:
        return self._add_where(self._column(column).in_(list(values)))

    def where_not_in(self, column: str, values: Iterable[Any]) -> ORM:
        return self._add_where(self._column(column).not_in(list(values)))

    def where_null(self, column: str) -> ORM:
        return self._add_where(self._column(column).is_(None))

    def where_not_null(self, column: str) -> ORM:
        return self._add_where(self._column(column).is_not(None))

    def where_id_is(self, id: Any) -> ORM:
        return self.where_equal(self.get_id_column_name(), id)

    def where_raw(self, clause: str, params: Mapping[str, Any] | None = None) -> ORM:
        """Add a literal SQL condition with named ``:param`` placeholders."""
        return self._add_where(text(clause).bindparams(**(params or {})))

    # ------------------------------------------------------------------
    # Shaping
    # ------------------------------------------------------------------

    def select(self, *columns: str) -> ORM:
        for name in columns:
            self._column(name)
        self._result_columns.extend(columns)
        return self

    def distinct(self) -> ORM:
        self._distinct = True
        return self

    def order_by_asc(self, column: str) -> ORM:
        self._order_by.append(self._column(column).asc())
        return self

    def order_by_desc(self, column: str) -> ORM:
        self._order_by.append(self._column(column).desc())
        return self

    def limit(self, limit: int) -> ORM:
        self._limit = limit
        return self

    def offset(self, offset: int) -> ORM:
        self._offset = offset
        return self

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _build_select(self) -> Select[Any]:
        if self._result_columns:
            q = select(*(self._column(name) for name in self._result_columns))
        else:
            q = select(self.table)
        for clause in self._where:
            q = q.where(clause)
        if self._distinct:
            q = q.distinct()
        if self._order_by:
            q = q.order_by(*self._order_by)
        if self._limit is not None:
            q = q.limit(self._limit)
        if self._offset is not None:
            q = q.offset(self._offset)
        return q

    def _run(self) -> list[dict[str, Any]]:
        q = self._build_select()
        with self._database.connect() as conn:
            rows = conn.execute(q).mappings().all()
        logger.debug("SELECT on %s returned %d row(s)", self._table_name, len(rows))
        return [dict(row) for row in rows]

    def _create_instance_from_row(self, row: Mapping[str, Any]) -> ORM:
        # Rows are always plain ORM objects, whatever the query subclass is
        instance = ORM(self._table_name, database=self._database)
        instance._table = self._table
        instance._instance_id_column = self._instance_id_column
        instance.hydrate(row)
        return instance

    def find_one(self, id: Any = None) -> ORM | None:
        """Return the first matching row, or None when nothing matches."""
        if id is not None:
            self.where_id_is(id)
        self.limit(1)
        rows = self._run()
        if not rows:
            return None
        return self._create_instance_from_row(rows[0])

    def find_many(self) -> list[ORM]:
        return [self._create_instance_from_row(row) for row in self._run()]

    def find_dicts(self) -> list[dict[str, Any]]:
        """Return matching rows as plain dicts."""
        return self._run()

    def count(self) -> int:
        """Number of rows matching the current conditions (ignores order/limit/offset)."""
        q = select(func.count()).select_from(self.table)
        for clause in self._where:
            q = q.where(clause)
        with self._database.connect() as conn:
            return conn.execute(q).scalar_one()

    def create(self, data: Mapping[str, Any] | None = None) -> ORM | None:
        """Return a new, unsaved row; every supplied field is marked dirty."""
        instance = ORM(self._table_name, database=self._database)
        instance._table = self._table
        instance._instance_id_column = self._instance_id_column
        instance._is_new = True
        if data is not None:
            instance.hydrate(data)
            instance.force_all_dirty()
        return instance

    # ------------------------------------------------------------------
    # Row access
    # ------------------------------------------------------------------

    def hydrate(self, data: Mapping[str, Any]) -> ORM:
        self._data = dict(data)
        return self

    def force_all_dirty(self) -> ORM:
        self._dirty_fields = dict(self._data)
        return self

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str | Mapping[str, Any], value: Any = None) -> ORM:
        """Set one field, or several from a mapping, marking them dirty."""
        values = dict(key) if isinstance(key, Mapping) else {key: value}
        self._data.update(values)
        self._dirty_fields.update(values)
        return self

    def is_dirty(self, key: str) -> bool:
        return key in self._dirty_fields

    def is_new(self) -> bool:
        return self._is_new

    def id(self) -> Any:
        return self.get(self.get_id_column_name())

    def as_dict(self, *keys: str) -> dict[str, Any]:
        if not keys:
            return dict(self._data)
        return {key: self._data[key] for key in keys if key in self._data}

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def save(self) -> bool:
        """Insert a new row or update the dirty fields of an existing one."""
        id_column = self.get_id_column_name()
        if self._is_new:
            stmt = insert(self.table)
            if self._dirty_fields:
                stmt = stmt.values(**self._dirty_fields)
            with self._database.begin() as conn:
                result = conn.execute(stmt)
            if self.get(id_column) is None and result.inserted_primary_key:
                self._data[id_column] = result.inserted_primary_key[0]
            self._is_new = False
            logger.debug("Inserted row %s into %s", self.id(), self._table_name)
        else:
            if not self._dirty_fields:
                return True
            row_id = self.id()
            if row_id is None:
                raise PrimaryKeyMissingError(self._table_name, "update")
            with self._database.begin() as conn:
                conn.execute(
                    update(self.table)
                    .where(self._column(id_column) == row_id)
                    .values(**self._dirty_fields)
                )
            logger.debug("Updated row %s in %s", row_id, self._table_name)
        self._dirty_fields = {}
        return True

    def delete(self) -> bool:
        row_id = self.id()
        if row_id is None:
            raise PrimaryKeyMissingError(self._table_name, "delete")
        with self._database.begin() as conn:
            result = conn.execute(
                delete(self.table).where(self._column(self.get_id_column_name()) == row_id)
            )
        return result.rowcount > 0

    def delete_many(self) -> int:
        """Delete every row matching the current conditions; return the count."""
        q = delete(self.table)
        for clause in self._where:
            q = q.where(clause)
        with self._database.begin() as conn:
            result = conn.execute(q)
        logger.debug("Deleted %d row(s) from %s", result.rowcount, self._table_name)
        return result.rowcount
