"""Generic repository over a ``Model`` class: CRUD plus pagination."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from ormwrap.db.base import Database
from ormwrap.domain.model import Model
from ormwrap.query.wrapper import ORMWrapper

ModelT = TypeVar("ModelT", bound=Model)


class BaseRepository(Generic[ModelT]):
    """Generic CRUD repository.

    Subclasses set ``model``. The connection is injected; ``None`` means the
    model's own connection (or the default one).
    """

    model: type[ModelT]

    def __init__(self, connection: Database | str | None = None):
        self._connection = connection

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _base_query(self) -> ORMWrapper:
        return self.model.factory(self._connection)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, entity_id: Any) -> ModelT | None:
        return self._base_query().find_one(entity_id)  # type: ignore[return-value]

    def list(
        self,
        *,
        offset: int = 0,
        limit: int = 20,
        order_by: str | None = None,
        order: str = "asc",
        filters: dict[str, Any] | None = None,
    ) -> tuple[list[ModelT], int]:
        """Return (items, total_count) with pagination and optional column filters."""
        q = self._base_query()

        # Apply simple equality filters
        if filters:
            for col_name, value in filters.items():
                if value is not None and q.has_column(col_name):
                    q.where_equal(col_name, value)

        total = q.count()

        # Order + paginate
        if order_by is not None and q.has_column(order_by):
            if order == "desc":
                q.order_by_desc(order_by)
            else:
                q.order_by_asc(order_by)
        q.offset(offset).limit(limit)

        items = q.find_many()
        return items, total  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create(self, **kwargs: Any) -> ModelT:
        instance = self._base_query().create(kwargs)
        instance.save()  # populate id
        return instance  # type: ignore[return-value]

    def update(self, entity_id: Any, **kwargs: Any) -> ModelT | None:
        instance = self.get_by_id(entity_id)
        if instance is None:
            return None
        kwargs.pop(instance.orm.get_id_column_name(), None)
        if kwargs:
            instance.set(kwargs)
            instance.save()
        return instance

    def delete(self, entity_id: Any) -> bool:
        instance = self.get_by_id(entity_id)
        if instance is None:
            return False
        return instance.delete()
