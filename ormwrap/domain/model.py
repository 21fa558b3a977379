"""Active-record base class for table-backed models.

This is the REFERENCE pattern for declaring models:

    class BlogPost(Model):
        __table_name__ = "posts"        # default: "blog_post"

        @query_filter
        def published(orm):
            return orm.where_not_null("published_at")

    post = BlogPost.factory().filter("published").order_by_desc("id").find_one()
    post.title = "Edited"
    post.save()

Field values live on the bound row (``model.orm``); attribute access
reads and writes through it.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel

from ormwrap.core.exceptions import ORMException, UnboundModelError
from ormwrap.db.base import Database
from ormwrap.domain.registry import collect_filters, register_model
from ormwrap.query.orm import ORM
from ormwrap.query.wrapper import ORMWrapper

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def class_name_to_table_name(class_name: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"\1_\2", class_name).lower()


class Model:
    __table_name__: ClassVar[str | None] = None
    __id_column__: ClassVar[str | None] = None
    __connection__: ClassVar[str | None] = None
    __filters__: ClassVar[dict[str, Callable[..., Any]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.__filters__ = collect_filters(cls)
        register_model(cls)

    def __init__(self) -> None:
        self.orm: ORM | None = None

    def __repr__(self) -> str:
        data = self.orm.as_dict() if self.orm is not None else None
        return f"<{type(self).__name__} {data!r}>"

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def table_name(cls) -> str:
        return cls.__table_name__ or class_name_to_table_name(cls.__name__)

    @classmethod
    def factory(cls, connection: Database | str | None = None) -> ORMWrapper:
        """Return a query wrapper for this model's table that yields instances of ``cls``."""
        wrapper = ORMWrapper.for_table(cls.table_name(), connection or cls.__connection__)
        wrapper.set_model_class(cls)
        if cls.__id_column__:
            wrapper.use_id_column(cls.__id_column__)
        return wrapper

    # ------------------------------------------------------------------
    # Row binding and field access
    # ------------------------------------------------------------------

    def set_orm(self, orm: ORM) -> None:
        self.orm = orm

    def _bound_orm(self) -> ORM:
        orm = self.__dict__.get("orm")
        if orm is None:
            raise UnboundModelError(type(self).__name__)
        return orm

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        orm = self.__dict__.get("orm")
        if name.startswith("_") or orm is None:
            raise AttributeError(name)
        data = orm.as_dict()
        if name in data:
            return data[name]
        try:
            has_column = orm.has_column(name)
        except ORMException as exc:
            raise AttributeError(name) from exc
        if has_column:
            return None
        raise AttributeError(f"{type(self).__name__} has no field '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "orm" or name.startswith("_") or hasattr(type(self), name):
            object.__setattr__(self, name, value)
        else:
            self.set(name, value)

    def get(self, key: str, default: Any = None) -> Any:
        return self._bound_orm().get(key, default)

    def set(self, key: str | Mapping[str, Any], value: Any = None) -> Model:
        self._bound_orm().set(key, value)
        return self

    def is_dirty(self, key: str) -> bool:
        return self._bound_orm().is_dirty(key)

    def is_new(self) -> bool:
        return self._bound_orm().is_new()

    def id(self) -> Any:
        return self._bound_orm().id()

    def as_dict(self, *keys: str) -> dict[str, Any]:
        return self._bound_orm().as_dict(*keys)

    def to_schema(self, schema_cls: type[SchemaT]) -> SchemaT:
        """Validate the row's fields into a pydantic schema."""
        return schema_cls.model_validate(self.as_dict())

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> bool:
        return self._bound_orm().save()

    def delete(self) -> bool:
        return self._bound_orm().delete()

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    @staticmethod
    def _foreign_key_name(specified: str | None, table_name: str) -> str:
        return specified or f"{table_name}_id"

    def _related_factory(self, associated_class: type[Model]) -> ORMWrapper:
        return associated_class.factory(associated_class.__connection__ or self._bound_orm().database)

    def has_one(self, associated_class: type[Model], foreign_key: str | None = None) -> ORMWrapper:
        """Query for the single ``associated_class`` row pointing at this one."""
        return self.has_many(associated_class, foreign_key)

    def has_many(self, associated_class: type[Model], foreign_key: str | None = None) -> ORMWrapper:
        """Query for the ``associated_class`` rows whose foreign key holds this row's id."""
        foreign_key = self._foreign_key_name(foreign_key, self.table_name())
        return self._related_factory(associated_class).where_equal(foreign_key, self.id())

    def belongs_to(self, associated_class: type[Model], foreign_key: str | None = None) -> ORMWrapper:
        """Query for the ``associated_class`` row this row's foreign key points at."""
        foreign_key = self._foreign_key_name(foreign_key, associated_class.table_name())
        return self._related_factory(associated_class).where_id_is(self.get(foreign_key))
