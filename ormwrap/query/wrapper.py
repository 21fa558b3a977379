"""ORM subclass that returns model instances instead of raw rows.

You shouldn't need to use this class directly; ``Model.factory()``
builds one with the model class already configured.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ormwrap.core.exceptions import FilterNotFoundError, ModelNotConfiguredError
from ormwrap.db.base import Database, resolve_database
from ormwrap.domain.registry import get_model_class
from ormwrap.query.orm import ORM

if TYPE_CHECKING:
    from ormwrap.domain.model import Model

logger = logging.getLogger(__name__)


class ORMWrapper(ORM):
    def __init__(
        self,
        table_name: str,
        data: Mapping[str, Any] | None = None,
        database: Database | None = None,
        model_class: type[Model] | None = None,
    ):
        super().__init__(table_name, data, database)
        self._model_class = model_class

    @classmethod
    def for_table(
        cls,
        table_name: str,
        connection: Database | str | None = None,
        model_class: type[Model] | None = None,
    ) -> ORMWrapper:
        return cls(table_name, database=resolve_database(connection), model_class=model_class)

    @property
    def model_class(self) -> type[Model] | None:
        return self._model_class

    def set_model_class(self, model_class: type[Model]) -> None:
        """Set the class that find_one/find_many/create return instances of."""
        self._model_class = model_class

    def set_class_name(self, class_name: str) -> None:
        """Same as ``set_model_class``, resolving the class by its registered name."""
        self._model_class = get_model_class(class_name)

    def _require_model_class(self) -> type[Model]:
        if self._model_class is None:
            raise ModelNotConfiguredError(self._table_name)
        return self._model_class

    def filter(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Apply a named filter defined on the model class.

        The filter is called as ``filter_func(self, *args, **kwargs)`` and
        its return value (normally this wrapper) is returned, so filters
        chain with the other query methods.
        """
        model_class = self._require_model_class()
        filter_func = model_class.__filters__.get(name)
        if filter_func is None:
            raise FilterNotFoundError(name, model_class.__name__)
        logger.debug("Applying filter %s.%s", model_class.__name__, name)
        return filter_func(self, *args, **kwargs)

    def _create_model_instance(self, orm: ORM | None) -> Model | None:
        if orm is None:
            return None
        model = self._require_model_class()()
        model.set_orm(orm)
        return model

    def find_one(self, id: Any = None) -> Model | None:  # type: ignore[override]
        self._require_model_class()
        return self._create_model_instance(super().find_one(id))

    def find_many(self) -> list[Model]:  # type: ignore[override]
        self._require_model_class()
        return [self._create_model_instance(row) for row in super().find_many()]  # type: ignore[misc]

    def create(self, data: Mapping[str, Any] | None = None) -> Model | None:  # type: ignore[override]
        self._require_model_class()
        return self._create_model_instance(super().create(data))
