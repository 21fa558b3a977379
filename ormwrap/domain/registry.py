"""Explicit registries for model classes and their named query filters.

Models are keyed on ``module.QualName``. The bare class name is accepted
as an alias as long as exactly one registered model carries it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ormwrap.core.exceptions import AmbiguousModelError, UnknownModelError

if TYPE_CHECKING:
    from ormwrap.domain.model import Model

logger = logging.getLogger(__name__)

_model_registry: dict[str, type[Model]] = {}
# bare class name -> qualified names registered under it
_model_aliases: dict[str, set[str]] = {}


def qualified_model_name(model_class: type) -> str:
    return f"{model_class.__module__}.{model_class.__qualname__}"


def register_model(model_class: type[Model]) -> None:
    key = qualified_model_name(model_class)
    previous = _model_registry.get(key)
    if previous is not None and previous is not model_class:
        logger.warning("Model %s redefined; replacing the earlier class", key)
    _model_registry[key] = model_class
    _model_aliases.setdefault(model_class.__name__, set()).add(key)


def unregister_model(model_class: type[Model]) -> None:
    key = qualified_model_name(model_class)
    if _model_registry.get(key) is not model_class:
        return
    del _model_registry[key]
    keys = _model_aliases.get(model_class.__name__, set())
    keys.discard(key)
    if not keys:
        _model_aliases.pop(model_class.__name__, None)


def get_model_class(class_name: str) -> type[Model]:
    """Resolve a qualified name, or a bare class name when it is unambiguous."""
    model_class = _model_registry.get(class_name)
    if model_class is not None:
        return model_class
    keys = _model_aliases.get(class_name)
    if not keys:
        raise UnknownModelError(class_name)
    if len(keys) > 1:
        raise AmbiguousModelError(class_name, sorted(keys))
    return _model_registry[next(iter(keys))]


def query_filter(func: Callable[..., Any]) -> staticmethod:
    """Register ``func`` as a named filter on the model class it is defined in.

    The filter receives the ``ORMWrapper`` first, then the arguments given
    to ``ORMWrapper.filter``, and should return the wrapper::

        class User(Model):
            @query_filter
            def active(orm):
                return orm.where_equal("active", 1)

        User.factory().filter("active").find_many()
    """
    func.__query_filter__ = True  # type: ignore[attr-defined]
    return staticmethod(func)


def collect_filters(model_class: type) -> dict[str, Callable[..., Any]]:
    """Filters declared on ``model_class`` and its bases; subclasses win.

    A subclass attribute that is not a filter hides an inherited filter of
    the same name.
    """
    filters: dict[str, Callable[..., Any]] = {}
    for klass in reversed(model_class.__mro__):
        for name, attr in vars(klass).items():
            func = getattr(attr, "__func__", attr)
            if getattr(func, "__query_filter__", False):
                filters[name] = func
            else:
                filters.pop(name, None)
    return filters
