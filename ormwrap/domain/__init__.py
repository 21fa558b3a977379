"""Domain package — the Model base class and the model/filter registries."""

from ormwrap.domain.model import Model, class_name_to_table_name
from ormwrap.domain.registry import get_model_class, query_filter

__all__ = [
    "Model",
    "class_name_to_table_name",
    "get_model_class",
    "query_filter",
]
