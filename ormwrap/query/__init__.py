"""Query package — the table query builder and its model-returning subclass."""
from ormwrap.query.orm import ORM
from ormwrap.query.wrapper import ORMWrapper

__all__ = ["ORM", "ORMWrapper"]
