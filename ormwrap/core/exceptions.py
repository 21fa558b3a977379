"""Library-level exceptions.

"Row not found" is never raised: query methods return ``None`` for it.
These exceptions cover configuration faults and misuse.
"""


class ORMException(Exception):
    """Base ormwrap exception."""

    def __init__(self, message: str, code: str = "ORM_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

class ConnectionNotConfiguredError(ORMException):
    def __init__(self, connection_name: str):
        super().__init__(
            f"Connection '{connection_name}' is not configured; call init_database() first",
            code="CONNECTION_NOT_CONFIGURED",
        )
        self.connection_name = connection_name

class TableNotFoundError(ORMException):
    def __init__(self, table_name: str, connection_name: str):
        super().__init__(
            f"Table '{table_name}' not found on connection '{connection_name}'",
            code="TABLE_NOT_FOUND",
        )
        self.table_name = table_name

class ColumnNotFoundError(ORMException):
    def __init__(self, column: str, table_name: str):
        super().__init__(f"Column '{column}' not found in table '{table_name}'", code="COLUMN_NOT_FOUND")
        self.column = column

class UnknownModelError(ORMException):
    def __init__(self, class_name: str):
        super().__init__(f"No model class registered as '{class_name}'", code="UNKNOWN_MODEL")
        self.class_name = class_name

class AmbiguousModelError(ORMException):
    def __init__(self, class_name: str, candidates: list[str]):
        super().__init__(
            f"Model name '{class_name}' is ambiguous; use one of: {', '.join(candidates)}",
            code="AMBIGUOUS_MODEL",
        )
        self.class_name = class_name
        self.candidates = candidates

class ModelNotConfiguredError(ORMException):
    def __init__(self, table_name: str):
        super().__init__(
            f"No model class set on wrapper for table '{table_name}'",
            code="MODEL_NOT_CONFIGURED",
        )

class FilterNotFoundError(ORMException):
    """Raised when ``ORMWrapper.filter`` names a filter the model does not define."""

    def __init__(self, filter_name: str, model_name: str):
        super().__init__(
            f"Model '{model_name}' has no filter named '{filter_name}'",
            code="FILTER_NOT_FOUND",
        )
        self.filter_name = filter_name
        self.model_name = model_name

class UnboundModelError(ORMException):
    def __init__(self, model_name: str):
        super().__init__(f"{model_name} instance is not bound to a row", code="UNBOUND_MODEL")

class PrimaryKeyMissingError(ORMException):
    def __init__(self, table_name: str, operation: str):
        super().__init__(
            f"Cannot {operation} a row of '{table_name}' without a primary key value",
            code="PRIMARY_KEY_MISSING",
        )
