"""RowORM exception hierarchy.

Driver exceptions never escape the Engine directly: they are wrapped in
DatabaseError with the original exception chained as ``__cause__``.
"""

from __future__ import annotations

from typing import Any


class RowOrmError(Exception):
    """Base exception for all RowORM errors."""


# --- Configuration ---


class ConfigurationError(RowOrmError):
    """Raised for invalid row declarations or invalid call arguments."""


class MultiplePrimaryKeysError(ConfigurationError):
    """Raised when a row type declares more than one primary key."""

    def __init__(self, row_type: str, columns: list[str]) -> None:
        self.row_type = row_type
        self.columns = columns
        super().__init__(f"{row_type} declares multiple primary keys: {columns}")


class MissingPrimaryKeyError(ConfigurationError):
    """Raised when an operation needs a primary key the row type does not declare."""

    def __init__(self, row_type: str, operation: str) -> None:
        self.row_type = row_type
        self.operation = operation
        super().__init__(f"Cannot {operation} {row_type}: no primary key declared")


class InvalidPageSizeError(ConfigurationError):
    """Raised when a pager is created with a page size below 1."""

    def __init__(self, page_size: int) -> None:
        self.page_size = page_size
        super().__init__(f"Page size must be >= 1, got {page_size}")


class ParameterBindingError(ConfigurationError):
    """Raised when placeholder and bind value counts disagree."""

    def __init__(self, sql: str, placeholders: int, params: int) -> None:
        self.sql = sql
        self.placeholders = placeholders
        self.params = params
        super().__init__(
            f"SQL has {placeholders} placeholder(s) but {params} bind value(s): {sql}"
        )


class AdapterError(ConfigurationError):
    """Raised when a database adapter cannot be loaded."""


# --- Mapping ---


class MappingError(RowOrmError):
    """Base for row mapping errors."""


class ColumnTypeError(MappingError):
    """Raised when a column value cannot be coerced to its field type."""

    def __init__(self, row_type: str, column: str, value: Any, target: str) -> None:
        self.row_type = row_type
        self.column = column
        self.value = value
        self.target = target
        super().__init__(
            f"Cannot map column '{column}' of {row_type}: "
            f"{value!r} is not convertible to {target}"
        )


# --- Execution ---


class DatabaseError(RowOrmError):
    """Wraps any error reported by the database driver.

    The driver exception is available as ``cause`` (and ``__cause__``);
    inspect it to tell e.g. a statement timeout from a constraint violation.
    """

    def __init__(self, sql: str, params: tuple[Any, ...] = (), detail: str = "") -> None:
        self.sql = sql
        self.params = params
        super().__init__(f"{detail or 'Database error'} while executing: {sql}")

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__
