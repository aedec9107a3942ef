"""RowORM - a small row mapper and statement builder over one DB-API connection."""

from __future__ import annotations

from row_orm.core.connection import ConnectionConfig, ConnectionManager
from row_orm.core.engine import Engine
from row_orm.core.enums import ColumnRole, DatabaseBackend
from row_orm.core.exceptions import (
    AdapterError,
    ColumnTypeError,
    ConfigurationError,
    DatabaseError,
    InvalidPageSizeError,
    MappingError,
    MissingPrimaryKeyError,
    MultiplePrimaryKeysError,
    ParameterBindingError,
    RowOrmError,
)
from row_orm.mapping import (
    ColumnMeta,
    Row,
    RowMapper,
    TableMeta,
    column,
    created_timestamp,
    primary_key,
    resolve,
    table,
    updated_timestamp,
)
from row_orm.query.bound import BoundQuery
from row_orm.query.pager import Paginated

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Engine
    "Engine",
    # Declaration
    "Row",
    "table",
    "column",
    "primary_key",
    "created_timestamp",
    "updated_timestamp",
    # Mapping
    "ColumnMeta",
    "TableMeta",
    "resolve",
    "RowMapper",
    # Results
    "BoundQuery",
    "Paginated",
    # Enums
    "DatabaseBackend",
    "ColumnRole",
    # Exceptions
    "RowOrmError",
    "ConfigurationError",
    "MultiplePrimaryKeysError",
    "MissingPrimaryKeyError",
    "InvalidPageSizeError",
    "ParameterBindingError",
    "AdapterError",
    "MappingError",
    "ColumnTypeError",
    "DatabaseError",
]
