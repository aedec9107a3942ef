"""Database backend and column role enumerations."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"


class ColumnRole(Enum):
    """Role of a declared column. Exactly one per field."""

    PRIMARY_KEY = "primary_key"
    COLUMN = "column"
    CREATED_TIMESTAMP = "created_timestamp"
    UPDATED_TIMESTAMP = "updated_timestamp"

    @property
    def is_timestamp(self) -> bool:
        return self in (ColumnRole.CREATED_TIMESTAMP, ColumnRole.UPDATED_TIMESTAMP)
