"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
ConnectionManager owns exactly one live connection, opened lazily through
the adapter selected by the configured driver.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

from pydantic import BaseModel, field_validator

from row_orm.core.enums import DatabaseBackend
from row_orm.core.exceptions import AdapterError

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for a database connection."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    query_timeout: float | None = None
    extra: dict[str, Any] = {}

    @field_validator("driver")
    @classmethod
    def _known_driver(cls, value: str) -> str:
        try:
            return DatabaseBackend(value.lower()).value
        except ValueError:
            raise ValueError(f"Unsupported database driver: {value}") from None

    @field_validator("query_timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("query_timeout must be positive")
        return value


# Adapter module mapping: backend → (module_path, class_name)
_ADAPTER_MAP: dict[DatabaseBackend, tuple[str, str]] = {
    DatabaseBackend.SQLITE: ("row_orm.adapters.sqlite", "SqliteAdapter"),
    DatabaseBackend.POSTGRESQL: ("row_orm.adapters.postgresql", "PostgresqlAdapter"),
    DatabaseBackend.MYSQL: ("row_orm.adapters.mysql", "MysqlAdapter"),
}


def load_adapter(driver: str) -> Any:
    """Load an adapter by driver name."""
    try:
        backend = DatabaseBackend(driver.lower())
    except ValueError:
        raise AdapterError(f"Unsupported database driver: {driver}") from None

    module_path, cls_name = _ADAPTER_MAP[backend]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e


class ConnectionManager:
    """Holds a single connection and the adapter that drives it."""

    def __init__(
        self,
        config: ConnectionConfig | None = None,
        adapter: Any = None,
        connection: Any = None,
    ) -> None:
        if adapter is None:
            if config is None:
                raise AdapterError("ConnectionManager needs a config or an adapter")
            adapter = load_adapter(config.driver)
        self.config = config
        self._adapter = adapter
        self._connection: Any = connection

    @classmethod
    def from_connection(cls, connection: Any, driver: str) -> ConnectionManager:
        """Wrap an already open DB-API connection."""
        return cls(adapter=load_adapter(driver), connection=connection)

    @property
    def adapter(self) -> Any:
        return self._adapter

    @property
    def connection(self) -> Any:
        """The live connection, opened on first access."""
        if self._connection is None:
            if self.config is None:
                raise AdapterError("Connection is closed and there is no config to reopen it")
            logger.debug(f"Opening {self.config.driver} connection to {self.config.database}")
            self._connection = self._adapter.connect(self.config)
        return self._connection

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def close(self) -> None:
        """Close the connection if it was opened."""
        if self._connection is not None:
            self._adapter.close(self._connection)
            self._connection = None
            logger.debug("Connection closed")
