"""Column metadata resolution.

``resolve(row_type)`` inspects a row type once and caches the resulting
TableMeta for the lifetime of the process. Concurrent first uses may each
build the metadata, but ``dict.setdefault`` keeps exactly one and every
caller gets that one, so no lock is needed.
"""

from __future__ import annotations

import dataclasses
import logging
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Union

from row_orm.core.enums import ColumnRole
from row_orm.core.exceptions import (
    ConfigurationError,
    MissingPrimaryKeyError,
    MultiplePrimaryKeysError,
)
from row_orm.mapping.declare import NAME_KEY, ROLE_KEY, Row

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnMeta:
    """A declared column: database name, attribute, role and value type."""

    name: str
    attribute: str
    role: ColumnRole
    python_type: type | None
    nullable: bool = True

    def get(self, row: Any) -> Any:
        return getattr(row, self.attribute)


@dataclass(frozen=True)
class TableMeta:
    """Resolved metadata of one row type."""

    row_type: type
    table: str
    columns: tuple[ColumnMeta, ...]
    primary_key: ColumnMeta | None
    _by_name: dict[str, ColumnMeta] = field(repr=False, compare=False)
    _by_folded_name: dict[str, ColumnMeta] = field(repr=False, compare=False)

    @property
    def created_columns(self) -> tuple[ColumnMeta, ...]:
        return tuple(c for c in self.columns if c.role is ColumnRole.CREATED_TIMESTAMP)

    @property
    def updated_columns(self) -> tuple[ColumnMeta, ...]:
        return tuple(c for c in self.columns if c.role is ColumnRole.UPDATED_TIMESTAMP)

    @property
    def insertable_columns(self) -> tuple[ColumnMeta, ...]:
        """Plain columns: the only ones a bean may supply."""
        return tuple(c for c in self.columns if c.role is ColumnRole.COLUMN)

    def lookup(self, label: str) -> ColumnMeta | None:
        """Find a column by result label, falling back to a case-insensitive match."""
        found = self._by_name.get(label)
        if found is None:
            found = self._by_folded_name.get(label.lower())
        return found

    def has_column(self, name: str) -> bool:
        return self.lookup(name) is not None

    def column(self, name: str) -> ColumnMeta:
        found = self.lookup(name)
        if found is None:
            raise ConfigurationError(f"{self.row_type.__name__} has no column '{name}'")
        return found

    def require_primary_key(self, operation: str) -> ColumnMeta:
        if self.primary_key is None:
            raise MissingPrimaryKeyError(self.row_type.__name__, operation)
        return self.primary_key

    def primary_key_value(self, row: Any, operation: str = "identify") -> Any:
        value = self.require_primary_key(operation).get(row)
        if value is None:
            raise ConfigurationError(
                f"Cannot {operation} {self.row_type.__name__}: primary key is not set"
            )
        return value


def _unwrap_optional(tp: Any) -> tuple[type | None, bool]:
    """Return (value type, nullable) for an annotation."""
    origin = typing.get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        nullable = len(args) < len(typing.get_args(tp))
        if len(args) == 1:
            inner, _ = _unwrap_optional(args[0])
            return inner, nullable
        return None, nullable
    if isinstance(tp, type):
        return tp, False
    return None, True


def _type_hints(row_type: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(row_type)
    except (NameError, TypeError):
        # Unresolvable forward references: fall back to raw annotations
        return {f.name: f.type for f in dataclasses.fields(row_type)}


def _build(row_type: type) -> TableMeta:
    if not isinstance(row_type, type) or not dataclasses.is_dataclass(row_type):
        raise ConfigurationError(f"Row type must be a dataclass: {row_type!r}")
    if not issubclass(row_type, Row):
        raise ConfigurationError(f"{row_type.__name__} must subclass Row")
    table_name = getattr(row_type, "__tablename__", None)
    if not table_name:
        raise ConfigurationError(
            f"{row_type.__name__} has no table: decorate it with @table(...)"
        )

    hints = _type_hints(row_type)
    columns: list[ColumnMeta] = []
    for f in dataclasses.fields(row_type):
        if not f.init:
            continue
        python_type, nullable = _unwrap_optional(hints.get(f.name))
        columns.append(
            ColumnMeta(
                name=f.metadata.get(NAME_KEY, f.name),
                attribute=f.name,
                role=f.metadata.get(ROLE_KEY, ColumnRole.COLUMN),
                python_type=python_type,
                nullable=nullable,
            )
        )

    keys = [c for c in columns if c.role is ColumnRole.PRIMARY_KEY]
    if len(keys) > 1:
        raise MultiplePrimaryKeysError(row_type.__name__, [c.name for c in keys])

    names = [c.name for c in columns]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigurationError(f"{row_type.__name__} maps columns more than once: {duplicates}")

    return TableMeta(
        row_type=row_type,
        table=table_name,
        columns=tuple(columns),
        primary_key=keys[0] if keys else None,
        _by_name={c.name: c for c in columns},
        _by_folded_name={c.name.lower(): c for c in columns},
    )


_cache: dict[type, TableMeta] = {}


def resolve(row_type: type) -> TableMeta:
    """Return the cached TableMeta for *row_type*, building it on first use.

    Raises:
        ConfigurationError: If the row type is not a dataclass ``Row`` bound
            to a table, or maps a column twice.
        MultiplePrimaryKeysError: If more than one primary key is declared.
    """
    meta = _cache.get(row_type)
    if meta is None:
        meta = _cache.setdefault(row_type, _build(row_type))
        logger.debug(f"Resolved {row_type.__name__} -> {meta.table} ({len(meta.columns)} columns)")
    return meta
