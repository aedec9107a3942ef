"""Row mapper.

Builds row instances from result rows using the resolved TableMeta.
Declared columns are validated against their field type with pydantic in
lax mode; any other selected column is kept in the row's ``extra_columns``.
"""

from __future__ import annotations

import dataclasses
import datetime
import typing
from collections.abc import Iterable, Sequence
from functools import lru_cache
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from row_orm.core.exceptions import ColumnTypeError
from row_orm.mapping.schema import ColumnMeta, TableMeta, resolve

T = TypeVar("T")

# Drivers hand back numbers for text columns (e.g. SQLite type affinity)
_LAX = ConfigDict(coerce_numbers_to_str=True, arbitrary_types_allowed=True)


@lru_cache(maxsize=None)
def _validator(target: type) -> TypeAdapter[Any]:
    # Models, dataclasses and TypedDicts carry their own config
    if (
        dataclasses.is_dataclass(target)
        or typing.is_typeddict(target)
        or issubclass(target, BaseModel)
    ):
        return TypeAdapter(target)
    return TypeAdapter(target, config=_LAX)


def coerce_value(column: ColumnMeta, value: Any) -> Any:
    """Validate a driver value against the column's declared type.

    Timestamp columns always hold epoch seconds. Unannotated columns are
    passed through unchanged.

    Raises:
        pydantic.ValidationError: If the value does not fit the type.
    """
    if value is None:
        return None
    if column.role.is_timestamp:
        if isinstance(value, datetime.datetime):
            return int(value.timestamp())
        return _validator(int).validate_python(value)
    if column.python_type is None:
        return value
    return _validator(column.python_type).validate_python(value)


class RowMapper(Generic[T]):
    """Maps result rows onto a declared row type.

    Args:
        row_type: A dataclass ``Row`` subclass bound to a table.
    """

    def __init__(self, row_type: type[T]) -> None:
        self._row_type = row_type
        self._meta: TableMeta = resolve(row_type)

    @property
    def meta(self) -> TableMeta:
        return self._meta

    def map_one(self, row: dict[str, Any]) -> T:
        """Map a single ``label -> value`` row to a row instance."""
        return self._map_pairs(row.items())

    def map_many(self, rows: list[dict[str, Any]]) -> list[T]:
        """Map all rows via map_one."""
        return [self.map_one(row) for row in rows]

    def map_cursor(self, cursor: Any) -> list[T]:
        """Map every remaining row of an executed DB-API cursor.

        Labels are paired positionally, so a label selected twice
        (e.g. ``blog.*, member.id``) fills the field once and the
        repeat lands in ``extra_columns``.
        """
        labels = cursor_labels(cursor)
        return [self._map_pairs(zip(labels, values, strict=True)) for values in cursor.fetchall()]

    def _map_pairs(self, pairs: Iterable[tuple[str, Any]]) -> T:
        kwargs: dict[str, Any] = {}
        extras: dict[str, Any] = {}
        for label, value in pairs:
            column = self._meta.lookup(label)
            if column is None or column.attribute in kwargs:
                extras[label] = value
                continue
            try:
                kwargs[column.attribute] = coerce_value(column, value)
            except ValidationError as e:
                target = "int" if column.role.is_timestamp else _type_name(column)
                raise ColumnTypeError(self._row_type.__name__, label, value, target) from e

        instance = self._row_type(**kwargs)
        instance.extra_columns.update(extras)  # type: ignore[attr-defined]
        return instance


def _type_name(column: ColumnMeta) -> str:
    return column.python_type.__name__ if column.python_type is not None else "object"


def cursor_labels(cursor: Any) -> list[str]:
    """Column labels of an executed cursor, as reported by the driver."""
    if cursor.description is None:
        return []
    return [desc[0] for desc in cursor.description]


def rows_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert the remaining cursor rows to ``label -> value`` dicts."""
    labels = cursor_labels(cursor)
    if not labels:
        return []
    rows: Sequence[Any] = cursor.fetchall()
    return [dict(zip(labels, row, strict=True)) for row in rows]
