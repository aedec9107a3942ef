"""Row type declaration helpers.

A row type is a dataclass subclassing Row and bound to a table::

    @table("member")
    @dataclass
    class Member(Row):
        id: int = primary_key()
        name: str = column()
        created_on: int = created_timestamp(name="createdOn")
        updated_on: int = updated_timestamp(name="updatedOn")

Every helper defaults the field to ``None`` so rows can be built from
queries that select only some of the columns.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any, TypeVar

from row_orm.core.enums import ColumnRole

T = TypeVar("T")

ROLE_KEY = "row_orm.role"
NAME_KEY = "row_orm.column"


class Row:
    """Base class for row types.

    Columns selected by a query that match no declared field are kept in
    ``extra_columns``, keyed by the label the database reported.
    """

    @property
    def extra_columns(self) -> dict[str, Any]:
        return self.__dict__.setdefault("_extra_columns", {})

    def get_extra_column(self, name: str, default: Any = None) -> Any:
        return self.extra_columns.get(name, default)


def table(name: str) -> Callable[[type[T]], type[T]]:
    """Class decorator binding a row type to a table name."""

    def decorate(cls: type[T]) -> type[T]:
        cls.__tablename__ = name  # type: ignore[attr-defined]
        return cls

    return decorate


def _field(role: ColumnRole, name: str | None, kwargs: dict[str, Any]) -> Any:
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[ROLE_KEY] = role
    if name is not None:
        metadata[NAME_KEY] = name
    if "default" not in kwargs and "default_factory" not in kwargs:
        kwargs["default"] = None
    return dataclasses.field(metadata=metadata, **kwargs)


def primary_key(*, name: str | None = None, **kwargs: Any) -> Any:
    """Declare the (single-column) primary key."""
    return _field(ColumnRole.PRIMARY_KEY, name, kwargs)


def column(*, name: str | None = None, **kwargs: Any) -> Any:
    """Declare a plain column. *name* overrides the column name."""
    return _field(ColumnRole.COLUMN, name, kwargs)


def created_timestamp(*, name: str | None = None, **kwargs: Any) -> Any:
    """Declare an epoch-seconds column set once at insert."""
    return _field(ColumnRole.CREATED_TIMESTAMP, name, kwargs)


def updated_timestamp(*, name: str | None = None, **kwargs: Any) -> Any:
    """Declare an epoch-seconds column rewritten on insert and every update."""
    return _field(ColumnRole.UPDATED_TIMESTAMP, name, kwargs)
