"""Mapper protocol.

The Engine maps single-row results with map_one and cursors with
map_cursor. RowMapper is the built-in implementation.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class Mapper(Protocol[T]):
    """Base mapper protocol."""

    def map_one(self, row: dict[str, Any]) -> T:
        """Map a single row dict to a target object."""
        ...

    def map_many(self, rows: list[dict[str, Any]]) -> list[T]:
        """Map multiple row dicts to a list of target objects."""
        ...

    def map_cursor(self, cursor: Any) -> list[T]:
        """Map the remaining rows of an executed cursor."""
        ...
