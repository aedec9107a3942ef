"""SELECT and COUNT statement builders.

Predicates added with ``where`` are parenthesized and ANDed together;
their bind values are kept in the order the fragments were added.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Self, TypeVar

from row_orm.core.exceptions import ConfigurationError
from row_orm.mapping.schema import resolve
from row_orm.query.bound import BoundQuery

if TYPE_CHECKING:
    from row_orm.core.engine import Engine

T = TypeVar("T")


def _check_non_negative(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")
    return value


class FilteredStatement(Generic[T]):
    """Common WHERE handling."""

    def __init__(self, engine: Engine, row_type: type[T]) -> None:
        self._engine = engine
        self._row_type = row_type
        self._meta = resolve(row_type)
        self._where: list[str] = []
        self._params: list[Any] = []

    def where(self, fragment: str, *params: Any) -> Self:
        """AND a predicate fragment, e.g. ``where("name LIKE ?", "m%")``."""
        self._where.append(fragment)
        self._params.extend(params)
        return self

    def _where_sql(self) -> str:
        if not self._where:
            return ""
        return " WHERE " + " AND ".join(f"({fragment})" for fragment in self._where)


class OrderedStatement(FilteredStatement[T]):
    """WHERE plus ORDER BY / OFFSET / FOR UPDATE."""

    def __init__(self, engine: Engine, row_type: type[T]) -> None:
        super().__init__(engine, row_type)
        self._order_by: str | None = None
        self._offset: int | None = None
        self._for_update = False

    def order_by(self, fragment: str) -> Self:
        self._order_by = fragment
        return self

    def offset(self, offset: int) -> Self:
        self._offset = _check_non_negative("offset", offset)
        return self

    def for_update(self) -> Self:
        self._for_update = True
        return self

    def _render(self, limit: int | None, order_by: str | None = None) -> BoundQuery:
        sql = f"SELECT * FROM {self._meta.table}{self._where_sql()}"
        order_by = order_by or self._order_by
        if order_by:
            sql += f" ORDER BY {order_by}"
        if limit is not None:
            sql += f" LIMIT {limit}"
        if self._offset is not None:
            if limit is None:
                raise ConfigurationError("offset() requires a limit")
            sql += f" OFFSET {self._offset}"
        if self._for_update:
            sql += " FOR UPDATE"
        return BoundQuery(sql, tuple(self._params))


class SearchStatement(OrderedStatement[T]):
    """Fetches every matching row."""

    def __init__(self, engine: Engine, row_type: type[T]) -> None:
        super().__init__(engine, row_type)
        self._limit: int | None = None

    def limit(self, limit: int) -> SearchStatement[T]:
        self._limit = _check_non_negative("limit", limit)
        return self

    def render(self) -> BoundQuery:
        return self._render(self._limit)

    def execute(self) -> list[T]:
        return self._engine.run_select(self._row_type, self.render())


class SingleStatement(OrderedStatement[T]):
    """Fetches at most one row; ``None`` when nothing matches."""

    def render(self) -> BoundQuery:
        return self._render(1)

    def execute(self) -> T | None:
        rows = self._engine.run_select(self._row_type, self.render())
        return rows[0] if rows else None


class CountStatement(OrderedStatement[T]):
    """``SELECT COUNT(*)`` over the matching rows.

    Accepts the same chain as the other builders; limit, ordering, offset
    and locking do not change a count and are left out of the rendered SQL.
    """

    def limit(self, limit: int) -> CountStatement[T]:
        _check_non_negative("limit", limit)
        return self

    def render(self) -> BoundQuery:
        return BoundQuery(
            f"SELECT COUNT(*) FROM {self._meta.table}{self._where_sql()}",
            tuple(self._params),
        )

    def execute(self) -> int:
        value = self._engine.run_scalar(self.render())
        return int(value) if value is not None else 0
