"""Offset pagination.

Pages are fetched with ``LIMIT page_size + 1``: the extra row is never
returned, it only tells whether another page exists.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from row_orm.core.exceptions import ConfigurationError, InvalidPageSizeError
from row_orm.query.bound import BoundQuery
from row_orm.query.select import OrderedStatement

if TYPE_CHECKING:
    from row_orm.core.engine import Engine

T = TypeVar("T")


@dataclass(frozen=True)
class Paginated(Generic[T]):
    """One page of rows."""

    rows: list[T]
    entries_per_page: int
    has_next_page: bool

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[T]:
        return iter(self.rows)


def check_page(page_size: int, offset: int = 0) -> None:
    """Validate pager arguments before anything is executed."""
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise InvalidPageSizeError(page_size)
    if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
        raise ConfigurationError(f"offset must be a non-negative integer, got {offset!r}")


def paginate(rows: list[T], page_size: int) -> Paginated[T]:
    """Trim an over-fetched result to one page."""
    return Paginated(
        rows=rows[:page_size],
        entries_per_page=page_size,
        has_next_page=len(rows) > page_size,
    )


def paginate_sql(sql: str, page_size: int, offset: int = 0) -> str:
    """Append the over-fetching LIMIT/OFFSET clause to raw SQL on its own line."""
    check_page(page_size, offset)
    # New line: a trailing -- comment would swallow the clause
    return f"{sql.rstrip().rstrip(';').rstrip()}\nLIMIT {page_size + 1} OFFSET {offset}"


class PaginatedSearchStatement(OrderedStatement[T]):
    """Fluent pager. Without ``order_by`` rows are ordered by primary key."""

    def __init__(self, engine: Engine, row_type: type[T], page_size: int) -> None:
        check_page(page_size)
        super().__init__(engine, row_type)
        self._page_size = page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    def render(self) -> BoundQuery:
        default_order = self._meta.primary_key.name if self._meta.primary_key else None
        return self._render(self._page_size + 1, order_by=self._order_by or default_order)

    def execute(self) -> Paginated[T]:
        rows = self._engine.run_select(self._row_type, self.render())
        return paginate(rows, self._page_size)
