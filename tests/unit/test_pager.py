"""Unit tests for pagination helpers."""

from __future__ import annotations

import pytest

from row_orm.core.exceptions import ConfigurationError, InvalidPageSizeError
from row_orm.query.pager import Paginated, check_page, paginate, paginate_sql


class TestPaginate:
    def test_full_page_with_more(self) -> None:
        page = paginate([1, 2, 3, 4, 5], 4)
        assert page == Paginated(rows=[1, 2, 3, 4], entries_per_page=4, has_next_page=True)

    def test_exact_page_has_no_next(self) -> None:
        page = paginate([1, 2, 3, 4], 4)
        assert page.rows == [1, 2, 3, 4]
        assert page.has_next_page is False

    def test_partial_page(self) -> None:
        page = paginate([1, 2], 4)
        assert len(page) == 2
        assert list(page) == [1, 2]
        assert page.has_next_page is False

    def test_empty(self) -> None:
        page = paginate([], 3)
        assert page.rows == []
        assert page.entries_per_page == 3
        assert page.has_next_page is False


class TestCheckPage:
    @pytest.mark.parametrize("page_size", [0, -1, True, 1.5])
    def test_invalid_page_size(self, page_size: object) -> None:
        with pytest.raises(InvalidPageSizeError):
            check_page(page_size)  # type: ignore[arg-type]

    def test_invalid_offset(self) -> None:
        with pytest.raises(ConfigurationError, match="offset"):
            check_page(2, -1)

    def test_valid(self) -> None:
        check_page(1, 0)


class TestPaginateSql:
    def test_appends_over_fetching_limit(self) -> None:
        sql = paginate_sql("SELECT * FROM member ORDER BY id", 4, 8)
        assert sql == "SELECT * FROM member ORDER BY id\nLIMIT 5 OFFSET 8"

    def test_strips_trailing_semicolon(self) -> None:
        sql = paginate_sql("SELECT * FROM member ; ", 2)
        assert sql == "SELECT * FROM member\nLIMIT 3 OFFSET 0"

    def test_trailing_line_comment_keeps_clause(self) -> None:
        sql = paginate_sql("SELECT * FROM member ORDER BY id -- newest last", 2)
        assert sql.splitlines() == [
            "SELECT * FROM member ORDER BY id -- newest last",
            "LIMIT 3 OFFSET 0",
        ]

    def test_rejects_bad_page_size(self) -> None:
        with pytest.raises(InvalidPageSizeError):
            paginate_sql("SELECT 1", 0)
