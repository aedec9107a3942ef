"""Unit tests for placeholder handling."""

from __future__ import annotations

from row_orm.core.params import coerce_params, count_placeholders, normalize_params


class TestNormalizeParams:
    def test_qmark_passthrough(self) -> None:
        sql = "SELECT * FROM member WHERE id = ?"
        assert normalize_params(sql, "qmark") == sql

    def test_format_conversion(self) -> None:
        sql = "SELECT * FROM member WHERE id = ? AND name = ?"
        expected = "SELECT * FROM member WHERE id = %s AND name = %s"
        assert normalize_params(sql, "format") == expected

    def test_string_literal_exclusion(self) -> None:
        sql = "SELECT * FROM t WHERE col = 'why?' AND id = ?"
        expected = "SELECT * FROM t WHERE col = 'why?' AND id = %s"
        assert normalize_params(sql, "format") == expected

    def test_escaped_quote_inside_literal(self) -> None:
        sql = "SELECT 'it''s ?' FROM t WHERE id = ?"
        expected = "SELECT 'it''s ?' FROM t WHERE id = %s"
        assert normalize_params(sql, "format") == expected

    def test_percent_is_escaped(self) -> None:
        sql = "SELECT * FROM member WHERE name LIKE 'm%' AND id % 2 = ?"
        expected = "SELECT * FROM member WHERE name LIKE 'm%%' AND id %% 2 = %s"
        assert normalize_params(sql, "format") == expected

    def test_no_params(self) -> None:
        assert normalize_params("SELECT 1", "format") == "SELECT 1"


class TestCountPlaceholders:
    def test_counts_outside_literals_only(self) -> None:
        assert count_placeholders("SELECT '?' FROM t WHERE a = ? AND b = ?") == 2

    def test_none(self) -> None:
        assert count_placeholders("SELECT 1") == 0


class TestCoerceParams:
    def test_none_is_empty(self) -> None:
        assert coerce_params(None) == ()

    def test_list_becomes_tuple(self) -> None:
        assert coerce_params([1, "a"]) == (1, "a")

    def test_scalar_is_wrapped(self) -> None:
        assert coerce_params(5) == (5,)


class TestOpaqueSegments:
    def test_quoted_identifier_is_not_a_placeholder(self) -> None:
        sql = 'SELECT name AS "who?" FROM member WHERE id = ?'
        assert count_placeholders(sql) == 1
        assert normalize_params(sql, "format") == 'SELECT name AS "who?" FROM member WHERE id = %s'

    def test_backquoted_identifier_is_not_a_placeholder(self) -> None:
        assert count_placeholders("SELECT `why?` FROM t") == 0

    def test_line_comment_is_not_a_placeholder(self) -> None:
        sql = "SELECT * FROM member -- why?\nWHERE id = ?"
        assert count_placeholders(sql) == 1
        assert normalize_params(sql, "format") == "SELECT * FROM member -- why?\nWHERE id = %s"

    def test_block_comment_is_not_a_placeholder(self) -> None:
        sql = "SELECT /* id = ?\n or ? */ * FROM member WHERE id = ?"
        assert count_placeholders(sql) == 1

    def test_quote_inside_comment_does_not_open_literal(self) -> None:
        assert count_placeholders("SELECT 1 -- it's\nFROM t WHERE a = ?") == 1
