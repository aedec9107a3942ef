"""Integration tests against an in-memory SQLite database.

Covers: inserts with timestamp population, fluent selects, counts,
pagination, raw SQL with extra columns, updates, scalar queries and
statement timeouts.
"""

from __future__ import annotations

import math
import sqlite3
import time
from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from row_orm import (
    ColumnTypeError,
    DatabaseError,
    Engine,
    InvalidPageSizeError,
    MappingError,
    Row,
    column,
    created_timestamp,
    primary_key,
    table,
    updated_timestamp,
)

# --- Test models ---


@table("member")
@dataclass
class Member(Row):
    id: int = primary_key()
    name: str = column()
    created_on: int = created_timestamp(name="createdOn")
    updated_on: int = updated_timestamp(name="updatedOn")


@table("blog")
@dataclass
class Blog(Row):
    id: int = primary_key()
    member_id: int = column(name="memberId")
    title: str = column()
    created_on: int = created_timestamp(name="createdOn")
    updated_on: int = updated_timestamp(name="updatedOn")


@dataclass
class MemberForm:
    id: int
    name: str


class MemberModel(BaseModel):
    name: str


def _insert_members(engine: Engine, count: int) -> None:
    for i in range(1, count + 1):
        engine.insert(Member).value("name", f"m{i}").execute()


def _now() -> int:
    return int(time.time())


# --- Insert ---


@pytest.mark.integration
class TestInsert:
    def test_execute_select_returns_inserted_row(self, engine: Engine) -> None:
        member = engine.insert(Member).value("name", "John").execute_select()
        assert member.name == "John"
        assert member.id == 1

    def test_timestamps_are_populated(self, engine: Engine) -> None:
        member = engine.insert(Member).value("name", "John").execute_select()
        assert abs(member.created_on - _now()) < 3
        assert abs(member.updated_on - _now()) < 3

    def test_explicit_timestamp_is_kept(self, engine: Engine) -> None:
        member = (
            engine.insert(Member)
            .value("name", "John")
            .value("createdOn", 1410581698)
            .execute_select()
        )
        assert member.created_on == 1410581698
        assert abs(member.updated_on - _now()) < 3

    def test_insert_by_dataclass_bean_ignores_primary_key(self, engine: Engine) -> None:
        member = engine.insert(Member).value_by_bean(MemberForm(id=99, name="Nick")).execute_select()
        assert member.name == "Nick"
        assert member.id == 1

    def test_insert_by_pydantic_bean(self, engine: Engine) -> None:
        member = engine.insert(Member).value_by_bean(MemberModel(name="Taro")).execute_select()
        assert member.name == "Taro"

    def test_execute_returns_row_count(self, engine: Engine) -> None:
        assert engine.insert(Member).value("name", "m1").execute() == 1

    def test_explicit_primary_key_is_used_for_refetch(self, engine: Engine) -> None:
        member = engine.insert(Member).value("id", 42).value("name", "x").execute_select()
        assert member.id == 42


# --- Select ---


@pytest.mark.integration
class TestSelect:
    def test_single_by_sql(self, engine: Engine) -> None:
        engine.update_by_sql(
            "INSERT INTO member (name, createdOn, updatedOn) VALUES ('m1',1410581698,1410581698)"
        )
        got = engine.single_by_sql(Member, "SELECT * FROM member WHERE name=?", ["m1"])
        assert got is not None
        assert got.id == 1
        assert got.name == "m1"
        assert got.created_on == 1410581698

    def test_single_by_sql_picks_matching_row(self, engine: Engine) -> None:
        engine.insert(Member).value("name", "m1").execute_select()
        member2 = engine.insert(Member).value("name", "m2").execute_select()
        engine.insert(Member).value("name", "m3").execute_select()

        got = engine.single_by_sql(Member, "SELECT * FROM member WHERE name=?", ["m2"])
        assert got.id == member2.id
        assert got.name == "m2"

    def test_single_with_where(self, engine: Engine) -> None:
        _insert_members(engine, 3)
        got = engine.single(Member).where("name=?", "m2").execute()
        assert got is not None
        assert got.id == 2

    def test_single_returns_none_on_zero_rows(self, engine: Engine) -> None:
        assert engine.single(Member).where("name=?", "nobody").execute() is None
        assert engine.single_by_sql(Member, "SELECT * FROM member WHERE id=?", [999]) is None

    def test_search_with_where_and_order(self, engine: Engine) -> None:
        engine.insert(Member).value("name", "m1").execute()
        engine.insert(Member).value("name", "m2").execute()
        engine.insert(Member).value("name", "b1").execute()

        got = engine.search(Member).where("name LIKE ?", "m%").order_by("id DESC").execute()
        assert [m.name for m in got] == ["m2", "m1"]

    def test_search_with_limit_and_offset(self, engine: Engine) -> None:
        _insert_members(engine, 5)
        got = engine.search(Member).order_by("id").limit(2).offset(1).execute()
        assert [m.id for m in got] == [2, 3]

    def test_count(self, engine: Engine) -> None:
        engine.insert(Member).value("name", "m1").execute()
        engine.insert(Member).value("name", "m2").execute()
        engine.insert(Member).value("name", "b1").execute()

        assert engine.count(Member).execute() == 3
        assert engine.count(Member).where("name LIKE 'm%'").execute() == 2
        assert engine.count(Member).where("name LIKE ? || '%'", "b").execute() == 1


# --- Raw SQL and extra columns ---


@pytest.mark.integration
class TestSearchBySQL:
    def test_extra_columns(self, engine: Engine) -> None:
        _insert_members(engine, 10)
        members = engine.search_by_sql(
            Member, "SELECT id, id+1 AS idPlusOne FROM member ORDER BY id DESC"
        )
        assert len(members) == 10
        assert ",".join(str(m.id) for m in members) == "10,9,8,7,6,5,4,3,2,1"
        assert ",".join(str(m.get_extra_column("idPlusOne")) for m in members) == (
            "11,10,9,8,7,6,5,4,3,2"
        )
        assert ",".join(str(m.extra_columns["idPlusOne"]) for m in members) == (
            "11,10,9,8,7,6,5,4,3,2"
        )
        # columns not selected keep their defaults
        assert members[0].name is None

    def test_extra_column_respects_as_label(self, engine: Engine) -> None:
        _insert_members(engine, 10)
        for i in range(1, 11):
            engine.insert(Blog).value("memberId", i).value("title", f"t{i}").execute()

        blogs = engine.search_by_sql(
            Blog,
            "SELECT blog.*, member.name AS memberName FROM member "
            "INNER JOIN blog ON (blog.memberId=member.id) ORDER BY blog.id DESC LIMIT 1",
        )
        assert len(blogs) == 1
        assert blogs[0].member_id == 10
        assert blogs[0].get_extra_column("memberName") == "m10"
        assert list(blogs[0].extra_columns) == ["memberName"]

    def test_uncoercible_value_raises_mapping_error(self, engine: Engine) -> None:
        with pytest.raises(ColumnTypeError, match="'id'"):
            engine.search_by_sql(Member, "SELECT 'abc' AS id")

    def test_map_rows_from_cursor(self, engine: Engine) -> None:
        engine.update_by_sql(
            "INSERT INTO member (name, createdOn, updatedOn) "
            "VALUES ('m1', strftime('%s','now'), strftime('%s','now'))"
        )
        cursor = engine.connection.execute("SELECT * FROM member")
        members = engine.map_rows(Member, cursor)
        assert len(members) == 1
        assert isinstance(members[0].created_on, int)


# --- Pagination ---


@pytest.mark.integration
class TestPagination:
    def test_search_with_pager(self, engine: Engine) -> None:
        _insert_members(engine, 10)

        counts = []
        flags = []
        for offset in (0, 4, 8, 12):
            page = engine.search_with_pager(Member, 4).offset(offset).execute()
            assert page.entries_per_page == 4
            counts.append(len(page.rows))
            flags.append(page.has_next_page)
        assert counts == [4, 4, 2, 0]
        assert flags == [True, True, False, False]

        page = engine.search_with_pager(Member, 5).offset(0).execute()
        assert len(page.rows) == 5
        assert page.entries_per_page == 5
        assert page.has_next_page is True

    def test_search_by_sql_with_pager(self, engine: Engine) -> None:
        _insert_members(engine, 10)

        page = engine.search_by_sql_with_pager(
            Member, "SELECT * FROM member ORDER BY id DESC", [], 4
        )
        assert (len(page.rows), page.entries_per_page, page.has_next_page) == (4, 4, True)
        assert [m.id for m in page.rows] == [10, 9, 8, 7]

        page = engine.search_by_sql_with_pager(
            Member, "SELECT * FROM member WHERE id<7 ORDER BY id DESC", [], 4
        )
        assert page.has_next_page is True
        assert [m.id for m in page.rows] == [6, 5, 4, 3]

        page = engine.search_by_sql_with_pager(
            Member, "SELECT * FROM member WHERE id<? ORDER BY id DESC", [3], 4
        )
        assert page.has_next_page is False
        assert [m.id for m in page.rows] == [2, 1]

        page = engine.search_by_sql_with_pager(
            Member, "SELECT * FROM member WHERE id<? ORDER BY id DESC", [3], 10
        )
        assert page.entries_per_page == 10
        assert page.has_next_page is False
        assert [m.id for m in page.rows] == [2, 1]

    @pytest.mark.parametrize("total", [0, 1, 4, 7, 10])
    @pytest.mark.parametrize("page_size", [1, 3, 4, 10])
    def test_pages_cover_all_rows(self, engine: Engine, total: int, page_size: int) -> None:
        _insert_members(engine, total)

        sizes = []
        offset = 0
        while True:
            page = engine.search_with_pager(Member, page_size).offset(offset).execute()
            if page.rows:
                sizes.append(len(page.rows))
            if not page.has_next_page:
                break
            offset += page_size

        assert len(sizes) == math.ceil(total / page_size)
        assert sum(sizes) == total

    @pytest.mark.parametrize("page_size", [0, -1])
    def test_invalid_page_size_rejected_before_execution(
        self, engine: Engine, page_size: int
    ) -> None:
        with pytest.raises(InvalidPageSizeError):
            engine.search_with_pager(Member, page_size)
        with pytest.raises(InvalidPageSizeError):
            engine.search_by_sql_with_pager(Member, "SELECT * FROM nowhere", [], page_size)


# --- Update / refetch / delete ---


@pytest.mark.integration
class TestUpdate:
    def test_update_rewrites_cleared_updated_timestamp(self, engine: Engine) -> None:
        created = engine.insert(Member).value("name", "John").execute_select()
        assert abs(created.updated_on - _now()) < 3

        engine.update_by_sql("UPDATE member SET updatedOn=NULL")
        assert engine.refetch(created).updated_on is None

        assert engine.update_by_bean(created, {"name": "Taro"}) == 1
        updated = engine.refetch(created)
        assert updated is not None
        assert updated.name == "Taro"
        assert updated.updated_on is not None
        assert abs(updated.updated_on - _now()) < 3

    def test_update_without_changes_still_touches_timestamp(self, engine: Engine) -> None:
        created = engine.insert(Member).value("name", "John").execute_select()
        engine.update_by_sql("UPDATE member SET updatedOn=NULL")

        assert engine.update(created).execute() == 1
        assert engine.refetch(created).updated_on is not None

    def test_update_set_column(self, engine: Engine) -> None:
        created = engine.insert(Member).value("name", "John").execute_select()
        engine.update(created).set("name", "Jane").execute()
        assert engine.refetch(created).name == "Jane"

    def test_refetch_missing_row_returns_none(self, engine: Engine) -> None:
        assert engine.refetch(Member(id=123)) is None

    def test_delete(self, engine: Engine) -> None:
        member = engine.insert(Member).value("name", "John").execute_select()
        assert engine.delete(member) == 1
        assert engine.refetch(member) is None


# --- Scalars and raw queries ---


@pytest.mark.integration
class TestScalarQueries:
    def test_query_for_long(self, engine: Engine) -> None:
        engine.update_by_sql("CREATE TEMPORARY TABLE x (y integer, z varchar(255))")
        assert engine.update_by_sql("INSERT INTO x (y,z) values (5963, 'hey')") == 1

        assert engine.query_for_long("SELECT y FROM x WHERE z='hey'") == 5963
        assert engine.query_for_long("SELECT y FROM x WHERE z='nothing'") is None
        assert engine.query_for_long("SELECT y FROM x WHERE z=?", ["hey"]) == 5963
        assert engine.query_for_long("SELECT y FROM x WHERE z=?", ["Nothing"]) is None

    def test_query_for_string(self, engine: Engine) -> None:
        engine.update_by_sql("CREATE TEMPORARY TABLE x (y varchar(255), z varchar(255))")
        engine.update_by_sql("INSERT INTO x (y,z) values ('ho', 'hey')")

        assert engine.query_for_string("SELECT y FROM x WHERE z='hey'") == "ho"
        assert engine.query_for_string("SELECT y FROM x WHERE z='nothing'") is None
        assert engine.query_for_string("SELECT y FROM x WHERE z=?", ["hey"]) == "ho"
        assert engine.query_for_string("SELECT y FROM x WHERE z=?", ["Nothing"]) is None

    def test_execute_query(self, engine: Engine) -> None:
        assert engine.execute_query("SELECT 1 AS one") == [{"one": 1}]
        assert engine.execute_query("SELECT 1+? AS total", [3]) == [{"total": 4}]

    def test_execute_query_with_transform(self, engine: Engine) -> None:
        engine.insert(Member).value("name", "John").execute()
        engine.insert(Member).value("name", "Taro").execute()

        got = engine.execute_query(
            "SELECT id, name FROM member ORDER BY id ASC",
            transform=lambda cursor: "".join(f"{id_}:{name}\n" for id_, name in cursor.fetchall()),
        )
        assert got == "1:John\n2:Taro\n"

    def test_get_table_name(self, engine: Engine) -> None:
        assert engine.get_table_name(Member) == "member"


# --- Errors and timeouts ---


@pytest.mark.integration
class TestDatabaseErrors:
    def test_driver_error_is_wrapped(self, engine: Engine) -> None:
        with pytest.raises(DatabaseError) as exc_info:
            engine.update_by_sql("INSERT INTO no_such_table (a) VALUES (1)")
        assert isinstance(exc_info.value.cause, sqlite3.OperationalError)
        assert exc_info.value.__cause__ is exc_info.value.cause

    def test_query_timeout(self, engine: Engine) -> None:
        engine.set_query_timeout(0.2)
        slow = (
            "WITH RECURSIVE c(x) AS (SELECT 1 UNION ALL SELECT x+1 FROM c WHERE x < 100000000) "
            "SELECT COUNT(*) FROM c"
        )
        with pytest.raises(DatabaseError) as exc_info:
            engine.query_for_long(slow)
        cause = exc_info.value.cause
        assert isinstance(cause, sqlite3.OperationalError)
        assert "interrupted" in str(cause)

    def test_query_within_timeout(self, engine: Engine) -> None:
        engine.set_query_timeout(1)
        assert engine.query_for_long("SELECT 3") == 3

    def test_timeout_can_be_cleared(self, engine: Engine) -> None:
        engine.set_query_timeout(1)
        engine.set_query_timeout(None)
        assert engine.query_timeout is None
        assert engine.query_for_long("SELECT 3") == 3

    def test_direct_cursor_not_bound_by_finished_statement(self, engine: Engine) -> None:
        engine.set_query_timeout(0.05)
        assert engine.query_for_long("SELECT 1") == 1
        time.sleep(0.1)
        cursor = engine.connection.execute(
            "WITH RECURSIVE c(x) AS (SELECT 1 UNION ALL SELECT x+1 FROM c WHERE x < 100000) "
            "SELECT COUNT(*) FROM c"
        )
        assert cursor.fetchone() == (100000,)

    def test_non_numeric_long_is_mapping_error(self, engine: Engine) -> None:
        with pytest.raises(MappingError):
            engine.query_for_long("SELECT 'abc'")


# --- Raw SQL text ---


@pytest.mark.integration
class TestRawSqlText:
    def test_question_mark_in_quoted_identifier(self, engine: Engine) -> None:
        _insert_members(engine, 1)
        assert engine.execute_query('SELECT name AS "who?" FROM member') == [{"who?": "m1"}]

    def test_question_mark_in_comment(self, engine: Engine) -> None:
        _insert_members(engine, 2)
        members = engine.search_by_sql(Member, "SELECT * FROM member -- why?\nWHERE id > ?", [1])
        assert [m.name for m in members] == ["m2"]

    def test_pager_after_trailing_comment(self, engine: Engine) -> None:
        _insert_members(engine, 5)
        page = engine.search_by_sql_with_pager(
            Member, "SELECT * FROM member ORDER BY id -- oldest first", [], 2
        )
        assert [m.name for m in page] == ["m1", "m2"]
        assert page.has_next_page is True

    def test_count_accepts_ordering_and_offset(self, engine: Engine) -> None:
        _insert_members(engine, 3)
        assert engine.count(Member).order_by("id").offset(1).execute() == 3
