"""
Example 03: Raw SQL

This example maps hand-written joins onto row types, reads extra columns and
bounds a slow statement with a query timeout.
"""

from dataclasses import dataclass

from row_orm import (
    ConnectionConfig,
    DatabaseError,
    Engine,
    Row,
    column,
    primary_key,
    table,
)


@table("member")
@dataclass
class Member(Row):
    id: int = primary_key()
    name: str = column()


@table("blog")
@dataclass
class Blog(Row):
    id: int = primary_key()
    member_id: int = column(name="memberId")
    title: str = column()


def main():
    config = ConnectionConfig(driver="sqlite", database=":memory:")

    with Engine.from_config(config) as engine:
        engine.update_by_sql("CREATE TABLE member (id INTEGER PRIMARY KEY, name TEXT)")
        engine.update_by_sql(
            "CREATE TABLE blog (id INTEGER PRIMARY KEY, memberId INTEGER, title TEXT)"
        )
        engine.update_by_sql("INSERT INTO member (name) VALUES (?)", ["John"])
        engine.update_by_sql("INSERT INTO blog (memberId, title) VALUES (?, ?)", [1, "Hello"])

        print("=== Raw SQL ===\n")

        # Columns that match no field land in extra_columns
        print("1. Join with extra columns:")
        blogs = engine.search_by_sql(
            Blog,
            "SELECT blog.*, member.name AS memberName "
            "FROM blog JOIN member ON member.id = blog.memberId",
        )
        for blog in blogs:
            print(f"   {blog.title} by {blog.get_extra_column('memberName')}")
        print()

        # Scalars and dicts
        print("2. Scalar queries:")
        print(f"   members: {engine.query_for_long('SELECT COUNT(*) FROM member')}")
        print(f"   rows:    {engine.execute_query('SELECT * FROM member')}\n")

        # Statement timeout
        print("3. Query timeout:")
        engine.set_query_timeout(0.2)
        try:
            engine.query_for_long(
                "WITH RECURSIVE c(x) AS (SELECT 1 UNION ALL SELECT x + 1 FROM c) "
                "SELECT COUNT(*) FROM c"
            )
        except DatabaseError as e:
            print(f"   cancelled: {e.cause}")


if __name__ == "__main__":
    main()
