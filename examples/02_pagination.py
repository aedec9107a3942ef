"""
Example 02: Pagination

This example walks a table page by page, first with the fluent pager and then
with raw SQL.
"""

from dataclasses import dataclass

from row_orm import ConnectionConfig, Engine, Row, column, primary_key, table


@table("member")
@dataclass
class Member(Row):
    id: int = primary_key()
    name: str = column()


def main():
    config = ConnectionConfig(driver="sqlite", database=":memory:")

    with Engine.from_config(config) as engine:
        engine.update_by_sql("CREATE TABLE member (id INTEGER PRIMARY KEY, name TEXT)")
        for i in range(10):
            engine.insert(Member).value("name", f"m{i}").execute()

        print("=== Pagination ===\n")

        # Fluent pager: ordered by primary key unless told otherwise
        print("1. Fluent pager:")
        offset = 0
        while True:
            page = engine.search_with_pager(Member, 4).offset(offset).execute()
            print(f"   offset={offset}: {[m.name for m in page]} (next={page.has_next_page})")
            if not page.has_next_page:
                break
            offset += page.entries_per_page
        print()

        # Raw SQL pager: LIMIT/OFFSET is appended for you
        print("2. Raw SQL pager:")
        page = engine.search_by_sql_with_pager(
            Member, "SELECT * FROM member WHERE id > ? ORDER BY id DESC", [5], 3
        )
        print(f"   {[m.name for m in page]} (next={page.has_next_page})")


if __name__ == "__main__":
    main()
