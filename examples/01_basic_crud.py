"""
Example 01: Basic CRUD

This example declares a row type and inserts, reads, updates and deletes rows
through RowORM's Engine.
"""

from dataclasses import dataclass

from row_orm import (
    ConnectionConfig,
    Engine,
    Row,
    column,
    created_timestamp,
    primary_key,
    table,
    updated_timestamp,
)


@table("member")
@dataclass
class Member(Row):
    """Member row"""
    id: int = primary_key()
    name: str = column()
    created_on: int = created_timestamp(name="createdOn")
    updated_on: int = updated_timestamp(name="updatedOn")


def main():
    config = ConnectionConfig(driver="sqlite", database=":memory:")

    with Engine.from_config(config) as engine:
        engine.update_by_sql(
            "CREATE TABLE member ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, "
            "createdOn INTEGER, updatedOn INTEGER)"
        )

        print("=== Basic CRUD ===\n")

        # Insert and read back, database defaults included
        print("1. Insert:")
        john = engine.insert(Member).value("name", "John").execute_select()
        engine.insert(Member).value("name", "Nick").execute()
        print(f"   {john}\n")

        # Fluent select
        print("2. Select:")
        nick = engine.single(Member).where("name=?", "Nick").execute()
        print(f"   single: {nick}")
        members = engine.search(Member).order_by("id").execute()
        print(f"   search: {[m.name for m in members]}")
        print(f"   count:  {engine.count(Member).execute()}\n")

        # Update rewrites updatedOn automatically
        print("3. Update:")
        engine.update(john).set("name", "Johnny").execute()
        print(f"   {engine.refetch(john)}\n")

        # Delete by primary key
        print("4. Delete:")
        engine.delete(nick)
        print(f"   remaining: {engine.count(Member).execute()}")


if __name__ == "__main__":
    main()
