"""Shared test fixtures."""

from __future__ import annotations

import pytest

from row_orm.core.connection import ConnectionConfig
from row_orm.core.engine import Engine

MEMBER_DDL = (
    "CREATE TABLE member ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "name VARCHAR(255), "
    "createdOn INTEGER DEFAULT NULL, "
    "updatedOn INTEGER DEFAULT NULL)"
)

BLOG_DDL = (
    "CREATE TABLE blog ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "memberId INTEGER NOT NULL, "
    "title VARCHAR(255), "
    "createdOn INTEGER DEFAULT NULL, "
    "updatedOn INTEGER DEFAULT NULL)"
)


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config."""
    return ConnectionConfig(driver="sqlite", database=":memory:")


@pytest.fixture
def engine(sqlite_config: ConnectionConfig):
    """Engine over an in-memory SQLite database with member and blog tables."""
    eng = Engine.from_config(sqlite_config)
    eng.update_by_sql(MEMBER_DDL)
    eng.update_by_sql(BLOG_DDL)
    yield eng
    eng.close()
