"""Mapping layer - declare row types and map result rows onto them."""

from __future__ import annotations

from row_orm.mapping.bean import bean_values, columns_from_bean
from row_orm.mapping.declare import (
    Row,
    column,
    created_timestamp,
    primary_key,
    table,
    updated_timestamp,
)
from row_orm.mapping.protocol import Mapper
from row_orm.mapping.row import RowMapper, coerce_value
from row_orm.mapping.schema import ColumnMeta, TableMeta, resolve

__all__ = [
    "Row",
    "table",
    "column",
    "primary_key",
    "created_timestamp",
    "updated_timestamp",
    "ColumnMeta",
    "TableMeta",
    "resolve",
    "Mapper",
    "RowMapper",
    "coerce_value",
    "bean_values",
    "columns_from_bean",
]
