"""Bean value extraction.

A bean is any value holder whose fields are enumerable without guessing:
a dataclass instance, a Pydantic model or a mapping. Only attributes that
name a plain column of the row type are taken; primary key and timestamp
columns are never read from a bean.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from row_orm.core.exceptions import ConfigurationError
from row_orm.mapping.schema import TableMeta


def bean_values(bean: Any) -> dict[str, Any]:
    """Return the declared fields of *bean* as a dict."""
    if isinstance(bean, Mapping):
        return dict(bean)

    # Pydantic model
    if hasattr(type(bean), "model_fields"):
        return {name: getattr(bean, name) for name in type(bean).model_fields}

    # Dataclass instance
    if dataclasses.is_dataclass(bean) and not isinstance(bean, type):
        return {f.name: getattr(bean, f.name) for f in dataclasses.fields(bean)}

    raise ConfigurationError(
        f"Unsupported bean type {type(bean).__name__}: use a dataclass, "
        "a Pydantic model or a mapping"
    )


def columns_from_bean(meta: TableMeta, bean: Any) -> dict[str, Any]:
    """Extract ``column -> value`` pairs for the plain columns of *meta*.

    A bean field matches a column by attribute name or by column name.
    """
    values = bean_values(bean)
    result: dict[str, Any] = {}
    for column in meta.insertable_columns:
        if column.attribute in values:
            result[column.name] = values[column.attribute]
        elif column.name in values:
            result[column.name] = values[column.name]
    return result
