"""Rendered statements and timestamp helpers shared by the builders."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

from row_orm.core.exceptions import ParameterBindingError
from row_orm.core.params import coerce_params, count_placeholders


@dataclass(frozen=True)
class BoundQuery:
    """SQL text with ``?`` placeholders and its positional bind values.

    Raises:
        ParameterBindingError: If the placeholder count differs from the
            number of bind values.
    """

    sql: str
    params: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", coerce_params(self.params))
        expected = count_placeholders(self.sql)
        if expected != len(self.params):
            raise ParameterBindingError(self.sql, expected, len(self.params))


def epoch_seconds() -> int:
    """Current time as integer seconds since the epoch."""
    return int(time.time())
