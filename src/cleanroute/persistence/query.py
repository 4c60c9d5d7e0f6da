"""Typed query builder for document store lookups.

Filters are frozen tagged variants rather than loose ``(field, op, value)``
tuples, so a malformed filter fails when it is constructed instead of when
the store receives it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union


@dataclass(frozen=True, slots=True)
class Eq:
    field: str
    value: Any


@dataclass(frozen=True, slots=True)
class In:
    field: str
    values: tuple

    def __post_init__(self) -> None:
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))
        if not self.values:
            raise ValueError(f"In filter on '{self.field}' requires at least one value")


@dataclass(frozen=True, slots=True)
class Gte:
    field: str
    value: Any


@dataclass(frozen=True, slots=True)
class Lte:
    field: str
    value: Any


Filter = Union[Eq, In, Gte, Lte]


@dataclass(frozen=True, slots=True)
class OrderBy:
    field: str
    descending: bool = False


def matches(document: Mapping[str, Any], query_filter: Filter) -> bool:
    """Evaluate a single filter against a stored document."""
    value = document.get(query_filter.field)
    if isinstance(query_filter, Eq):
        return value == query_filter.value
    if isinstance(query_filter, In):
        return value in query_filter.values
    if value is None:
        return False
    if isinstance(query_filter, Gte):
        return value >= query_filter.value
    if isinstance(query_filter, Lte):
        return value <= query_filter.value
    raise TypeError(f"Unsupported filter type: {type(query_filter).__name__}")


def matches_all(document: Mapping[str, Any], filters: Iterable[Filter]) -> bool:
    return all(matches(document, query_filter) for query_filter in filters)
