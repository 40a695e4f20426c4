from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Protocol, Tuple, Union
from urllib.parse import quote

from sqlalchemy import Select, String, and_, cast, func
from sqlalchemy.sql.elements import ColumnElement

FilterValue = Optional[Union[str, int]]
Predicate = Callable[[Any], ColumnElement[bool]]


# -----------------------------------------------------------------------------
# Filter Set
# -----------------------------------------------------------------------------
def is_active(value: FilterValue) -> bool:
    """None and blank/whitespace-only strings do not filter anything."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


class FilterEncoder(Protocol):
    def encode(self) -> str: ...


class FilterSet:
    """
    Ordered mapping of query-parameter name -> optional value for one list
    endpoint. Declaration order is preserved and is the order filters are
    written back into pagination links.
    """

    def __init__(self, items: Iterable[Tuple[str, FilterValue]] = ()) -> None:
        self._items: list[tuple[str, FilterValue]] = list(items)

    @classmethod
    def of(cls, **filters: FilterValue) -> "FilterSet":
        return cls(filters.items())

    def __iter__(self) -> Iterator[tuple[str, FilterValue]]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FilterSet):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"FilterSet({self._items!r})"

    def active(self) -> list[tuple[str, Union[str, int]]]:
        return [(name, value) for name, value in self._items if is_active(value)]

    def encode(self) -> str:
        """
        Render active filters as "&name=value" pairs. Values are escaped the
        way .NET's Uri.EscapeDataString does it: only unreserved characters
        survive, a space becomes %20.
        """
        return "".join(
            f"&{name}={quote(str(value), safe='')}" for name, value in self.active()
        )


# -----------------------------------------------------------------------------
# Predicate factories
# -----------------------------------------------------------------------------
def contains(column: Any) -> Predicate:
    """Case-sensitive substring match; % and _ in the value are literal."""
    return lambda value: column.contains(value, autoescape=True)


def text_contains(column: Any) -> Predicate:
    """Substring match against a numeric column rendered as text."""
    return lambda value: cast(column, String).contains(str(value), autoescape=True)


def equals(column: Any) -> Predicate:
    return lambda value: column == value


def iequals(column: Any) -> Predicate:
    """Case-insensitive equality, for short codes like state abbreviations."""
    return lambda value: func.lower(column) == str(value).lower()


# -----------------------------------------------------------------------------
# Builder
# -----------------------------------------------------------------------------
def build_predicates(
    filters: FilterSet,
    rules: Mapping[str, Predicate],
) -> list[ColumnElement[bool]]:
    """One predicate per active filter that has a rule."""
    return [rules[name](value) for name, value in filters.active() if name in rules]


def apply_filters(query: Select, filters: FilterSet, rules: Mapping[str, Predicate]) -> Select:
    """AND together every active filter's predicate. Must run before counting."""
    predicates = build_predicates(filters, rules)
    if predicates:
        query = query.where(and_(*predicates))
    return query
