#!/usr/bin/env python3
"""
base.py
-------
Filter / sort / paginate machinery shared by the content aggregators.

Each aggregator owns one content type's in-memory collection. Drafts are
dropped when the aggregator is built; every query then runs the same three
steps:

    filters  → conjunction of typed predicates (empty values are no-ops)
    sort     → closed set of fields per type, type-aware comparison,
               None always last
    paginate → 1-based pages; out-of-range pages give an empty list

Usage:
    aggregator = BlogAggregator(articles)
    page = aggregator.aggregate(
        BlogFilters(persona="dev", tags=["python"]),
        SortConfig(BlogSortField.TITLE, SortDirection.ASC),
        Pagination(page=2, limit=12),
    )
    payload = page.to_dict()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field, fields, is_dataclass
from datetime import datetime
from enum import Enum
from functools import cmp_to_key
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

# --- Local imports ---
from folio.utils.dates import parse_date

T = TypeVar("T")

SERIES_WEIGHT = 5
COLLECTION_WEIGHT = 5
PERSONA_WEIGHT = 3
CATEGORY_WEIGHT = 2
TAG_WEIGHT = 1

DEFAULT_PAGE_SIZE = 10


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def choices(cls) -> List[str]:
        return [direction.value for direction in cls]


@dataclass(frozen=True)
class SortConfig:
    """Sort field and direction. `field` is one of the aggregator's sort enums."""

    field: Enum
    direction: SortDirection = SortDirection.ASC

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field.value, "direction": self.direction.value}


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class ContentCollection(Generic[T]):
    """One page of aggregated content plus the query that produced it."""

    items: List[T]
    total: int
    page: int
    limit: int
    has_more: bool
    filters: Dict[str, Any] = field(default_factory=dict)
    sort: Optional[SortConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire envelope with camelCase keys; items become plain dicts."""
        return {
            "items": [_to_plain(item) for item in self.items],
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "hasMore": self.has_more,
            "filters": self.filters,
            "sort": self.sort.to_dict() if self.sort else None,
        }


def _to_plain(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return _to_plain(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_plain(item) for item in value]
    return value


# ----- Filters -----


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def is_empty_filter(value: Any) -> bool:
    """None, empty strings and empty lists never restrict a query."""
    return value is None or value == "" or value == []


@dataclass
class FilterSet:
    """
    Base for per-type filter dataclasses.

    Subclasses declare their filters as Optional fields; every field is a
    no-op while empty.
    """

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]):
        """
        Build filters from a camelCase (or snake_case) mapping.

        Raises:
            ValueError: On keys that are not filters of this type
        """
        if not mapping:
            return cls()
        known = {f.name: f.name for f in fields(cls)}
        known.update({_camel(f.name): f.name for f in fields(cls)})

        values: Dict[str, Any] = {}
        for key, value in mapping.items():
            if key not in known:
                raise ValueError(
                    f"Unknown filter '{key}' for {cls.__name__}; "
                    f"expected one of: {', '.join(sorted(_camel(f.name) for f in fields(cls)))}"
                )
            values[known[key]] = value
        return cls(**values)

    def validate(self) -> None:
        """
        Check filter values before any item is matched.

        Raises:
            ValueError: On a value that is not a valid filter of its kind
        """

    def active(self) -> Dict[str, Any]:
        """Non-empty filters, keyed by snake_case name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if not is_empty_filter(getattr(self, f.name))
        }

    def to_dict(self) -> Dict[str, Any]:
        return {_camel(name): _to_plain(value) for name, value in self.active().items()}


def matches_any_tag(item_tags: Iterable[str], wanted: Optional[Sequence[str]]) -> bool:
    """Tag intersection; an empty wanted list matches everything."""
    if not wanted:
        return True
    return bool(set(item_tags) & set(wanted))


def matches_search(term: Optional[str], *values: Any) -> bool:
    """Case-insensitive substring match across strings and string lists."""
    if not term:
        return True
    needle = term.casefold()
    for value in values:
        if isinstance(value, str) and needle in value.casefold():
            return True
        if isinstance(value, list) and any(
            isinstance(v, str) and needle in v.casefold() for v in value
        ):
            return True
    return False


def parse_filter_date(value: Optional[str], name: str) -> Optional[datetime]:
    """
    Parse a date filter value.

    Raises:
        ValueError: If a non-empty value is not an ISO-8601 date
    """
    if is_empty_filter(value):
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Invalid {name} filter: {value!r}")
    return parsed


def parse_filter_enum(value: Optional[str], enum_type: type, name: str) -> Optional[Enum]:
    """
    Convert a filter value to a member of `enum_type`.

    Raises:
        ValueError: If a non-empty value is not one of the enum values
    """
    if is_empty_filter(value):
        return None
    try:
        return enum_type(value)
    except ValueError:
        raise ValueError(
            f"Invalid {name} filter: {value!r}; "
            f"expected one of: {', '.join(member.value for member in enum_type)}"
        ) from None


# ----- Sorting -----


def compare_values(a: Any, b: Any) -> int:
    """
    Type-aware three-way comparison.

    Strings compare case-insensitively (raw text breaks ties), numbers and
    datetimes by value, anything else by its string form.
    """
    if isinstance(a, str) and isinstance(b, str):
        a_key, b_key = (a.casefold(), a), (b.casefold(), b)
    elif _is_number(a) and _is_number(b):
        a_key, b_key = a, b
    elif isinstance(a, datetime) and isinstance(b, datetime):
        a_key, b_key = a, b
    else:
        a_key, b_key = str(a).casefold(), str(b).casefold()
    return (a_key > b_key) - (a_key < b_key)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def sort_by(
    items: Sequence[T],
    key: Callable[[T], Any],
    direction: SortDirection = SortDirection.ASC,
) -> List[T]:
    """
    Stable sort with `None` keys last in both directions.

    Examples:
        >>> sort_by([3, None, 1], lambda x: x, SortDirection.DESC)
        [3, 1, None]
    """
    present = [item for item in items if key(item) is not None]
    missing = [item for item in items if key(item) is None]
    present.sort(
        key=cmp_to_key(lambda a, b: compare_values(key(a), key(b))),
        reverse=direction == SortDirection.DESC,
    )
    return present + missing


def paginate(items: Sequence[T], pagination: Pagination) -> tuple[List[T], bool]:
    """
    Slice one page.

    Returns:
        (page_items, has_more). Pages or limits below 1 give ([], False).
    """
    if pagination.page < 1 or pagination.limit < 1:
        return [], False
    end = pagination.offset + pagination.limit
    return list(items[pagination.offset : end]), end < len(items)


# ----- Aggregator -----

F = TypeVar("F", bound=FilterSet)


class ContentAggregator(ABC, Generic[T, F]):
    """
    Filter / sort / paginate over one content type.

    Subclasses set `filter_type`, `sort_field_type`, `default_sort` and
    `sort_accessors`, and implement `matches`.
    """

    filter_type: type
    sort_field_type: type
    default_sort: SortConfig
    sort_accessors: Dict[Enum, Callable[[Any], Any]]

    def __init__(self, items: Iterable[T]):
        self.items: List[T] = [item for item in items if not getattr(item, "draft", False)]

    @abstractmethod
    def matches(self, item: T, filters: F) -> bool:
        """Whether `item` passes every active filter."""

    def identity(self, item: T) -> Any:
        """Key telling two items apart (slug or key in subclasses)."""
        return id(item)

    def apply_filters(self, items: Sequence[T], filters: F) -> List[T]:
        return [item for item in items if self.matches(item, filters)]

    def resolve_sort(self, sort: Union[SortConfig, Mapping[str, str], None]) -> SortConfig:
        """
        Normalize a sort argument to a SortConfig of this aggregator's fields.

        Raises:
            ValueError: On a field or direction this aggregator does not support
        """
        if sort is None:
            return self.default_sort
        if isinstance(sort, SortConfig):
            field_value, direction = sort.field, sort.direction
        else:
            field_value = sort.get("field")
            direction = sort.get("direction", SortDirection.ASC.value)

        try:
            sort_field = self.sort_field_type(field_value)
        except ValueError:
            raise ValueError(
                f"Unsupported sort field '{getattr(field_value, 'value', field_value)}'; "
                f"expected one of: {', '.join(self.sort_field_type.choices())}"
            ) from None
        try:
            sort_direction = SortDirection(direction)
        except ValueError:
            raise ValueError(
                f"Unsupported sort direction '{direction}'; expected asc or desc"
            ) from None
        return SortConfig(sort_field, sort_direction)

    def sort_items(self, items: Sequence[T], sort: SortConfig) -> List[T]:
        accessor = self.sort_accessors[sort.field]
        return sort_by(items, accessor, sort.direction)

    def aggregate(
        self,
        filters: Union[F, Mapping[str, Any], None] = None,
        sort: Union[SortConfig, Mapping[str, str], None] = None,
        pagination: Optional[Pagination] = None,
    ) -> ContentCollection[T]:
        """
        Filter, sort and paginate the aggregator's items.

        Args:
            filters: Filter dataclass or camelCase mapping (None: no filtering)
            sort: SortConfig or {"field", "direction"} mapping (None: default sort)
            pagination: Page and limit (None: first page of DEFAULT_PAGE_SIZE)

        Returns:
            ContentCollection envelope

        Raises:
            ValueError: On unknown filter keys or values, or unsupported sort fields
        """
        if not isinstance(filters, self.filter_type):
            filters = self.filter_type.from_mapping(filters)
        filters.validate()
        sort_config = self.resolve_sort(sort)
        pagination = pagination or Pagination()

        filtered = self.apply_filters(self.items, filters)
        ordered = self.sort_items(filtered, sort_config)
        page_items, has_more = paginate(ordered, pagination)

        return ContentCollection(
            items=page_items,
            total=len(ordered),
            page=pagination.page,
            limit=pagination.limit,
            has_more=has_more,
            filters=filters.to_dict(),
            sort=sort_config,
        )

    def rank_related(
        self,
        item: T,
        score: Callable[[T, T], int],
        limit: int,
    ) -> List[T]:
        """
        Highest-scoring other items, ties in default-sort order.

        Items scoring zero are never related.
        """
        others = [other for other in self.items if self.identity(other) != self.identity(item)]
        candidates = self.sort_items(others, self.default_sort)
        scored = [(score(item, other), other) for other in candidates]
        scored = [pair for pair in scored if pair[0] > 0]
        scored.sort(key=lambda pair: -pair[0])
        return [other for _, other in scored[:limit]]


def shared_tags(a: Iterable[str], b: Iterable[str]) -> int:
    return len(set(a) & set(b))
