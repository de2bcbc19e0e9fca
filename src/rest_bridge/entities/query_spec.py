"""Query accumulator domain entity."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

FILTER_PARAM = "_filter"
ORDER_PARAM = "_order"
INCLUDE_PARAM = "include"

# Canonical comparator tokens understood by the remote filter syntax.
OPERATOR_TOKENS = {
    "=": "EQ",
    ">": "GT",
    ">=": "GTE",
    "<": "LT",
    "<=": "LTE",
}
IN_TOKEN = "IN"


def normalize_operator(operator: str) -> str:
    """Map a comparison operator to its comparator token.

    Unrecognized operators are returned unchanged.
    """
    return OPERATOR_TOKENS.get(operator, operator)


class PostFilterVerb(str, Enum):
    """Verbs the post-filter engine can apply, in application order."""

    WHERE = "where"
    WHERE_IN = "whereIn"
    SORT_BY = "sortBy"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def from_string(cls, direction: str) -> "SortDirection":
        return cls.ASC if direction.lower() == "asc" else cls.DESC


def _empty_pending() -> dict[PostFilterVerb, list[tuple[Any, ...]]]:
    return {verb: [] for verb in PostFilterVerb}


@dataclass
class QuerySpec:
    """Mutable accumulator for one logical query.

    Owned by exactly one QueryBuilder; never shared between queries.

    Attributes:
        native_filters: field -> {comparator token -> value}, sent to the server
        ordering: Native sort token ("field" or "-field"), at most one
        pending: Post-filter calls per verb, in fixed verb order
        includes: Requested sub-resources, insertion ordered
        cache_ttl: Caller TTL override in seconds
        cache_key: Caller cache key tail override
    """

    native_filters: dict[str, dict[str, Any]] = field(default_factory=dict)
    ordering: str | None = None
    pending: dict[PostFilterVerb, list[tuple[Any, ...]]] = field(default_factory=_empty_pending)
    includes: list[str] = field(default_factory=list)
    cache_ttl: int | None = None
    cache_key: str | None = None

    @property
    def native_params(self) -> dict[str, Any]:
        """Native intents keyed by their reserved wire parameter names."""
        params: dict[str, Any] = {}
        if self.native_filters:
            params[FILTER_PARAM] = self.native_filters
        if self.ordering is not None:
            params[ORDER_PARAM] = self.ordering
        return params

    @property
    def has_post_filters(self) -> bool:
        return any(self.pending.values())
