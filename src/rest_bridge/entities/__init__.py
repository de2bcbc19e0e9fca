"""Domain entities for internal representation.

These are plain dataclasses and value types used by services and
repositories. Configuration contracts live in the dto package.
"""

from .capabilities import HANDLED_VERBS, ORDER_BY, WHERE, WHERE_IN, Capabilities
from .query_spec import (
    FILTER_PARAM,
    IN_TOKEN,
    INCLUDE_PARAM,
    ORDER_PARAM,
    PostFilterVerb,
    QuerySpec,
    SortDirection,
    normalize_operator,
)
from .result_set import Record, ResultSet
from .transport_response import TransportResponse

__all__ = [
    "Capabilities",
    "HANDLED_VERBS",
    "WHERE",
    "WHERE_IN",
    "ORDER_BY",
    "QuerySpec",
    "PostFilterVerb",
    "SortDirection",
    "normalize_operator",
    "FILTER_PARAM",
    "ORDER_PARAM",
    "INCLUDE_PARAM",
    "IN_TOKEN",
    "Record",
    "ResultSet",
    "TransportResponse",
]
