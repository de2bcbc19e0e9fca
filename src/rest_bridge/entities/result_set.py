"""Result set domain entity and its local query semantics."""

import logging
import operator as op
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any

from .query_spec import SortDirection

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]

_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "=": op.eq,
    "==": op.eq,
    "===": op.eq,
    "EQ": op.eq,
    "!=": op.ne,
    "<>": op.ne,
    "!==": op.ne,
    "NEQ": op.ne,
    ">": op.gt,
    "GT": op.gt,
    ">=": op.ge,
    "GTE": op.ge,
    "<": op.lt,
    "LT": op.lt,
    "<=": op.le,
    "LTE": op.le,
}

_MISSING = object()


def _comparator(operator: str) -> Callable[[Any, Any], bool]:
    compare = _COMPARATORS.get(operator)
    if compare is None:
        logger.warning("Unknown comparator %r, falling back to strict equality", operator)
        return op.eq
    return compare


def _loose_key(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else ""
    if value is None:
        return ""
    return str(value)


def _sort_key(value: Any) -> tuple[int, int, Any]:
    # Total order over mixed types: None, then numbers, then strings, then the rest as text
    if value is None:
        return (0, 0, 0)
    if isinstance(value, (int, float)):
        return (1, 0, value)
    if isinstance(value, str):
        return (1, 1, value)
    return (1, 2, str(value))


class ResultSet(Sequence[Record]):
    """Immutable, ordered sequence of entity records.

    The query methods never mutate the set; each returns a new ResultSet.
    """

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._records: tuple[Record, ...] = tuple(records)

    @classmethod
    def of_item(cls, record: Record) -> "ResultSet":
        """Wrap a single entity record."""
        return cls((record,))

    def __getitem__(self, index):  # type: ignore[override]
        if isinstance(index, slice):
            return ResultSet(self._records[index])
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResultSet):
            return self._records == other._records
        return NotImplemented

    def __repr__(self) -> str:
        return f"ResultSet({list(self._records)!r})"

    def first(self) -> Record | None:
        return self._records[0] if self._records else None

    def to_list(self) -> list[dict[str, Any]]:
        """Plain JSON-compatible copy of the records."""
        return [dict(record) for record in self._records]

    def has_field(self, field: str) -> bool:
        """True if at least one record carries ``field``."""
        return any(field in record for record in self._records)

    def where(self, field: str, operator: str, value: Any) -> "ResultSet":
        """Keep records whose ``field`` compares true against ``value``."""
        compare = _comparator(operator)

        def matches(record: Record) -> bool:
            retrieved = record.get(field, _MISSING)
            if retrieved is _MISSING:
                return False
            try:
                return bool(compare(retrieved, value))
            except TypeError:
                return False

        return ResultSet(record for record in self._records if matches(record))

    def where_in(self, field: str, values: Iterable[Any], strict: bool = False) -> "ResultSet":
        """Keep records whose ``field`` is one of ``values``.

        Strict matching requires equal value and identical type; loose
        matching compares string forms, so ``"1"`` matches ``1``.
        """
        values = list(values)
        loose = {_loose_key(v) for v in values}

        def matches(record: Record) -> bool:
            retrieved = record.get(field, _MISSING)
            if retrieved is _MISSING:
                return False
            if strict:
                return any(type(retrieved) is type(v) and retrieved == v for v in values)
            return _loose_key(retrieved) in loose

        return ResultSet(record for record in self._records if matches(record))

    def sort_by(self, field: str, direction: SortDirection = SortDirection.ASC) -> "ResultSet":
        """Stable sort on one field. Missing and None values sort first."""

        def key(record: Record) -> tuple[int, int, Any]:
            return _sort_key(record.get(field))

        records = sorted(self._records, key=key, reverse=direction is SortDirection.DESC)
        return ResultSet(records)

    def sort_by_many(self, keys: Sequence[tuple[str, SortDirection]]) -> "ResultSet":
        """Stable multi-key sort; the first key is the primary key."""
        result = self
        for field, direction in reversed(keys):
            result = result.sort_by(field, direction)
        return result
