"""Local fallback for verbs the server could not apply."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from rest_bridge.entities import PostFilterVerb, ResultSet, SortDirection

logger = logging.getLogger(__name__)


class PostFilterEngine:
    """Applies deferred verbs to a fetched ResultSet.

    Verbs run in the fixed order where -> whereIn -> sortBy, whatever
    order the caller chained them in. A call whose field no record
    carries is skipped. Every step yields a new ResultSet.
    """

    def apply(
        self,
        results: ResultSet,
        pending: Mapping[PostFilterVerb, Sequence[tuple[Any, ...]]],
    ) -> ResultSet:
        for verb in PostFilterVerb:
            calls = pending.get(verb) or ()
            if not calls:
                continue

            if verb is PostFilterVerb.SORT_BY:
                results = self._sort(results, calls)
                continue

            for arguments in calls:
                field = arguments[0]
                if not results.has_field(field):
                    logger.debug("Skipping %s on %r: field not present", verb.value, field)
                    continue
                if verb is PostFilterVerb.WHERE:
                    results = results.where(*arguments)
                else:
                    results = results.where_in(*arguments)

        return results

    def _sort(self, results: ResultSet, calls: Sequence[tuple[Any, ...]]) -> ResultSet:
        keys: list[tuple[str, SortDirection]] = []
        for field, direction in calls:
            if not results.has_field(field):
                logger.debug("Skipping sortBy on %r: field not present", field)
                continue
            keys.append((field, direction))
        return results.sort_by_many(keys) if keys else results
