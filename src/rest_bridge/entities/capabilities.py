"""Verb capability table for a resource."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

WHERE = "where"
WHERE_IN = "whereIn"
ORDER_BY = "orderBy"

# Verbs the query builder has a native encoding for.
HANDLED_VERBS = frozenset({WHERE, WHERE_IN, ORDER_BY})


@dataclass(frozen=True)
class Capabilities:
    """Which verbs a remote endpoint honors natively.

    Either "open" (the resource declares no restricted set, every handled
    verb is assumed supported) or a fixed verb -> bool table.

    Attributes:
        is_open: True when no restricted verb set was declared
        verbs: Verb name -> natively supported
    """

    is_open: bool = False
    verbs: dict[str, bool] = field(default_factory=dict)

    @classmethod
    def open(cls) -> "Capabilities":
        """Capabilities for a resource that supports every handled verb."""
        return cls(is_open=True)

    @classmethod
    def from_declared(cls, declared: Iterable[str] | None) -> "Capabilities":
        """Build the table from a declared verb list.

        Args:
            declared: Verb names the resource claims to support, or None
                for "all supported"

        Returns:
            Capabilities where only declared verbs with a handler are True
        """
        if declared is None:
            return cls.open()

        declared = set(declared)
        for verb in sorted(declared - HANDLED_VERBS):
            logger.warning("Declared verb %r has no handler; it will be post-filtered", verb)

        return cls(verbs={verb: verb in declared for verb in HANDLED_VERBS})

    def supports(self, verb: str) -> bool:
        if verb not in HANDLED_VERBS:
            return False
        if self.is_open:
            return True
        return self.verbs.get(verb, False)
