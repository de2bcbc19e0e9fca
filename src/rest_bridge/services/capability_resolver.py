"""Capability queries against a resource definition."""

from rest_bridge.dto import ResourceDefinition


class CapabilityResolver:
    """Answers "can the server do this natively?" for one resource.

    Membership tests are exact: no wildcard or prefix matching.
    """

    def __init__(self, definition: ResourceDefinition) -> None:
        self._capabilities = definition.capabilities
        self._filterable = definition.filterable
        self._includable = frozenset(definition.includable)

    def supports_verb(self, verb: str) -> bool:
        return self._capabilities.supports(verb)

    def is_filterable(self, field: str) -> bool:
        return field in self._filterable

    def is_includable(self, name: str) -> bool:
        return name in self._includable
