"""REST resource base class.

A RestResource binds a ResourceDefinition to its collaborators and is
the entry point for query chains. Subclass it to normalize non-uniform
response shapes or to move the endpoints around.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from rest_bridge.config import settings
from rest_bridge.dto import ResourceDefinition
from rest_bridge.entities import ResultSet
from rest_bridge.exceptions import ConfigurationError
from rest_bridge.metrics import FetchMetrics
from rest_bridge.protocols import CacheStore, Transport
from rest_bridge.repositories import HttpxTransport, NullCacheStore
from rest_bridge.services import CapabilityResolver, FetchOrchestrator, QueryBuilder


class RestResource:
    """A remote REST collection queried through a local builder.

    The definition can be passed in or declared on a subclass.

    Example:
        ```python
        class Stations(RestResource):
            definition = ResourceDefinition(
                name="stations",
                primary_key="StationId",
                endpoint_url="https://api.example.com/stations",
                filterable={"status"},
                includable=("genre",),
                supported_verbs={"where"},
            )

        stations = Stations(cache=RedisCacheStore.create())
        rock = stations.where("genre", "=", "rock").order_by("name").get()
        ```
    """

    definition: ResourceDefinition | None = None

    def __init__(
        self,
        definition: ResourceDefinition | None = None,
        transport: Transport | None = None,
        cache: CacheStore | None = None,
        *,
        metrics: FetchMetrics | None = None,
        single_flight: bool | None = None,
    ) -> None:
        """Initialize the resource.

        Args:
            definition: Resource definition. Defaults to the class attribute.
            transport: HTTP transport. If None, an HttpxTransport is created.
            cache: Cache store. If None, nothing is cached (NullCacheStore).
            metrics: Metrics sink shared by every query of this resource.
            single_flight: Coalesce concurrent identical fetches. Defaults to settings.

        Raises:
            ConfigurationError: If no definition is available
        """
        definition = definition or type(self).definition
        if definition is None:
            raise ConfigurationError(f"{type(self).__name__} has no resource definition")

        self.definition = definition
        self._resolver = CapabilityResolver(definition)
        self._orchestrator = FetchOrchestrator(
            resource=self,
            transport=HttpxTransport.create() if transport is None else transport,
            cache=NullCacheStore() if cache is None else cache,
            metrics=metrics,
            single_flight=settings.single_flight if single_flight is None else single_flight,
        )

    @classmethod
    def from_config(cls, data: Mapping[str, Any], **kwargs: Any) -> "RestResource":
        """Build a resource from a plain configuration mapping."""
        return cls(ResourceDefinition.load(data), **kwargs)

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def primary_key(self) -> str:
        return self.definition.primary_key

    @property
    def metrics(self) -> FetchMetrics:
        return self._orchestrator.metrics

    @property
    def resolver(self) -> CapabilityResolver:
        return self._resolver

    def query(self) -> QueryBuilder:
        """Start a new, independent query chain."""
        return QueryBuilder(self._resolver, self._orchestrator)

    def where(self, field: str, operator: str, value: Any) -> QueryBuilder:
        return self.query().where(field, operator, value)

    def where_in(self, field: str, values: Iterable[Any], strict: bool = False) -> QueryBuilder:
        return self.query().where_in(field, values, strict)

    def order_by(self, field: str, direction: str = "asc") -> QueryBuilder:
        return self.query().order_by(field, direction)

    def include(self, name: str) -> QueryBuilder:
        return self.query().include(name)

    def remember(self, ttl: int, key: str | None = None) -> QueryBuilder:
        return self.query().remember(ttl, key)

    def find(self, entity_id: Any) -> ResultSet:
        return self.query().find(entity_id)

    def get(self) -> ResultSet:
        return self.query().get()

    def post(self, form: Mapping[str, Any]) -> Any:
        return self.query().post(form)

    # Endpoints

    def index_url(self) -> str:
        return self.definition.endpoint_url

    def view_url(self, entity_id: Any) -> str:
        return f"{self.index_url().rstrip('/')}/{entity_id}"

    # Parsers

    def parse_collection(self, data: Any) -> list[Mapping[str, Any]]:
        """Extract the records from a collection response.

        The default unwraps a ``{"body": [...]}`` envelope.
        """
        return data["body"]

    def parse_item(self, data: Any) -> Mapping[str, Any]:
        """Extract the record from a single-entity response."""
        return data
