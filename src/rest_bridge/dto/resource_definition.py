"""Resource definition DTO.

The static description of one remote REST resource: where it lives and
which parts of the query vocabulary the server understands.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rest_bridge.entities import Capabilities
from rest_bridge.exceptions import ConfigurationError


class ResourceDefinition(BaseModel):
    """Configuration for a remote REST resource.

    Immutable once loaded.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Resource type name, used to namespace cache keys", min_length=1)
    primary_key: str = Field("id", description="Primary key field of an entity record")
    endpoint_url: str = Field(..., description="Index endpoint; entities live at {endpoint_url}/{id}")
    filterable: frozenset[str] = Field(
        default_factory=frozenset,
        description="Fields the server can filter on natively",
    )
    includable: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Sub-resources that may be requested with ?include=",
    )
    supported_verbs: frozenset[str] | None = Field(
        None,
        description="Verbs the server honors natively (null = all supported)",
    )
    default_ttl: int | None = Field(
        None,
        description="Default cache time-to-live in seconds (0 = do not cache, null = settings default)",
        ge=0,
    )

    @classmethod
    def load(cls, data: Mapping[str, Any]) -> "ResourceDefinition":
        """Validate a plain mapping into a definition.

        Raises:
            ConfigurationError: If the mapping is not a valid definition
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid resource definition: {e}") from e

    @property
    def capabilities(self) -> Capabilities:
        return Capabilities.from_declared(self.supported_verbs)
