"""Data Transfer Objects for configuration contracts.

These Pydantic models describe externally supplied configuration and
validate it on load.

Internal domain logic should use entities from the entities package.
"""

from .resource_definition import ResourceDefinition

__all__ = [
    "ResourceDefinition",
]
