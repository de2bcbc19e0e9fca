"""Cache key derivation."""

import hashlib

from rest_bridge.entities import QuerySpec

from .request_encoder import canonical, canonical_json

KEY_PREFIX = "resource"


class CacheKeyDeriver:
    """Derives stable cache keys from the native part of a query.

    Keys are namespaced as ``resource:<name>[:<discriminator>]`` so a
    whole resource can be flushed by prefix. Pending post-filters are
    left out: the unfiltered network response is what gets cached.
    """

    def derive(self, resource_name: str, spec: QuerySpec, discriminator: str = "") -> str:
        """Build the key for ``spec``.

        Args:
            resource_name: Resource type name
            spec: The query being executed
            discriminator: Query kind, e.g. "get" or "find:42"

        Returns:
            The cache key. A caller-supplied override key is appended
            verbatim in place of the content digest.
        """
        base = f"{KEY_PREFIX}:{resource_name}" + (f":{discriminator}" if discriminator else "")

        if spec.cache_key is not None:
            return base + spec.cache_key

        payload = canonical_json(
            {
                "includes": list(spec.includes),
                "native_params": canonical(spec.native_params),
            }
        )
        digest = hashlib.sha256(payload.encode()).hexdigest()
        return f"{base}:{digest}"
