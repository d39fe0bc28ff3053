"""
registry/ - Feature registry collaborators

Provides:
- OCIRef / get_ref / resolve_reference: feature identifier parsing
- OCIManifest / parse_depends_on: manifest models and dependsOn decoding
- RegistryParams: resolver + fetcher bundle consumed by graph construction
- OCIRegistryClient: httpx-based manifest fetcher
"""

from .reference import (
    OCIRef,
    get_ref,
    resolve_reference,
)
from .manifest import (
    DEPENDS_ON_ANNOTATION,
    OCIDescriptor,
    OCIManifest,
    parse_depends_on,
)
from .protocol import (
    ManifestFetcher,
    ReferenceResolver,
    RegistryParams,
)
from .client import (
    OCIRegistryClient,
    parse_bearer_challenge,
)

__all__ = [
    # Reference
    "OCIRef",
    "get_ref",
    "resolve_reference",
    # Manifest
    "DEPENDS_ON_ANNOTATION",
    "OCIDescriptor",
    "OCIManifest",
    "parse_depends_on",
    # Protocol
    "ManifestFetcher",
    "ReferenceResolver",
    "RegistryParams",
    # Client
    "OCIRegistryClient",
    "parse_bearer_challenge",
]
