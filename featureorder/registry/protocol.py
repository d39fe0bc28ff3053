"""
registry/protocol.py - Registry collaborator protocols

The ordering engine never talks to a registry directly. It is handed a
RegistryParams bundle holding a reference resolver and a manifest fetcher,
which keeps graph construction testable with in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Optional, Protocol, TYPE_CHECKING, runtime_checkable

from .manifest import OCIManifest
from .reference import OCIRef, resolve_reference

if TYPE_CHECKING:
    from .client import OCIRegistryClient


@runtime_checkable
class ReferenceResolver(Protocol):
    """Resolves an identifier into an OCIRef, raising InvalidReferenceError."""

    def __call__(self, identifier: str) -> OCIRef:
        ...


@runtime_checkable
class ManifestFetcher(Protocol):
    """Fetches the manifest for an identifier; None when it does not exist."""

    def __call__(self, identifier: str) -> Awaitable[Optional[OCIManifest]]:
        ...


@dataclass
class RegistryParams:
    """Collaborators used while discovering hard dependencies."""

    fetch_manifest: ManifestFetcher
    resolve_reference: ReferenceResolver = field(default=resolve_reference)

    @classmethod
    def from_client(cls, client: "OCIRegistryClient") -> "RegistryParams":
        return cls(fetch_manifest=client.fetch_manifest)
