"""
registry/reference.py - OCI feature reference parsing

Turns a user-supplied feature identifier such as
``ghcr.io/devcontainers/features/node:1`` into a structured reference.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging
import re

from ..exceptions import InvalidReferenceError

logger = logging.getLogger("registry.reference")


REGEX_FOR_PATH = re.compile(r"^[a-z0-9]+([._-][a-z0-9]+)*(/[a-z0-9]+([._-][a-z0-9]+)*)*$")
REGEX_FOR_VERSION_OR_DIGEST = re.compile(r"^[a-zA-Z0-9_][a-zA-Z0-9._-]{0,127}$")

DEFAULT_TAG = "latest"


@dataclass(frozen=True)
class OCIRef:
    """A parsed feature reference in an OCI registry."""
    registry: str       # ghcr.io
    namespace: str      # devcontainers/features
    owner: str          # devcontainers
    id: str             # node
    resource: str       # ghcr.io/devcontainers/features/node
    path: str           # devcontainers/features/node
    version: str        # 1 | latest | sha256:...
    tag: Optional[str] = None
    digest: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "registry": self.registry,
            "namespace": self.namespace,
            "owner": self.owner,
            "id": self.id,
            "resource": self.resource,
            "path": self.path,
            "version": self.version,
            "tag": self.tag,
            "digest": self.digest,
        }


def get_ref(identifier: str) -> Optional[OCIRef]:
    """
    Parse a feature identifier into an OCIRef.

    Returns None (after logging the reason) when the identifier is malformed.
    """
    value = identifier.lower()

    last_colon = value.rfind(":")
    last_at = value.rfind("@")

    tag: Optional[str] = None
    digest: Optional[str] = None

    if last_at != -1:
        resource = value[:last_at]
        digest_with_algorithm = value[last_at + 1:]
        parts = digest_with_algorithm.split(":")
        if len(parts) != 2:
            logger.error(f"Failed to parse digest '{digest_with_algorithm}'. Expected format: 'sha256:abcdefghijk'")
            return None
        if parts[0] != "sha256":
            logger.error(f"Digest algorithm for input '{identifier}' failed validation. Expected hashing algorithm to be 'sha256'.")
            return None
        if not REGEX_FOR_VERSION_OR_DIGEST.match(parts[1]):
            logger.error(f"Digest for input '{identifier}' failed validation.")
            return None
        digest = digest_with_algorithm
    elif last_colon != -1 and last_colon > value.rfind("/"):
        resource = value[:last_colon]
        tag = value[last_colon + 1:]
    else:
        resource = value
        tag = DEFAULT_TAG

    if tag is not None and not REGEX_FOR_VERSION_OR_DIGEST.match(tag):
        logger.error(f"Tag '{tag}' for input '{identifier}' failed validation.")
        return None

    segments = resource.split("/")
    feature_id = segments[-1]
    registry = segments[0]
    owner = segments[1] if len(segments) > 1 else ""
    namespace = "/".join(segments[1:-1])
    path = f"{namespace}/{feature_id}"

    if not REGEX_FOR_PATH.match(path):
        logger.error(f"Path '{path}' for input '{identifier}' failed validation.")
        return None

    return OCIRef(
        registry=registry,
        namespace=namespace,
        owner=owner,
        id=feature_id,
        resource=resource,
        path=path,
        version=digest or tag or DEFAULT_TAG,
        tag=tag,
        digest=digest,
    )


def resolve_reference(identifier: str) -> OCIRef:
    """Parse a feature identifier, raising InvalidReferenceError when malformed."""
    ref = get_ref(identifier)
    if ref is None:
        raise InvalidReferenceError(identifier)
    return ref
