"""
registry/manifest.py - OCI manifest models

Pydantic models for the manifest documents returned by a feature registry,
and decoding of the dependsOn annotation carried on them.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import InvalidDependsOnAnnotationError
from ..features.models import FeatureOptions


DEPENDS_ON_ANNOTATION = "dev.containers.experimental.dependsOn"

OCI_MANIFEST_MEDIA_TYPE = "application/vnd.oci.image.manifest.v1+json"


class OCIDescriptor(BaseModel):
    """A content descriptor (config blob or layer)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    media_type: str = Field(..., alias="mediaType")
    digest: str
    size: int = 0
    annotations: Optional[Dict[str, str]] = None


class OCIManifest(BaseModel):
    """An OCI image manifest describing a published feature."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    schema_version: int = Field(2, alias="schemaVersion")
    media_type: Optional[str] = Field(None, alias="mediaType")
    config: Optional[OCIDescriptor] = None
    layers: List[OCIDescriptor] = Field(default_factory=list)
    annotations: Optional[Dict[str, str]] = None

    @property
    def depends_on_annotation(self) -> Optional[str]:
        """Raw serialized dependsOn annotation, if any."""
        if not self.annotations:
            return None
        return self.annotations.get(DEPENDS_ON_ANNOTATION)


def parse_depends_on(identifier: str, serialized: str) -> Dict[str, FeatureOptions]:
    """
    Decode a dependsOn annotation into a mapping of child id -> options.

    Key order of the JSON object is preserved; it determines discovery order.
    """
    try:
        decoded: Any = json.loads(serialized)
    except json.JSONDecodeError as e:
        raise InvalidDependsOnAnnotationError(identifier, str(e)) from e

    if not isinstance(decoded, dict):
        raise InvalidDependsOnAnnotationError(
            identifier, f"expected a JSON object, got {type(decoded).__name__}"
        )

    return decoded
