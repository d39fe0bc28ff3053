"""
features/models.py - Feature descriptors and user configuration

Read-only descriptions of resolvable features, as handed to the ordering
engine by the configuration layer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union, TYPE_CHECKING
import json
import logging

if TYPE_CHECKING:
    from ..registry.reference import OCIRef

logger = logging.getLogger("features.models")


# A feature's configuration: a bare string/boolean, or option name -> value.
FeatureOptions = Union[str, bool, Mapping[str, Union[str, bool, None]], None]


class SourceType(Enum):
    """Where a feature was sourced from."""
    OCI = "oci"
    DIRECT_TARBALL = "direct-tarball"
    FILE_PATH = "file-path"


def strip_version(user_feature_id: str) -> str:
    """
    Drop the version suffix (``:tag`` or ``@digest``) from a feature id.

    A ``:`` only counts as a version separator after the last ``/``, so
    registry ports (``localhost:5000/...``) are kept.
    """
    at = user_feature_id.rfind("@")
    if at != -1:
        return user_feature_id[:at]
    colon = user_feature_id.rfind(":")
    if colon != -1 and colon > user_feature_id.rfind("/"):
        return user_feature_id[:colon]
    return user_feature_id


@dataclass(frozen=True)
class Feature:
    """Metadata a feature declares about itself."""
    id: str
    name: str = ""
    version: str = ""

    installs_after: List[str] = field(default_factory=list)
    legacy_ids: List[str] = field(default_factory=list)
    current_id: Optional[str] = None

    options: FeatureOptions = None


@dataclass(frozen=True)
class SourceInformation:
    """How the user referenced a feature."""
    type: SourceType
    user_feature_id: str
    feature_ref: Optional["OCIRef"] = None

    @property
    def user_feature_id_without_version(self) -> str:
        return strip_version(self.user_feature_id)


@dataclass(frozen=True)
class FeatureSet:
    """
    One resolvable feature as loaded from configuration.

    The first entry of ``features`` describes the feature itself.
    """
    features: List[Feature]
    source_information: SourceInformation

    @property
    def feature(self) -> Feature:
        return self.features[0]

    @property
    def user_feature_id(self) -> str:
        return self.source_information.user_feature_id

    @property
    def key(self) -> str:
        """Identifier without its version, used to match install-after hints."""
        return self.source_information.user_feature_id_without_version


@dataclass(frozen=True)
class UserFeature:
    """A feature as declared in user configuration."""
    id: str
    options: FeatureOptions = None


@dataclass
class ContainerConfig:
    """The parts of a container configuration the ordering engine reads."""

    features: Union[Dict[str, FeatureOptions], List[Dict[str, Any]], None] = None
    override_feature_install_order: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContainerConfig":
        override = data.get("overrideFeatureInstallOrder", data.get("override_feature_install_order"))
        return cls(
            features=data.get("features"),
            override_feature_install_order=list(override) if override is not None else None,
        )

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "ContainerConfig":
        """Load configuration from a JSON file."""
        path = Path(filepath)
        with open(path) as f:
            data = json.load(f)
        logger.debug(f"Loaded container configuration from {path}")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.features is not None:
            data["features"] = self.features
        if self.override_feature_install_order is not None:
            data["overrideFeatureInstallOrder"] = list(self.override_feature_install_order)
        return data


def user_features_to_array(config: ContainerConfig) -> Optional[List[UserFeature]]:
    """
    List the features declared in a configuration, in declaration order.

    Returns None when the configuration declares no ``features`` at all.
    Accepts both the mapping form and the legacy list-of-objects form.
    """
    if config.features is None:
        return None

    if isinstance(config.features, list):
        return [
            UserFeature(id=entry["id"], options=entry.get("options"))
            for entry in config.features
        ]

    return [UserFeature(id=fid, options=options) for fid, options in config.features.items()]
