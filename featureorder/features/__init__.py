"""
features/ - Feature descriptors and user configuration
"""

from .models import (
    FeatureOptions,
    SourceType,
    Feature,
    SourceInformation,
    FeatureSet,
    UserFeature,
    ContainerConfig,
    strip_version,
    user_features_to_array,
)

__all__ = [
    "FeatureOptions",
    "SourceType",
    "Feature",
    "SourceInformation",
    "FeatureSet",
    "UserFeature",
    "ContainerConfig",
    "strip_version",
    "user_features_to_array",
]
