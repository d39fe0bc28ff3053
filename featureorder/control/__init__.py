"""
control/ - Control manifest of disallowed features
"""

from .manifest import (
    ControlManifest,
    DisallowedFeature,
    ensure_features_allowed,
    fetch_control_manifest,
    find_disallowed_feature,
    get_control_manifest,
    sanitize_control_manifest,
)

__all__ = [
    "ControlManifest",
    "DisallowedFeature",
    "ensure_features_allowed",
    "fetch_control_manifest",
    "find_disallowed_feature",
    "get_control_manifest",
    "sanitize_control_manifest",
]
