"""
featureorder - Installation order engine for container features

Computes the order in which features are layered onto a base environment,
from either their install-after hints (with an optional user override) or
their dependsOn declarations resolved through an OCI registry.
"""

__version__ = "0.1.0"

from .exceptions import (
    FeatureOrderError,
    InvalidReferenceError,
    ManifestNotFoundError,
    OverrideTargetNotFoundError,
    CircularDependencyError,
    NoFeaturesDeclaredError,
    InvalidDependsOnAnnotationError,
    RegistryRequestError,
    DisallowedFeatureError,
)
from .features import (
    ContainerConfig,
    Feature,
    FeatureSet,
    SourceInformation,
    SourceType,
    UserFeature,
)
from .registry import (
    OCIRef,
    OCIManifest,
    OCIRegistryClient,
    RegistryParams,
    get_ref,
    resolve_reference,
)
from .ordering import (
    DependencyNode,
    build_dependency_graph_from_config,
    build_dependency_graph_from_feature_ref,
    compute_depends_on_installation_order,
    compute_feature_installation_order,
    compute_installation_order,
    compute_override_installation_order,
    schedule_installation_rounds,
)

__all__ = [
    "__version__",
    # Errors
    "FeatureOrderError",
    "InvalidReferenceError",
    "ManifestNotFoundError",
    "OverrideTargetNotFoundError",
    "CircularDependencyError",
    "NoFeaturesDeclaredError",
    "InvalidDependsOnAnnotationError",
    "RegistryRequestError",
    "DisallowedFeatureError",
    # Features
    "ContainerConfig",
    "Feature",
    "FeatureSet",
    "SourceInformation",
    "SourceType",
    "UserFeature",
    # Registry
    "OCIRef",
    "OCIManifest",
    "OCIRegistryClient",
    "RegistryParams",
    "get_ref",
    "resolve_reference",
    # Ordering
    "DependencyNode",
    "build_dependency_graph_from_config",
    "build_dependency_graph_from_feature_ref",
    "compute_depends_on_installation_order",
    "compute_feature_installation_order",
    "compute_installation_order",
    "compute_override_installation_order",
    "schedule_installation_rounds",
]
