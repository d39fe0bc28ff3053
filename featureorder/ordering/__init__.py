"""
featureorder/ordering - Installation order engine

Provides:
- compute_installation_order: install-after (soft) ordering
- compute_override_installation_order: user override applied on top
- compute_feature_installation_order: picks one of the above from config
- build_dependency_graph_from_*: dependsOn (hard) discovery via the registry
- schedule_installation_rounds / compute_depends_on_installation_order
"""

from .identity import (
    canonical_options,
    node_sort_key,
    nodes_equal,
    options_equal,
)
from .soft_order import (
    SoftOrderNode,
    add_edge,
    compute_installation_order,
)
from .override import compute_override_installation_order
from .installation import compute_feature_installation_order
from .dependency_graph import (
    DependencyNode,
    build_dependency_graph_from_config,
    build_dependency_graph_from_feature_ref,
)
from .scheduler import (
    compute_depends_on_installation_order,
    schedule_installation_rounds,
)

__all__ = [
    # Identity
    "canonical_options",
    "node_sort_key",
    "nodes_equal",
    "options_equal",
    # Install-after ordering
    "SoftOrderNode",
    "add_edge",
    "compute_installation_order",
    "compute_override_installation_order",
    "compute_feature_installation_order",
    # dependsOn ordering
    "DependencyNode",
    "build_dependency_graph_from_config",
    "build_dependency_graph_from_feature_ref",
    "compute_depends_on_installation_order",
    "schedule_installation_rounds",
]
