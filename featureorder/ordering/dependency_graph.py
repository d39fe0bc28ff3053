"""
ordering/dependency_graph.py - Hard dependency discovery

Builds the set of dependency nodes reachable from a set of root features by
reading the dependsOn annotation of each feature's published manifest.

The graph is not known up front: every node's children are only learned
once its manifest has been fetched. Fetches are awaited strictly one at a
time, in first-in first-out discovery order, so the same registry state
always produces the same node list.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Iterable, List
import logging

from ..exceptions import ManifestNotFoundError, NoFeaturesDeclaredError
from ..features.models import ContainerConfig, FeatureOptions, user_features_to_array
from ..registry.manifest import parse_depends_on
from ..registry.protocol import RegistryParams
from ..registry.reference import OCIRef
from .identity import canonical_options, nodes_equal

logger = logging.getLogger("ordering.depends_on")


@dataclass(eq=False)
class DependencyNode:
    """A feature and its options, with the hard dependencies discovered so far."""
    id: str
    options: FeatureOptions = None
    depends_on: List["DependencyNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "options": self.options,
            "depends_on": [
                {"id": dep.id, "options": dep.options} for dep in self.depends_on
            ],
        }

    def __repr__(self) -> str:
        return f"DependencyNode(id={self.id!r}, options={canonical_options(self.options)})"


async def _build_dependency_graph(
    params: RegistryParams,
    roots: Iterable[DependencyNode],
) -> List[DependencyNode]:
    worklist: Deque[DependencyNode] = deque(roots)
    resolved: List[DependencyNode] = []

    while worklist:
        current = worklist.popleft()

        # Already resolved (also stops cycles from expanding forever)
        if any(nodes_equal(existing, current) for existing in resolved):
            continue

        logger.info(f"Resolving dependencies for '{current.id}'...")

        manifest = await params.fetch_manifest(current.id)
        if manifest is None:
            raise ManifestNotFoundError(current.id)

        serialized = manifest.depends_on_annotation
        if not serialized:
            resolved.append(current)
            continue

        for dep_id, options in parse_depends_on(current.id, serialized).items():
            ref = params.resolve_reference(dep_id)
            dependency = DependencyNode(id=ref.resource, options=options)
            current.depends_on.append(dependency)
            worklist.append(dependency)

        resolved.append(current)

    return resolved


async def build_dependency_graph_from_feature_ref(
    params: RegistryParams,
    feature_ref: OCIRef,
) -> List[DependencyNode]:
    """Discover every node reachable from a single feature (without options)."""
    root = DependencyNode(id=feature_ref.resource)
    return await _build_dependency_graph(params, [root])


async def build_dependency_graph_from_config(
    params: RegistryParams,
    config: ContainerConfig,
) -> List[DependencyNode]:
    """
    Discover every node reachable from the features a configuration declares.

    Raises:
        NoFeaturesDeclaredError: The configuration declares no features.
        InvalidReferenceError: A declared or discovered id is malformed.
        ManifestNotFoundError: A node's manifest does not exist.
    """
    user_features = user_features_to_array(config)
    if not user_features:
        raise NoFeaturesDeclaredError()

    roots = [
        DependencyNode(id=params.resolve_reference(feature.id).resource, options=feature.options)
        for feature in user_features
    ]
    return await _build_dependency_graph(params, roots)
