"""
ordering/soft_order.py - Install-after ordering

Orders features by the "installs after" hints each one declares about
others. Hints pointing at features that are not part of the set are
ignored. Ties are broken lexicographically by the user's feature id so the
same input always yields the same order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple
import logging

from ..exceptions import CircularDependencyError
from ..features.models import FeatureSet, SourceType

logger = logging.getLogger("ordering.soft_order")


@dataclass(eq=False)
class SoftOrderNode:
    """
    A feature plus its edges for the duration of one sort.

    ``before`` holds nodes that install after this one, ``after`` the nodes
    this one installs after. Both sides of an edge are updated together via
    add_edge.
    """
    feature: FeatureSet
    legacy_ids: List[str] = field(default_factory=list)
    current_id: Optional[str] = None

    before: Set["SoftOrderNode"] = field(default_factory=set)
    after: Set["SoftOrderNode"] = field(default_factory=set)

    @property
    def key(self) -> str:
        return self.feature.key

    @property
    def user_feature_id(self) -> str:
        return self.feature.user_feature_id


def add_edge(first: SoftOrderNode, later: SoftOrderNode) -> None:
    """Record that ``later`` installs after ``first``."""
    later.after.add(first)
    first.before.add(later)


def _qualified_ids(feature: FeatureSet) -> Tuple[List[str], Optional[str]]:
    """
    Legacy ids and current id, prefixed with ``<registry>/<namespace>/``.

    Legacy ids are declared bare, so only registry-sourced features with
    legacy ids are qualified; everything else is returned as declared.
    """
    meta = feature.feature
    ref = feature.source_information.feature_ref
    if feature.source_information.type is SourceType.OCI and meta.legacy_ids and ref is not None:
        prefix = f"{ref.registry}/{ref.namespace}/"
        current_id = f"{prefix}{meta.current_id}" if meta.current_id else None
        return [prefix + legacy for legacy in meta.legacy_ids], current_id
    return list(meta.legacy_ids), meta.current_id


def _build_nodes(features: Iterable[FeatureSet]) -> Tuple[List[SoftOrderNode], Dict[str, SoftOrderNode]]:
    nodes: List[SoftOrderNode] = []
    nodes_by_key: Dict[str, SoftOrderNode] = {}
    for feature in features:
        legacy_ids, current_id = _qualified_ids(feature)
        node = SoftOrderNode(feature=feature, legacy_ids=legacy_ids, current_id=current_id)
        nodes.append(node)
        # Later features with the same key win the lookup, but all stay nodes.
        nodes_by_key[node.key] = node
    return nodes, nodes_by_key


def _find_first(
    first_id: str,
    nodes: List[SoftOrderNode],
    nodes_by_key: Dict[str, SoftOrderNode],
) -> Optional[SoftOrderNode]:
    first = nodes_by_key.get(first_id)

    # Back compat: a feature that used to be published under first_id
    if first is None:
        first = next((node for node in nodes if first_id in node.legacy_ids), None)

    # Forward compat: first_id names a feature's current id
    if first is None:
        first = next((node for node in nodes if node.current_id == first_id), None)

    return first


def _by_user_feature_id(nodes: Iterable[SoftOrderNode]) -> List[FeatureSet]:
    return [node.feature for node in sorted(nodes, key=lambda n: n.user_feature_id)]


def compute_installation_order(features: Iterable[FeatureSet]) -> List[FeatureSet]:
    """
    Order features so every feature installs after those it names in
    ``installs_after``.

    Args:
        features: Features to order. They are not modified.

    Returns:
        The same features, permuted into installation order.

    Raises:
        CircularDependencyError: The install-after hints form a cycle.
    """
    nodes, nodes_by_key = _build_nodes(features)

    for later in nodes:
        for first_id in later.feature.feature.installs_after:
            first = _find_first(first_id, nodes, nodes_by_key)
            if first is None:
                logger.debug(f"'{later.user_feature_id}' installs after '{first_id}', which is not present; ignoring")
                continue
            logger.debug(f"'{later.user_feature_id}' installs after '{first.user_feature_id}'")
            add_edge(first, later)

    roots: List[SoftOrderNode] = []
    islands: List[SoftOrderNode] = []
    for node in nodes:
        if not node.after:
            if node.before:
                roots.append(node)
            else:
                islands.append(node)

    ordered: List[FeatureSet] = []
    current = roots
    while current:
        following: List[SoftOrderNode] = []
        for first in current:
            for later in first.before:
                later.after.discard(first)
                if not later.after:
                    following.append(later)
        ordered.extend(_by_user_feature_id(current))
        current = following

    ordered.extend(_by_user_feature_id(islands))

    emitted = {id(feature) for feature in ordered}
    missing = {node.key for node in nodes if id(node.feature) not in emitted}

    if missing:
        raise CircularDependencyError(
            missing,
            message=f"Circular dependency detected between features: {', '.join(sorted(missing))}",
        )

    return ordered
