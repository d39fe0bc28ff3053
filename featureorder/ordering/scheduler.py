"""
ordering/scheduler.py - Round-based installation scheduling

Turns the discovered dependency nodes into a linear install order. Each
round collects every node whose dependencies are already installed; the
round is sorted by id (then canonical options) and appended to the order.
"""

from __future__ import annotations
from typing import Iterable, List
import logging

from ..exceptions import CircularDependencyError
from ..features.models import ContainerConfig
from ..registry.protocol import RegistryParams
from .dependency_graph import DependencyNode, build_dependency_graph_from_config
from .identity import node_sort_key, nodes_equal

logger = logging.getLogger("ordering.depends_on")


def _is_ready(node: DependencyNode, installed: List[DependencyNode]) -> bool:
    return all(
        any(nodes_equal(done, dep) for done in installed)
        for dep in node.depends_on
    )


def schedule_installation_rounds(nodes: Iterable[DependencyNode]) -> List[DependencyNode]:
    """
    Order nodes so each appears after all of its dependencies.

    Raises:
        CircularDependencyError: A round comes up empty with nodes remaining.
    """
    worklist = list(nodes)
    installation_order: List[DependencyNode] = []

    while worklist:
        round_nodes = [node for node in worklist if _is_ready(node, installation_order)]

        logger.info(f"Round: {', '.join(node.id for node in round_nodes)}")

        if not round_nodes:
            remaining = [node.id for node in worklist]
            logger.error(f"Nodes remaining: {', '.join(remaining)}")
            raise CircularDependencyError(remaining)

        worklist = [
            node for node in worklist
            if not any(nodes_equal(done, node) for done in round_nodes)
        ]

        installation_order.extend(sorted(round_nodes, key=node_sort_key))

    return installation_order


async def compute_depends_on_installation_order(
    params: RegistryParams,
    config: ContainerConfig,
) -> List[DependencyNode]:
    """Discover the hard-dependency graph of a configuration and schedule it."""
    nodes = await build_dependency_graph_from_config(params, config)

    logger.info(f"Starting with: {', '.join(node.id for node in nodes)}")

    return schedule_installation_rounds(nodes)
