"""
ordering/identity.py - Structural identity of dependency nodes

Two dependency nodes are the same node when their ids match and their
options are structurally equal. Option mappings are compared by key, never
by insertion order, so a node reached through two different manifests
collapses to one entry no matter how each manifest serialized it.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .dependency_graph import DependencyNode


def options_equal(a: Any, b: Any) -> bool:
    """Recursively compare two options values; mapping key order is ignored."""
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if set(a.keys()) != set(b.keys()):
            return False
        return all(options_equal(a[key], b[key]) for key in a)

    if isinstance(a, Mapping) or isinstance(b, Mapping):
        return False

    # bool is an int subclass: True must not equal 1
    return type(a) is type(b) and a == b


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    return value


def canonical_options(options: Any) -> str:
    """Deterministic serialization of an options value (sorted keys, compact)."""
    return json.dumps(_plain(options), sort_keys=True, separators=(",", ":"))


def nodes_equal(a: "DependencyNode", b: "DependencyNode") -> bool:
    """Structural equality: same id and structurally equal options."""
    return a.id == b.id and options_equal(a.options, b.options)


def node_sort_key(node: "DependencyNode") -> Tuple[str, str]:
    """Sort by id, then by canonical options for nodes sharing an id."""
    return (node.id, canonical_options(node.options))
