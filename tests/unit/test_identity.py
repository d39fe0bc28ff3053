"""
Unit tests for ordering/identity.py

Tests structural equality and canonical serialization of options.
"""

from featureorder.ordering.dependency_graph import DependencyNode
from featureorder.ordering.identity import (
    canonical_options,
    node_sort_key,
    nodes_equal,
    options_equal,
)


class TestOptionsEqual:
    """Test options_equal."""

    def test_scalars(self):
        assert options_equal("18", "18")
        assert options_equal(True, True)
        assert options_equal(None, None)
        assert not options_equal("18", "20")

    def test_mapping_key_order_ignored(self):
        assert options_equal({"a": "1", "b": True}, {"b": True, "a": "1"})

    def test_mapping_key_sets_differ(self):
        assert not options_equal({"a": "1"}, {"a": "1", "b": "2"})

    def test_mapping_vs_scalar(self):
        assert not options_equal({"version": "18"}, "18")

    def test_bool_not_equal_to_string(self):
        assert not options_equal(True, "true")

    def test_none_not_equal_to_empty_mapping(self):
        assert not options_equal(None, {})


class TestCanonicalOptions:
    """Test canonical_options."""

    def test_sorted_keys(self):
        assert canonical_options({"b": "2", "a": "1"}) == '{"a":"1","b":"2"}'

    def test_same_for_reordered_mappings(self):
        assert canonical_options({"x": True, "y": "z"}) == canonical_options({"y": "z", "x": True})

    def test_scalars(self):
        assert canonical_options(None) == "null"
        assert canonical_options(True) == "true"
        assert canonical_options("lts") == '"lts"'


class TestNodeIdentity:
    """Test nodes_equal and node_sort_key."""

    def test_equal_ignores_children(self):
        a = DependencyNode(id="ghcr.io/acme/features/a", options={"v": "1"})
        b = DependencyNode(
            id="ghcr.io/acme/features/a",
            options={"v": "1"},
            depends_on=[DependencyNode(id="ghcr.io/acme/features/b")],
        )
        assert nodes_equal(a, b)

    def test_different_options_not_equal(self):
        a = DependencyNode(id="ghcr.io/acme/features/a", options={"v": "1"})
        b = DependencyNode(id="ghcr.io/acme/features/a", options={"v": "2"})
        assert not nodes_equal(a, b)

    def test_sort_key_orders_by_id_then_options(self):
        nodes = [
            DependencyNode(id="ghcr.io/acme/features/b"),
            DependencyNode(id="ghcr.io/acme/features/a", options={"v": "2"}),
            DependencyNode(id="ghcr.io/acme/features/a", options={"v": "1"}),
        ]

        ordered = sorted(nodes, key=node_sort_key)

        assert [(n.id, n.options) for n in ordered] == [
            ("ghcr.io/acme/features/a", {"v": "1"}),
            ("ghcr.io/acme/features/a", {"v": "2"}),
            ("ghcr.io/acme/features/b", None),
        ]
