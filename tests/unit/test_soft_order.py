"""
Unit tests for ordering/soft_order.py

Tests install-after ordering: edges, tie-breaking, legacy ids and cycles.
"""

import pytest

from featureorder.exceptions import CircularDependencyError
from featureorder.features.models import SourceType
from featureorder.ordering.soft_order import (
    SoftOrderNode,
    add_edge,
    compute_installation_order,
)


def ids(features):
    return [f.user_feature_id for f in features]


class TestSoftOrderNode:
    """Test edge bookkeeping on nodes."""

    def test_add_edge_updates_both_sides(self, make_feature):
        first = SoftOrderNode(feature=make_feature("ghcr.io/acme/features/a"))
        later = SoftOrderNode(feature=make_feature("ghcr.io/acme/features/b"))

        add_edge(first, later)

        assert later in first.before
        assert first in later.after
        assert not first.after
        assert not later.before

    def test_key_drops_version(self, make_feature):
        node = SoftOrderNode(feature=make_feature("ghcr.io/acme/features/a:1.2"))
        assert node.key == "ghcr.io/acme/features/a"


class TestComputeInstallationOrder:
    """Test compute_installation_order."""

    def test_empty_input(self):
        assert compute_installation_order([]) == []

    def test_independent_features_sorted_lexicographically(self, make_feature):
        b = make_feature("ghcr.io/acme/features/b")
        a = make_feature("ghcr.io/acme/features/a")

        assert ids(compute_installation_order([b, a])) == [
            "ghcr.io/acme/features/a",
            "ghcr.io/acme/features/b",
        ]

    def test_installs_after_respected(self, make_feature):
        a = make_feature("ghcr.io/acme/features/a", installs_after=["ghcr.io/acme/features/c"])
        c = make_feature("ghcr.io/acme/features/c")

        assert ids(compute_installation_order([a, c])) == [
            "ghcr.io/acme/features/c",
            "ghcr.io/acme/features/a",
        ]

    def test_versioned_user_id_matches_unversioned_hint(self, make_feature):
        node = make_feature("ghcr.io/acme/features/node:1")
        app = make_feature("ghcr.io/acme/features/app:2", installs_after=["ghcr.io/acme/features/node"])

        assert ids(compute_installation_order([app, node])) == [
            "ghcr.io/acme/features/node:1",
            "ghcr.io/acme/features/app:2",
        ]

    def test_layers_emitted_before_islands(self, make_feature):
        island = make_feature("ghcr.io/acme/features/aaa")
        root = make_feature("ghcr.io/acme/features/zzz")
        later = make_feature("ghcr.io/acme/features/yyy", installs_after=["ghcr.io/acme/features/zzz"])

        assert ids(compute_installation_order([island, later, root])) == [
            "ghcr.io/acme/features/zzz",
            "ghcr.io/acme/features/yyy",
            "ghcr.io/acme/features/aaa",
        ]

    def test_each_layer_sorted(self, make_feature):
        base = make_feature("ghcr.io/acme/features/base")
        y = make_feature("ghcr.io/acme/features/y", installs_after=["ghcr.io/acme/features/base"])
        x = make_feature("ghcr.io/acme/features/x", installs_after=["ghcr.io/acme/features/base"])
        top = make_feature(
            "ghcr.io/acme/features/a-top",
            installs_after=["ghcr.io/acme/features/x", "ghcr.io/acme/features/y"],
        )

        assert ids(compute_installation_order([top, y, x, base])) == [
            "ghcr.io/acme/features/base",
            "ghcr.io/acme/features/x",
            "ghcr.io/acme/features/y",
            "ghcr.io/acme/features/a-top",
        ]

    def test_unknown_installs_after_ignored(self, make_feature):
        a = make_feature("ghcr.io/acme/features/a", installs_after=["ghcr.io/other/features/missing"])

        assert ids(compute_installation_order([a])) == ["ghcr.io/acme/features/a"]

    def test_deterministic_across_input_orders(self, make_feature):
        features = [
            make_feature("ghcr.io/acme/features/d", installs_after=["ghcr.io/acme/features/b"]),
            make_feature("ghcr.io/acme/features/c"),
            make_feature("ghcr.io/acme/features/b"),
            make_feature("ghcr.io/acme/features/a", installs_after=["ghcr.io/acme/features/b"]),
        ]

        first = ids(compute_installation_order(features))
        second = ids(compute_installation_order(list(reversed(features))))

        assert first == second

    def test_input_not_mutated(self, make_feature):
        old = make_feature(
            "ghcr.io/acme/features/new-name",
            legacy_ids=["old-name"],
            current_id="new-name",
        )

        compute_installation_order([old])

        assert old.feature.legacy_ids == ["old-name"]
        assert old.feature.current_id == "new-name"

    def test_duplicate_key_last_wins_lookup(self, make_feature):
        x1 = make_feature("ghcr.io/acme/features/x:1")
        x2 = make_feature("ghcr.io/acme/features/x:2")
        dependent = make_feature("ghcr.io/acme/features/a-y", installs_after=["ghcr.io/acme/features/x"])

        # The hint binds to the later x; the earlier x stays in as an island
        assert ids(compute_installation_order([x1, x2, dependent])) == [
            "ghcr.io/acme/features/x:2",
            "ghcr.io/acme/features/a-y",
            "ghcr.io/acme/features/x:1",
        ]


class TestLegacyIds:
    """Test backward/forward compatible id matching."""

    def test_legacy_id_matched_when_registry_qualified(self, make_feature):
        renamed = make_feature(
            "ghcr.io/acme/features/new-name",
            legacy_ids=["old-name"],
            current_id="new-name",
        )
        dependent = make_feature(
            "ghcr.io/acme/features/app",
            installs_after=["ghcr.io/acme/features/old-name"],
        )

        assert ids(compute_installation_order([dependent, renamed])) == [
            "ghcr.io/acme/features/new-name",
            "ghcr.io/acme/features/app",
        ]

    def test_bare_legacy_id_not_matched(self, make_feature):
        renamed = make_feature(
            "ghcr.io/acme/features/zz-new",
            legacy_ids=["old-name"],
            current_id="zz-new",
        )
        dependent = make_feature("ghcr.io/acme/features/app", installs_after=["old-name"])

        # No edge: both are islands, sorted by id
        assert ids(compute_installation_order([renamed, dependent])) == [
            "ghcr.io/acme/features/app",
            "ghcr.io/acme/features/zz-new",
        ]

    def test_current_id_matched(self, make_feature):
        old = make_feature(
            "ghcr.io/acme/features/old-name",
            legacy_ids=["older-name"],
            current_id="new-name",
        )
        dependent = make_feature(
            "ghcr.io/acme/features/app",
            installs_after=["ghcr.io/acme/features/new-name"],
        )

        assert ids(compute_installation_order([dependent, old])) == [
            "ghcr.io/acme/features/old-name",
            "ghcr.io/acme/features/app",
        ]

    def test_non_registry_feature_ids_not_qualified(self, make_feature):
        local = make_feature(
            "./local-feature",
            legacy_ids=["legacy-local"],
            source_type=SourceType.FILE_PATH,
        )
        dependent = make_feature(
            "./app",
            installs_after=["legacy-local"],
            source_type=SourceType.FILE_PATH,
        )

        assert ids(compute_installation_order([dependent, local])) == [
            "./local-feature",
            "./app",
        ]

    def test_key_match_preferred_over_legacy_id(self, make_feature):
        b = make_feature("ghcr.io/acme/features/b")
        renamed = make_feature(
            "ghcr.io/acme/features/zz-new",
            legacy_ids=["b"],
            current_id="zz-new",
        )
        dependent = make_feature("ghcr.io/acme/features/a", installs_after=["ghcr.io/acme/features/b"])

        assert ids(compute_installation_order([renamed, dependent, b])) == [
            "ghcr.io/acme/features/b",
            "ghcr.io/acme/features/a",
            "ghcr.io/acme/features/zz-new",
        ]

    def test_missing_current_id_not_qualified(self, make_feature):
        renamed = make_feature("ghcr.io/acme/features/zz-renamed", legacy_ids=["old"])
        dependent = make_feature("ghcr.io/acme/features/app", installs_after=["ghcr.io/acme/features/None"])

        assert ids(compute_installation_order([renamed, dependent])) == [
            "ghcr.io/acme/features/app",
            "ghcr.io/acme/features/zz-renamed",
        ]


class TestCycles:
    """Test cycle detection."""

    def test_two_node_cycle(self, make_feature):
        a = make_feature("ghcr.io/acme/features/a", installs_after=["ghcr.io/acme/features/b"])
        b = make_feature("ghcr.io/acme/features/b", installs_after=["ghcr.io/acme/features/a"])

        with pytest.raises(CircularDependencyError) as exc_info:
            compute_installation_order([a, b])

        assert exc_info.value.identifiers == [
            "ghcr.io/acme/features/a",
            "ghcr.io/acme/features/b",
        ]
        assert "Circular dependency" in str(exc_info.value)

    def test_cycle_downstream_of_root(self, make_feature):
        root = make_feature("ghcr.io/acme/features/root")
        a = make_feature(
            "ghcr.io/acme/features/a",
            installs_after=["ghcr.io/acme/features/root", "ghcr.io/acme/features/b"],
        )
        b = make_feature("ghcr.io/acme/features/b", installs_after=["ghcr.io/acme/features/a"])

        with pytest.raises(CircularDependencyError) as exc_info:
            compute_installation_order([root, a, b])

        assert "ghcr.io/acme/features/root" not in exc_info.value.identifiers

    def test_self_reference_is_cycle(self, make_feature):
        a = make_feature("ghcr.io/acme/features/a", installs_after=["ghcr.io/acme/features/a"])

        with pytest.raises(CircularDependencyError):
            compute_installation_order([a])
