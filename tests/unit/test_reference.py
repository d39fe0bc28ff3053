"""
Unit tests for registry/reference.py

Tests OCI feature identifier parsing.
"""

import pytest

from featureorder.exceptions import InvalidReferenceError
from featureorder.registry.reference import OCIRef, get_ref, resolve_reference


class TestGetRef:
    """Test get_ref."""

    def test_tagged_reference(self):
        ref = get_ref("ghcr.io/devcontainers/features/node:1")

        assert ref == OCIRef(
            registry="ghcr.io",
            namespace="devcontainers/features",
            owner="devcontainers",
            id="node",
            resource="ghcr.io/devcontainers/features/node",
            path="devcontainers/features/node",
            version="1",
            tag="1",
            digest=None,
        )

    def test_untagged_defaults_to_latest(self):
        ref = get_ref("ghcr.io/devcontainers/features/node")

        assert ref.tag == "latest"
        assert ref.version == "latest"
        assert ref.resource == "ghcr.io/devcontainers/features/node"

    def test_digest_reference(self):
        digest = "sha256:" + "a" * 64
        ref = get_ref(f"ghcr.io/devcontainers/features/node@{digest}")

        assert ref.digest == digest
        assert ref.version == digest
        assert ref.tag is None
        assert ref.resource == "ghcr.io/devcontainers/features/node"

    def test_lowercased(self):
        ref = get_ref("GHCR.io/DevContainers/Features/Node:LTS")

        assert ref.resource == "ghcr.io/devcontainers/features/node"
        assert ref.tag == "lts"

    def test_registry_with_port(self):
        ref = get_ref("localhost:5000/acme/features/tool")

        assert ref.registry == "localhost:5000"
        assert ref.namespace == "acme/features"
        assert ref.tag == "latest"

    def test_single_segment_namespace(self):
        ref = get_ref("example.azurecr.io/acme/tool:2.0.1")

        assert ref.namespace == "acme"
        assert ref.owner == "acme"
        assert ref.path == "acme/tool"

    @pytest.mark.parametrize("identifier", [
        "node",
        "acme/node",
        "ghcr.io/acme/features/node@md5:abc",
        "ghcr.io/acme/features/node@sha256",
        "ghcr.io/acme/features/node:-bad",
        "ghcr.io/acme/features/no de",
        "ghcr.io/acme//node",
    ])
    def test_invalid(self, identifier):
        assert get_ref(identifier) is None

    def test_to_dict(self):
        data = get_ref("ghcr.io/acme/features/node:1").to_dict()
        assert data["resource"] == "ghcr.io/acme/features/node"
        assert data["version"] == "1"


class TestResolveReference:
    """Test resolve_reference."""

    def test_returns_ref(self):
        assert resolve_reference("ghcr.io/acme/features/node").id == "node"

    def test_raises_for_malformed(self):
        with pytest.raises(InvalidReferenceError) as exc_info:
            resolve_reference("node")

        assert exc_info.value.identifier == "node"
        assert str(exc_info.value) == "Invalid reference 'node'"
