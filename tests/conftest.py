"""
featureorder Test Configuration and Fixtures

Provides feature factories and an in-memory registry for ordering tests.
"""

import json
from typing import Any, Dict, List, Optional

import pytest

from featureorder.features.models import (
    Feature,
    FeatureSet,
    SourceInformation,
    SourceType,
)
from featureorder.registry.manifest import DEPENDS_ON_ANNOTATION, OCIManifest
from featureorder.registry.protocol import RegistryParams
from featureorder.registry.reference import get_ref


def build_feature(
    user_feature_id: str,
    installs_after: Optional[List[str]] = None,
    legacy_ids: Optional[List[str]] = None,
    current_id: Optional[str] = None,
    source_type: SourceType = SourceType.OCI,
) -> FeatureSet:
    """Build a FeatureSet as the configuration layer would hand it over."""
    ref = get_ref(user_feature_id) if source_type is SourceType.OCI else None
    feature_id = ref.id if ref else user_feature_id.rsplit("/", 1)[-1]
    return FeatureSet(
        features=[
            Feature(
                id=feature_id,
                installs_after=list(installs_after or []),
                legacy_ids=list(legacy_ids or []),
                current_id=current_id,
            )
        ],
        source_information=SourceInformation(
            type=source_type,
            user_feature_id=user_feature_id,
            feature_ref=ref,
        ),
    )


class FakeRegistry:
    """
    In-memory manifest store.

    ``features`` maps a resource id to its dependsOn mapping, or to None for
    a manifest without the annotation. Unknown ids have no manifest.
    """

    def __init__(self, features: Dict[str, Optional[Dict[str, Any]]]):
        self.features = features
        self.fetched: List[str] = []

    async def fetch_manifest(self, identifier: str) -> Optional[OCIManifest]:
        self.fetched.append(identifier)
        if identifier not in self.features:
            return None
        depends_on = self.features[identifier]
        annotations = {"com.github.package.type": "devcontainer_feature"}
        if depends_on is not None:
            annotations[DEPENDS_ON_ANNOTATION] = json.dumps(depends_on)
        return OCIManifest.model_validate({
            "schemaVersion": 2,
            "mediaType": "application/vnd.oci.image.manifest.v1+json",
            "layers": [],
            "annotations": annotations,
        })

    @property
    def params(self) -> RegistryParams:
        return RegistryParams(fetch_manifest=self.fetch_manifest)


@pytest.fixture
def make_feature():
    """Factory fixture for FeatureSet instances."""
    return build_feature


@pytest.fixture
def fake_registry():
    """Factory fixture for in-memory registries."""
    return FakeRegistry
