"""
ordering/installation.py - Installation order strategy selection

The install-after path picks between the user's override order and the
automatic order. The dependsOn path lives in scheduler.py; a caller uses
one strategy or the other per invocation.
"""

from __future__ import annotations
from typing import List, Sequence

from ..features.models import ContainerConfig, FeatureSet
from .override import compute_override_installation_order
from .soft_order import compute_installation_order


def compute_feature_installation_order(
    config: ContainerConfig,
    features: Sequence[FeatureSet],
) -> List[FeatureSet]:
    """Order features, honouring ``overrideFeatureInstallOrder`` when set."""
    if config.override_feature_install_order:
        return compute_override_installation_order(config, features)
    return compute_installation_order(features)
