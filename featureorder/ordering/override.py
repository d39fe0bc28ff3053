"""
ordering/override.py - User-specified install order

Features listed in ``overrideFeatureInstallOrder`` are installed first, in
the listed order. Everything else follows in automatic order.
"""

from __future__ import annotations
from typing import List, Sequence
import logging

from ..exceptions import OverrideTargetNotFoundError
from ..features.models import ContainerConfig, FeatureSet
from .soft_order import compute_installation_order

logger = logging.getLogger("ordering.override")


def _matches(feature: FeatureSet, feature_id: str) -> bool:
    info = feature.source_information
    return info.user_feature_id_without_version == feature_id or info.user_feature_id == feature_id


def compute_override_installation_order(
    config: ContainerConfig,
    features: Sequence[FeatureSet],
) -> List[FeatureSet]:
    """
    Move the features named by the override list to the front.

    Each override entry matches a feature by its exact user id or by that id
    without its version; the first match in automatic order is taken. The
    remaining features are ordered automatically among themselves.

    Raises:
        OverrideTargetNotFoundError: An override entry matches no feature.
        CircularDependencyError: The automatic ordering found a cycle.
    """
    automatic_order = compute_installation_order(features)

    placed: List[FeatureSet] = []
    for feature_id in config.override_feature_install_order or []:
        candidates = [feature for feature in automatic_order if _matches(feature, feature_id)]
        if not candidates:
            raise OverrideTargetNotFoundError(feature_id)

        feature = next((c for c in candidates if not any(c is p for p in placed)), None)
        if feature is None:
            logger.debug(f"Override entry '{feature_id}' already placed; skipping")
            continue
        placed.append(feature)

    remaining = [feature for feature in features if not any(feature is p for p in placed)]

    logger.debug(
        f"Override order places {', '.join(f.user_feature_id for f in placed)} first"
    )
    return placed + compute_installation_order(remaining)
