"""
control/manifest.py - Control manifest of disallowed features

The control manifest lists feature id prefixes that must not be installed.
It is downloaded at most once per cache TTL and stored on disk; the cache
file is replaced atomically so concurrent readers never see a partial
write.
"""

from __future__ import annotations

import json
import logging
import os
import time
import uuid
from pathlib import Path
from typing import Any, Iterable, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ..bootstrap.config import ControlManifestConfig
from ..exceptions import DisallowedFeatureError

logger = logging.getLogger("control.manifest")


class DisallowedFeature(BaseModel):
    """A feature id prefix that must not be used."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    feature_id_prefix: str = Field(..., alias="featureIdPrefix")
    documentation_url: Optional[str] = Field(None, alias="documentationURL")


class ControlManifest(BaseModel):
    """The downloaded control manifest."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    disallowed_features: List[DisallowedFeature] = Field(
        default_factory=list, alias="disallowedFeatures"
    )


EMPTY_CONTROL_MANIFEST = {"disallowedFeatures": []}


def sanitize_control_manifest(data: Any) -> ControlManifest:
    """Build a ControlManifest from untrusted JSON, dropping malformed entries."""
    if not isinstance(data, dict):
        return ControlManifest()

    entries = data.get("disallowedFeatures")
    if not isinstance(entries, list):
        return ControlManifest()

    disallowed = []
    for entry in entries:
        if not isinstance(entry, dict) or not isinstance(entry.get("featureIdPrefix"), str):
            continue
        url = entry.get("documentationURL")
        disallowed.append(
            DisallowedFeature(
                feature_id_prefix=entry["featureIdPrefix"],
                documentation_url=url if isinstance(url, str) else None,
            )
        )
    return ControlManifest(disallowed_features=disallowed)


def _parse(payload: bytes) -> Optional[ControlManifest]:
    try:
        return sanitize_control_manifest(json.loads(payload.decode("utf-8")))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable control manifest: {e}")
        return None


def _read_cache(path: Path) -> Optional[os.stat_result]:
    try:
        return path.stat()
    except FileNotFoundError:
        return None


def _write_atomic(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}-{uuid.uuid4()}")
    tmp_path.write_bytes(payload)
    os.replace(tmp_path, path)


async def fetch_control_manifest(
    config: ControlManifestConfig,
    client: Optional[httpx.AsyncClient] = None,
) -> bytes:
    """Download the raw control manifest."""
    headers = {"user-agent": config.user_agent, "accept": "application/json"}
    if client is not None:
        response = await client.get(config.url, headers=headers, timeout=config.timeout_seconds)
    else:
        async with httpx.AsyncClient(timeout=config.timeout_seconds) as owned:
            response = await owned.get(config.url, headers=headers)
    response.raise_for_status()
    return response.content


async def get_control_manifest(
    config: Optional[ControlManifestConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ControlManifest:
    """
    Return the control manifest, from cache when it is fresh enough.

    A failed download never raises: the stale cached copy is kept (and its
    timestamp refreshed so the server is not asked again right away), or
    an empty manifest is used when nothing was cached.
    """
    config = config or ControlManifestConfig()
    path = Path(config.cache_path)

    cache_stat = _read_cache(path)
    cached: Optional[ControlManifest] = None
    if cache_stat is not None and path.is_file():
        cached = _parse(path.read_bytes())

    if cache_stat is not None and cached is not None:
        if cache_stat.st_mtime + config.cache_ttl_seconds > time.time():
            return cached

    return await _update_control_manifest(config, path, cached, client)


async def _update_control_manifest(
    config: ControlManifestConfig,
    path: Path,
    old_manifest: Optional[ControlManifest],
    client: Optional[httpx.AsyncClient],
) -> ControlManifest:
    try:
        payload = await fetch_control_manifest(config, client)
    except httpx.HTTPError as e:
        logger.error(f"Failed to fetch control manifest: {e}")
        if old_manifest is not None:
            os.utime(path)
            return old_manifest
        payload = json.dumps(EMPTY_CONTROL_MANIFEST, indent=2).encode("utf-8")

    _write_atomic(path, payload)
    return _parse(payload) or ControlManifest()


def find_disallowed_feature(
    manifest: ControlManifest,
    feature_id: str,
) -> Optional[DisallowedFeature]:
    """
    Find the entry disallowing ``feature_id``, if any.

    A prefix matches the whole id, or a leading part of it that ends just
    before a ``/``, ``:`` or ``@``.
    """
    for entry in manifest.disallowed_features:
        prefix = entry.feature_id_prefix
        if not feature_id.startswith(prefix):
            continue
        if len(feature_id) == len(prefix) or feature_id[len(prefix)] in "/:@":
            return entry
    return None


def ensure_features_allowed(manifest: ControlManifest, feature_ids: Iterable[str]) -> None:
    """Raise DisallowedFeatureError for the first disallowed feature id."""
    for feature_id in feature_ids:
        entry = find_disallowed_feature(manifest, feature_id)
        if entry is not None:
            logger.error(f"Feature '{feature_id}' is disallowed by prefix '{entry.feature_id_prefix}'")
            raise DisallowedFeatureError(feature_id, entry.documentation_url)
