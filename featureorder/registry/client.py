"""
registry/client.py - OCI registry manifest client

Fetches feature manifests from an OCI distribution registry using httpx.
Anonymous pulls are supported through the registry's bearer-token
challenge. Requests are issued one at a time. A request is only repeated
after a new token has been negotiated.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional, Tuple

import httpx

from ..bootstrap.config import RegistryConfig
from ..exceptions import RegistryRequestError
from .manifest import OCI_MANIFEST_MEDIA_TYPE, OCIManifest
from .reference import OCIRef, resolve_reference

logger = logging.getLogger("registry.client")

_CHALLENGE_PARAM = re.compile(r'(\w+)="([^"]*)"')


def parse_bearer_challenge(header: str) -> Optional[Dict[str, str]]:
    """Parse a ``WWW-Authenticate: Bearer realm=...,service=...`` header."""
    scheme, _, params = header.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return dict(_CHALLENGE_PARAM.findall(params))


class OCIRegistryClient:
    """
    Async manifest fetcher for OCI registries.

    Usage:
        async with OCIRegistryClient() as client:
            manifest = await client.fetch_manifest("ghcr.io/devcontainers/features/node:1")
    """

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or RegistryConfig()
        self._client = client
        self._owns_client = client is None
        self._tokens: Dict[Tuple[str, str], str] = {}

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                headers={"user-agent": self.config.user_agent},
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "OCIRegistryClient":
        self._get_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def manifest_url(self, ref: OCIRef) -> str:
        return f"{self.config.scheme}://{ref.registry}/v2/{ref.path}/manifests/{ref.version}"

    async def fetch_manifest(self, identifier: str) -> Optional[OCIManifest]:
        """
        Fetch the manifest for a feature identifier.

        Returns:
            The parsed manifest, or None when the registry reports 404.

        Raises:
            InvalidReferenceError: identifier is malformed
            RegistryRequestError: any other unsuccessful response
        """
        ref = resolve_reference(identifier)
        url = self.manifest_url(ref)

        response = await self._get(ref, url)

        if response.status_code == 404:
            logger.info(f"No manifest found for '{identifier}' at {url}")
            return None
        if response.status_code != 200:
            raise RegistryRequestError(url, response.status_code)

        return OCIManifest.model_validate(response.json())

    async def _get(self, ref: OCIRef, url: str) -> httpx.Response:
        client = self._get_client()
        headers = {"accept": OCI_MANIFEST_MEDIA_TYPE}

        token = self._tokens.get((ref.registry, ref.path))
        if token:
            headers["authorization"] = f"Bearer {token}"

        try:
            response = await client.get(url, headers=headers)
            if response.status_code != 401:
                return response

            challenge = parse_bearer_challenge(response.headers.get("www-authenticate", ""))
            if not challenge or "realm" not in challenge:
                return response

            # Cached token expired or revoked; negotiate a new one once
            if token:
                logger.debug(f"Cached token for '{ref.resource}' rejected; requesting a new one")
                del self._tokens[(ref.registry, ref.path)]

            token = await self._fetch_token(ref, challenge)
            headers["authorization"] = f"Bearer {token}"
            return await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise RegistryRequestError(url, message=f"Registry request to {url} failed: {e}") from e

    async def _fetch_token(self, ref: OCIRef, challenge: Dict[str, str]) -> str:
        realm = challenge["realm"]
        params = {"scope": challenge.get("scope", f"repository:{ref.path}:pull")}
        if "service" in challenge:
            params["service"] = challenge["service"]

        logger.debug(f"Requesting anonymous token for '{ref.resource}' from {realm}")
        response = await self._get_client().get(realm, params=params)
        if response.status_code != 200:
            raise RegistryRequestError(realm, response.status_code)

        data = response.json()
        token = data.get("token") or data.get("access_token")
        if not token:
            raise RegistryRequestError(realm, response.status_code, message=f"Token response from {realm} carried no token")

        self._tokens[(ref.registry, ref.path)] = token
        return token
