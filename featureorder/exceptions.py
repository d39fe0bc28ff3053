"""
featureorder/exceptions.py - Installation-order exceptions

Every failure raised by the ordering engine aborts the whole computation.
No partial order is ever returned alongside one of these.
"""

from __future__ import annotations

from typing import Iterable, List, Optional


class FeatureOrderError(Exception):
    """Base exception for installation-order computations."""

    def __init__(
        self,
        message: str,
        identifiers: Optional[Iterable[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.identifiers: List[str] = list(identifiers or [])

    def __str__(self) -> str:
        return self.message


class InvalidReferenceError(FeatureOrderError):
    """Raised when an identifier cannot be resolved to a registry reference."""

    def __init__(self, identifier: str):
        super().__init__(f"Invalid reference '{identifier}'", [identifier])
        self.identifier = identifier


class ManifestNotFoundError(FeatureOrderError):
    """Raised when a hard dependency has no fetchable manifest."""

    def __init__(self, identifier: str):
        super().__init__(f"Manifest for '{identifier}' not found", [identifier])
        self.identifier = identifier


class OverrideTargetNotFoundError(FeatureOrderError):
    """Raised when an override-order entry matches no declared feature."""

    def __init__(self, identifier: str):
        super().__init__(f"Feature {identifier} not found", [identifier])
        self.identifier = identifier


class CircularDependencyError(FeatureOrderError):
    """Raised when ordering terminates with nodes left unresolved."""

    def __init__(self, identifiers: Iterable[str], message: Optional[str] = None):
        remaining = sorted(set(identifiers))
        msg = message or f"Circular dependency detected: {', '.join(remaining)}"
        super().__init__(msg, remaining)


class NoFeaturesDeclaredError(FeatureOrderError):
    """Raised when a dependsOn computation runs against a config without features."""

    def __init__(self, message: str = "No features found. Nothing to do."):
        super().__init__(message)


class InvalidDependsOnAnnotationError(FeatureOrderError):
    """Raised when a manifest's dependsOn annotation cannot be decoded."""

    def __init__(self, identifier: str, reason: str):
        super().__init__(
            f"Invalid dependsOn annotation for '{identifier}': {reason}",
            [identifier],
        )
        self.identifier = identifier
        self.reason = reason


class RegistryRequestError(FeatureOrderError):
    """Raised for registry responses other than success or not-found."""

    def __init__(
        self,
        url: str,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
    ):
        msg = message or f"Registry request to {url} failed with status {status_code}"
        super().__init__(msg)
        self.url = url
        self.status_code = status_code


class DisallowedFeatureError(FeatureOrderError):
    """Raised when a feature matches a prefix disallowed by the control manifest."""

    def __init__(self, feature_id: str, documentation_url: Optional[str] = None):
        msg = f"Cannot use the '{feature_id}' Feature since it was reported to be problematic."
        if documentation_url:
            msg += f" Please check the documentation for details: {documentation_url}"
        super().__init__(msg, [feature_id])
        self.feature_id = feature_id
        self.documentation_url = documentation_url
