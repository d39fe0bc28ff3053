"""
bootstrap/config.py - Engine configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import os
import json
import logging

logger = logging.getLogger("bootstrap.config")


DEFAULT_CONTROL_MANIFEST_URL = "https://containers.dev/static/devcontainer-control-manifest.json"
DEFAULT_CONTROL_MANIFEST_PATH = os.path.join(
    os.path.expanduser("~"), ".devcontainer", "cache", "control-manifest.json"
)
DEFAULT_USER_AGENT = "devcontainers-python"


@dataclass
class RegistryConfig:
    """Feature registry access configuration."""

    scheme: str = "https"
    timeout_seconds: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        return cls(
            scheme=os.getenv("FEATUREORDER_REGISTRY_SCHEME", "https"),
            timeout_seconds=float(os.getenv("FEATUREORDER_REGISTRY_TIMEOUT", "30")),
            user_agent=os.getenv("FEATUREORDER_USER_AGENT", DEFAULT_USER_AGENT),
        )


@dataclass
class ControlManifestConfig:
    """Control manifest download and cache configuration."""

    url: str = DEFAULT_CONTROL_MANIFEST_URL
    cache_path: str = DEFAULT_CONTROL_MANIFEST_PATH
    cache_ttl_seconds: int = 300  # 5 minutes
    timeout_seconds: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> "ControlManifestConfig":
        return cls(
            url=os.getenv("FEATUREORDER_CONTROL_MANIFEST_URL", DEFAULT_CONTROL_MANIFEST_URL),
            cache_path=os.getenv("FEATUREORDER_CONTROL_MANIFEST_PATH", DEFAULT_CONTROL_MANIFEST_PATH),
            cache_ttl_seconds=int(os.getenv("FEATUREORDER_CONTROL_MANIFEST_TTL", "300")),
            timeout_seconds=float(os.getenv("FEATUREORDER_CONTROL_MANIFEST_TIMEOUT", "10")),
            user_agent=os.getenv("FEATUREORDER_USER_AGENT", DEFAULT_USER_AGENT),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("FEATUREORDER_LOG_LEVEL", "INFO"),
            format=os.getenv("FEATUREORDER_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("FEATUREORDER_LOG_FILE"),
            json_logs=os.getenv("FEATUREORDER_JSON_LOGS", "false").lower() == "true",
        )


@dataclass
class FeatureOrderConfig:
    """Root configuration for the ordering engine."""

    registry: RegistryConfig = field(default_factory=RegistryConfig)
    control_manifest: ControlManifestConfig = field(default_factory=ControlManifestConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "FeatureOrderConfig":
        """Create configuration from environment variables."""
        return cls(
            registry=RegistryConfig.from_env(),
            control_manifest=ControlManifestConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "FeatureOrderConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "FeatureOrderConfig":
        """Create config from dictionary, overlaying the environment."""
        config = cls.from_env()

        for section in ("registry", "control_manifest", "logging"):
            target = getattr(config, section)
            for key, value in data.get(section, {}).items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Ignoring unknown config key: {section}.{key}")

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "registry": {
                "scheme": self.registry.scheme,
                "timeout_seconds": self.registry.timeout_seconds,
                "user_agent": self.registry.user_agent,
            },
            "control_manifest": {
                "url": self.control_manifest.url,
                "cache_path": self.control_manifest.cache_path,
                "cache_ttl_seconds": self.control_manifest.cache_ttl_seconds,
                "timeout_seconds": self.control_manifest.timeout_seconds,
            },
            "logging": {
                "level": self.logging.level,
                "log_file": self.logging.log_file,
                "json_logs": self.logging.json_logs,
            },
        }


# Global config instance
_config: Optional[FeatureOrderConfig] = None


def load_config(filepath: Optional[str] = None) -> FeatureOrderConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        FeatureOrderConfig instance
    """
    global _config

    if filepath:
        _config = FeatureOrderConfig.from_file(filepath)
    else:
        default_paths = [
            "./featureorder.json",
            os.path.expanduser("~/.featureorder/config.json"),
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = FeatureOrderConfig.from_file(path)
                return _config

        _config = FeatureOrderConfig.from_env()

    return _config


def get_config() -> FeatureOrderConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
