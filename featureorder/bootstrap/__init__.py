"""
bootstrap/ - Configuration and logging setup

Provides:
- FeatureOrderConfig: root configuration (env + JSON file)
- setup_logging: route the engine's named loggers to console/file
"""

from .config import (
    RegistryConfig,
    ControlManifestConfig,
    LoggingConfig,
    FeatureOrderConfig,
    load_config,
    get_config,
)
from .log_setup import (
    JSONFormatter,
    setup_logging,
    setup_logging_from_config,
)

__all__ = [
    # Config
    "RegistryConfig",
    "ControlManifestConfig",
    "LoggingConfig",
    "FeatureOrderConfig",
    "load_config",
    "get_config",
    # Logging
    "JSONFormatter",
    "setup_logging",
    "setup_logging_from_config",
]
