"""pierctl - lifecycle tool for pier relay nodes.

Provisions pier binaries and appchain plugins, renders their configuration
and drives configure, start, register, rule deployment, stop and clean for
Ethereum and Fabric appchains, either as local processes or in existing
containers.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Core API
from .api.orchestrator import LifecycleOrchestrator

# Data models
from .models.instance import PierInstance, AppchainEndpoint
from .models.result import LifecycleResult, InstanceState
from .models.config import ToolConfig
from .constants import ChainType, DeploymentMode, LifecycleState

# Exceptions
from .api.exceptions import (
    PierToolError,
    UnsupportedVersionError,
    FetchError,
    ValidationError,
    MissingArtifactError,
    MissingContainerIDError,
    RuleNotFoundError,
    ConfigError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "LifecycleOrchestrator",

    # Data models
    "PierInstance",
    "AppchainEndpoint",
    "LifecycleResult",
    "InstanceState",
    "ToolConfig",
    "ChainType",
    "DeploymentMode",
    "LifecycleState",

    # Exceptions
    "PierToolError",
    "UnsupportedVersionError",
    "FetchError",
    "ValidationError",
    "MissingArtifactError",
    "MissingContainerIDError",
    "RuleNotFoundError",
    "ConfigError",
]
